import os

# Must be set before user_admin.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LIST_ISOLATION_LEVEL", "")
