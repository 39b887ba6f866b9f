from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from user_admin.config import settings
from user_admin.persistence.base import Base

# ─────────────────────────────────────────────────────────────
# Database Engine
# ─────────────────────────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# ─────────────────────────────────────────────────────────────
# Session Factory
# ─────────────────────────────────────────────────────────────

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,       # rows are serialised after commit
    autoflush=False,
    autocommit=False,
)

# ─────────────────────────────────────────────────────────────
# Dependency for FastAPI
# ─────────────────────────────────────────────────────────────

async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session; commits are left to the service layer.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine = engine) -> None:
    """
    Create all tables registered on ``Base``.

    Development and test helper; deployed databases are managed
    by Alembic.
    """
    # registers the users table on Base.metadata
    from user_admin.persistence.models import user  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
