import asyncio
import argparse

from user_admin.domain.users.errors import UserConflictError
from user_admin.domain.users.schemas import UserCreate, UserRole, UserStatus
from user_admin.persistence.db import AsyncSessionLocal, init_models
from user_admin.persistence.repositories.user_repo import UserRepository
from user_admin.services.user_service import UserService

# ─────────────────────────────────────────────────────────
# CONFIGURATION (Defaults)
# ─────────────────────────────────────────────────────────
EMAIL_DOMAIN = "example.com"
STATUSES = list(UserStatus)
ROLES = [None, *UserRole]
# ─────────────────────────────────────────────────────────


def demo_payload(index: int) -> UserCreate:
    return UserCreate(
        name=f"Demo User {index:03d}",
        email=f"demo.{index:03d}@{EMAIL_DOMAIN}",
        status=STATUSES[index % len(STATUSES)],
        role=ROLES[index % len(ROLES)],
    )


async def main(count: int, create_tables: bool = False):
    if create_tables:
        print("Creating tables...")
        await init_models()

    created = existing = skipped = 0

    async with AsyncSessionLocal() as session:
        service = UserService(UserRepository(session))

        # create is idempotent by email, so re-running only fills gaps
        for index in range(1, count + 1):
            try:
                result = await service.create_user(demo_payload(index))
            except UserConflictError as exc:
                print(f"   skipped #{index}: {exc.message}")
                skipped += 1
                continue

            if result.created:
                created += 1
            else:
                existing += 1

    print(f"Done. created={created} existing={existing} skipped={skipped}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo users.")
    parser.add_argument("--count", type=int, default=25, help="Number of demo users")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables first (local development without Alembic)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.count, args.create_tables))
