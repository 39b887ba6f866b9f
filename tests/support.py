"""Shared helpers: SQLite-backed test case and an in-memory repository."""
import itertools
import unittest
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from user_admin.domain.users.criteria import UserCriteria
from user_admin.domain.users.schemas import UserStatus
from user_admin.persistence.db import init_models
from user_admin.persistence.models.user import User
from user_admin.persistence.repositories.user_repo import UserRepository
from user_admin.services.user_service import UserService

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


# ─────────────────────────────────────────────
# SQLite-backed tests
# ─────────────────────────────────────────────

class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """
    Fresh in-memory SQLite database per test.
    """

    async def asyncSetUp(self):
        self.engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        await init_models(self.engine)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def asyncTearDown(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def service(self):
        async with self.session_factory() as session:
            yield UserService(UserRepository(session))

    async def seed(self, **overrides: Any) -> User:
        """
        Insert a user directly, with an explicit ``created_at``.
        """
        values = {
            "name": "Seed User",
            "email": f"seed.{uuid.uuid4().hex[:8]}@example.com",
            "status": UserStatus.ACTIVE,
            "role": None,
            "created_at": BASE_TIME,
        }
        values.update(overrides)

        async with self.session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            return user


# ─────────────────────────────────────────────
# In-memory repository
# ─────────────────────────────────────────────

def _duplicate_email_error() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO users ...",
        {},
        Exception("UNIQUE constraint failed: users.email"),
    )


def _matches(user: User, criteria: UserCriteria) -> bool:
    if not criteria.include_deleted and user.deleted_at is not None:
        return False
    if criteria.id is not None and user.id != criteria.id:
        return False
    if criteria.email is not None and user.email != criteria.email:
        return False
    if criteria.name_contains and criteria.name_contains.lower() not in user.name.lower():
        return False
    if criteria.status is not None and user.status != criteria.status:
        return False
    if criteria.created_from is not None and user.created_at < criteria.created_from:
        return False
    if criteria.created_to is not None and user.created_at > criteria.created_to:
        return False
    return True


class FakeUserRepository:
    """
    Dict-backed stand-in for :class:`UserRepository`.

    Enforces email uniqueness across all rows (soft-deleted included)
    and records the last paging window it was asked for.
    """

    def __init__(self):
        self.rows: dict[uuid.UUID, User] = {}
        self._clock = itertools.count()
        self.last_window: tuple[int, int] | None = None
        self.commits = 0
        self.rollbacks = 0

    def _now(self) -> datetime:
        return BASE_TIME + timedelta(minutes=next(self._clock))

    def insert(self, **values: Any) -> User:
        now = self._now()
        user = User(
            id=values.pop("id", uuid.uuid4()),
            created_at=values.pop("created_at", now),
            updated_at=values.pop("updated_at", now),
            deleted_at=values.pop("deleted_at", None),
            role=values.pop("role", None),
            **values,
        )
        self.rows[user.id] = user
        return user

    # read

    async def count(self, criteria: UserCriteria) -> int:
        return sum(1 for user in self.rows.values() if _matches(user, criteria))

    async def find_many(self, criteria: UserCriteria, *, skip: int = 0, take: int = 10):
        self.last_window = (skip, take)
        matching = [user for user in self.rows.values() if _matches(user, criteria)]
        matching.sort(key=lambda user: (user.created_at, str(user.id)), reverse=True)
        return matching[skip:skip + take]

    async def count_and_find_many(self, criteria: UserCriteria, *, skip: int, take: int):
        return await self.count(criteria), await self.find_many(criteria, skip=skip, take=take)

    async def find_first(self, criteria: UserCriteria) -> User | None:
        return next((u for u in self.rows.values() if _matches(u, criteria)), None)

    async def find_by_email(self, email: str) -> User | None:
        return await self.find_first(UserCriteria(email=email, include_deleted=True))

    async def exists(self, criteria: UserCriteria) -> bool:
        return await self.find_first(criteria) is not None

    # write

    async def create(self, **values: Any) -> User:
        if any(user.email == values["email"] for user in self.rows.values()):
            raise _duplicate_email_error()
        return self.insert(**values)

    async def update(self, id, data: Mapping[str, Any]) -> User:
        user = self.rows.get(id)
        if user is None:
            raise NoResultFound("No row was found when one was required")

        email = data.get("email")
        if email is not None and any(
            other.email == email and other.id != id for other in self.rows.values()
        ):
            raise _duplicate_email_error()

        for key, value in data.items():
            setattr(user, key, value)
        user.updated_at = self._now()
        return user

    async def update_many(self, criteria: UserCriteria, data: Mapping[str, Any]) -> int:
        matched = [user for user in self.rows.values() if _matches(user, criteria)]
        for user in matched:
            for key, value in data.items():
                setattr(user, key, value)
        return len(matched)

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1
