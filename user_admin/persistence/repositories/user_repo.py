from typing import Any, Mapping, Sequence

from sqlalchemy import ColumnElement, and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from user_admin.config import settings
from user_admin.domain.users.criteria import UserCriteria
from user_admin.persistence.repositories.base import BaseRepository
from user_admin.persistence.models.user import User


def where_clause(criteria: UserCriteria) -> ColumnElement[bool]:
    """
    Translate :class:`UserCriteria` into a SQL predicate.
    """
    clauses: list[ColumnElement[bool]] = []

    if not criteria.include_deleted:
        clauses.append(User.deleted_at.is_(None))

    if criteria.id is not None:
        clauses.append(User.id == criteria.id)

    if criteria.email is not None:
        clauses.append(User.email == criteria.email)

    if criteria.name_contains:
        # LIKE wildcards in the search text match literally
        clauses.append(User.name.icontains(criteria.name_contains, autoescape=True))

    if criteria.status is not None:
        clauses.append(User.status == criteria.status)

    if criteria.created_from is not None:
        clauses.append(User.created_at >= criteria.created_from)

    if criteria.created_to is not None:
        clauses.append(User.created_at <= criteria.created_to)

    return and_(*clauses)


class UserRepository(BaseRepository[User]):
    """
    Repository for User model.

    Storage errors (``IntegrityError``, ``NoResultFound``) are raised
    unchanged; interpreting them is the service's job.
    """

    model = User

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    # ─────────────────────────────────────────────
    # Read
    # ─────────────────────────────────────────────

    async def count(self, criteria: UserCriteria) -> int:
        stmt = select(func.count()).select_from(User).where(where_clause(criteria))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def find_many(
        self,
        criteria: UserCriteria,
        *,
        skip: int = 0,
        take: int = 10,
    ) -> Sequence[User]:
        """
        Fetch one page, newest first.
        """
        stmt = (
            select(User)
            .where(where_clause(criteria))
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(take)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_and_find_many(
        self,
        criteria: UserCriteria,
        *,
        skip: int,
        take: int,
    ) -> tuple[int, Sequence[User]]:
        """
        Count and fetch against the same criteria inside one transaction.

        When the session has not started a transaction yet, it is opened
        at ``settings.LIST_ISOLATION_LEVEL`` so both statements observe
        the same snapshot.
        """
        if settings.LIST_ISOLATION_LEVEL and not self.session.in_transaction():
            await self.session.connection(
                execution_options={"isolation_level": settings.LIST_ISOLATION_LEVEL}
            )

        total = await self.count(criteria)
        rows = await self.find_many(criteria, skip=skip, take=take)
        return total, rows

    async def find_first(self, criteria: UserCriteria) -> User | None:
        stmt = select(User).where(where_clause(criteria)).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        """
        Fetch a user by email, soft-deleted or not.
        """
        return await self.find_first(UserCriteria(email=email, include_deleted=True))

    async def exists(self, criteria: UserCriteria) -> bool:
        stmt = select(User.id).where(where_clause(criteria)).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    # ─────────────────────────────────────────────
    # Write
    # ─────────────────────────────────────────────

    async def create(self, **values: Any) -> User:
        """
        Insert a new user. Raises ``IntegrityError`` on duplicate email.
        """
        return await self.add(User(**values))

    async def update(self, id, data: Mapping[str, Any]) -> User:
        """
        Apply ``data`` to the user with ``id`` and return the fresh row.

        ``updated_at`` is always refreshed. Raises ``NoResultFound``
        when no row matches.
        """
        stmt = (
            update(User)
            .where(User.id == id)
            .values(**data, updated_at=func.now())
            .returning(User)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update_many(self, criteria: UserCriteria, data: Mapping[str, Any]) -> int:
        """
        Bulk update; returns the number of affected rows.
        """
        stmt = (
            update(User)
            .where(where_clause(criteria))
            .values(**data)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
