from typing import Generic, TypeVar, Type
from sqlalchemy.ext.asyncio import AsyncSession

from user_admin.persistence.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Session plumbing shared by repositories.

    Subclasses set ``model`` and build their own queries; the
    service decides when to commit or roll back.
    """

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, instance: ModelType) -> ModelType:
        """
        Stage ``instance`` and flush so constraint violations
        surface before commit.
        """
        self.session.add(instance)
        await self.session.flush()
        return instance

    # ─────────────────────────────────────────────
    # Transaction
    # ─────────────────────────────────────────────

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
