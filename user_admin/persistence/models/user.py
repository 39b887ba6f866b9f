import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from user_admin.domain.users.schemas import UserRole, UserStatus
from user_admin.persistence.base import Base


class User(Base):
    """
    Represents a managed user record.

    Rows are never physically removed: a non-null ``deleted_at``
    marks the user as soft-deleted and hides it from active reads.
    The email stays reserved after soft deletion.
    """

    __tablename__ = "users"

    # ─────────────────────────────────────────────
    # Primary Key
    # ─────────────────────────────────────────────

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # ─────────────────────────────────────────────
    # Identity
    # ─────────────────────────────────────────────

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    # ─────────────────────────────────────────────
    # Role & Status
    # ─────────────────────────────────────────────

    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status"),
        nullable=False,
        default=UserStatus.ACTIVE
    )

    role: Mapped[UserRole | None] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=True
    )

    # ─────────────────────────────────────────────
    # Timestamps
    # ─────────────────────────────────────────────

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Soft-delete marker; null for active users"
    )

    __table_args__ = (
        Index("ix_users_deleted_at_created_at", "deleted_at", "created_at"),
    )

    # load server-generated timestamps right after INSERT
    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
