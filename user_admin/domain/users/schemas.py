import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# ─────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────

class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


class CamelModel(BaseModel):
    """
    Base schema serialised with camelCase keys on the wire
    while keeping snake_case attribute names in Python.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ─────────────────────────────────────────────
# Inputs
# ─────────────────────────────────────────────

class UserFilter(CamelModel):
    """
    Optional listing constraints. Absent fields mean "no constraint".

    Dates are kept as raw strings; the service parses them so it can
    report which bound is invalid.
    """

    name: Optional[str] = Field(None, max_length=100)
    status: Optional[UserStatus] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.name or self.status or self.from_date or self.to_date)


class UserCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, examples=["Jane Doe"])
    email: EmailStr = Field(..., examples=["jane@example.com"])
    status: UserStatus = Field(..., examples=[UserStatus.ACTIVE])
    role: Optional[UserRole] = Field(None, examples=[UserRole.USER])


UPDATABLE_FIELDS = ("name", "email", "status", "role")


class UserUpdate(CamelModel):
    """
    Sparse patch. Only fields present in the payload are applied;
    ``model_dump(exclude_unset=True)`` yields exactly those.

    ``role`` may be explicitly cleared with ``null``; the other
    fields are not nullable.
    """

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None

    @field_validator("name", "email", "status", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @model_validator(mode="after")
    def _at_least_one(self):
        if not self.model_fields_set.intersection(UPDATABLE_FIELDS):
            raise ValueError("At least one field must be provided")
        return self

    def to_patch(self) -> dict:
        return self.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)


# ─────────────────────────────────────────────
# Outputs
# ─────────────────────────────────────────────

class UserRead(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: UUID
    name: str
    email: str
    status: UserStatus
    role: Optional[UserRole] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class PageMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


ItemT = TypeVar("ItemT")


@dataclass(frozen=True)
class PageResult(Generic[ItemT]):
    """
    One page of rows plus its metadata.
    """

    data: List[ItemT]
    meta: PageMeta


@dataclass(frozen=True)
class CreateResult(Generic[ItemT]):
    """
    Outcome of an idempotent create: the live user and whether
    this call inserted it.
    """

    user: ItemT
    created: bool
