from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from user_admin.domain.users.schemas import UserStatus


@dataclass(frozen=True)
class UserCriteria:
    """
    Storage-agnostic description of which user rows to touch.

    Soft-deleted rows are excluded unless ``include_deleted`` is set.
    ``None`` fields add no constraint.
    """

    id: Optional[UUID] = None
    email: Optional[str] = None
    name_contains: Optional[str] = None
    status: Optional[UserStatus] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    include_deleted: bool = False
