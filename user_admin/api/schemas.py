from typing import Any, List, Optional

from pydantic import BaseModel, Field

from user_admin.domain.users.schemas import CamelModel, PageMeta, UserRead


class UserPage(CamelModel):
    data: List[UserRead]
    meta: PageMeta


class ErrorResponse(BaseModel):
    code: str = Field(..., examples=["EMAIL_EXISTS"])
    message: str = Field(..., examples=["Email already exists"])
    details: Optional[Any] = None
