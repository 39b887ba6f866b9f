from typing import Optional

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from user_admin.domain.users.schemas import UserFilter
from user_admin.persistence.db import get_db_session
from user_admin.persistence.repositories.user_repo import UserRepository
from user_admin.services.user_service import UserService


FILTER_KEYS = ("name", "status", "fromDate", "toDate")


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
) -> UserService:
    """
    One service (and repository) per request session.
    """
    return UserService(UserRepository(session))


async def get_user_filter(request: Request) -> Optional[UserFilter]:
    """
    Collect ``filter[...]`` (or ``filter.<key>``) query parameters
    into a :class:`UserFilter`.

    Returns ``None`` when no filter parameter was sent.
    """
    params = request.query_params
    raw = {}

    for key in FILTER_KEYS:
        for form in (f"filter[{key}]", f"filter.{key}"):
            value = params.get(form)
            if value is not None and value != "":
                raw[key] = value
                break

    try:
        flt = UserFilter.model_validate(raw)
    except ValidationError as exc:
        errors = [
            {**err, "loc": ("query", "filter", *err["loc"])}
            for err in exc.errors(include_url=False, include_context=False)
        ]
        raise RequestValidationError(errors) from None

    return None if flt.is_empty() else flt
