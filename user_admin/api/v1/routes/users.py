from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from user_admin.api.dependencies import get_user_filter, get_user_service
from user_admin.api.schemas import ErrorResponse, UserPage
from user_admin.domain.users.schemas import UserCreate, UserFilter, UserRead, UserUpdate
from user_admin.services.user_service import UserService


router = APIRouter()


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "User not found"},
    409: {"model": ErrorResponse, "description": "Email conflict"},
}


# ─────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────

@router.get(
    "",
    response_model=UserPage,
    responses={400: ERROR_RESPONSES[400]},
    summary="List active users",
)
async def list_users(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, description="Page size, clamped to 1..100"),
    filter: Optional[UserFilter] = Depends(get_user_filter),
    service: UserService = Depends(get_user_service),
):
    """
    Paginated listing, newest first.

    Filters are passed as ``filter[name]``, ``filter[status]``,
    ``filter[fromDate]`` and ``filter[toDate]``.
    """
    result = await service.list_users(page, limit, filter)

    return UserPage(
        data=[UserRead.model_validate(user) for user in result.data],
        meta=result.meta,
    )


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
    summary="Get an active user",
)
async def get_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return UserRead.model_validate(user)


# ─────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────

@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": UserRead, "description": "User with this email already exists"},
        400: ERROR_RESPONSES[400],
        409: ERROR_RESPONSES[409],
    },
    summary="Create a user (idempotent by email)",
)
async def create_user(
    payload: UserCreate,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    result = await service.create_user(payload)

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return UserRead.model_validate(result.user)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    responses=ERROR_RESPONSES,
    summary="Partially update a user",
)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    user = await service.update_user(user_id, payload)
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
    summary="Soft-delete a user",
)
async def delete_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
):
    await service.soft_delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
