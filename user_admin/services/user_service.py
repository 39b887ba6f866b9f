import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from user_admin.domain.users.criteria import UserCriteria
from user_admin.domain.users.errors import (
    UserConflictError,
    UserNotFoundError,
    UserValidationError,
)
from user_admin.domain.users.pagination import build_meta, page_window
from user_admin.domain.users.schemas import (
    CreateResult,
    PageResult,
    UserCreate,
    UserFilter,
    UserUpdate,
)
from user_admin.persistence.errors import (
    StorageErrorKind,
    classify_storage_error,
    is_unique_violation,
)
from user_admin.persistence.models.user import User
from user_admin.persistence.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


_DATETIME = TypeAdapter(datetime)


def _parse_date(field: str, value: str) -> datetime:
    try:
        parsed = _DATETIME.validate_python(value.strip())
    except ValidationError:
        raise UserValidationError(
            f"{field} must be an ISO Date",
            details={"field": field, "value": value},
        ) from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def build_criteria(filter: UserFilter | None) -> UserCriteria:
    """
    Turn a listing filter into storage criteria.

    Raises :class:`UserValidationError` for unparsable dates or an
    inverted date range. Soft-deleted users are always excluded.
    """
    if filter is None:
        return UserCriteria()

    created_from = (
        _parse_date("filter.fromDate", filter.from_date) if filter.from_date else None
    )
    created_to = (
        _parse_date("filter.toDate", filter.to_date) if filter.to_date else None
    )

    if created_from and created_to and created_from > created_to:
        raise UserValidationError(
            "filter.fromDate must be <= filter.toDate",
            details={"fromDate": filter.from_date, "toDate": filter.to_date},
        )

    return UserCriteria(
        name_contains=filter.name or None,
        status=filter.status,
        created_from=created_from,
        created_to=created_to,
    )


class UserService:
    """
    Query and mutation service for user records.

    The repository is injected so tests can substitute an
    in-memory implementation.
    """

    def __init__(self, repository: UserRepository):
        self.repo = repository

    # ─────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────

    async def list_users(
        self,
        page: Any,
        limit: Any,
        filter: UserFilter | None = None,
    ) -> PageResult[User]:
        """
        Return one page of active users, newest first.

        The fetch uses the requested page even when it lies beyond the
        last page (yielding no rows); the reported ``meta.page`` is
        clamped to ``total_pages``.
        """
        window = page_window(page, limit)
        criteria = build_criteria(filter)

        total, rows = await self.repo.count_and_find_many(
            criteria,
            skip=window.skip,
            take=window.limit,
        )

        return PageResult(
            data=list(rows),
            meta=build_meta(window, total),
        )

    async def get_user(self, user_id: UUID) -> User:
        user = await self.repo.find_first(UserCriteria(id=user_id))
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    # ─────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────

    async def create_user(self, payload: UserCreate) -> CreateResult[User]:
        """
        Create a user, idempotent by email.

        A second create with the email of a live user returns that user
        with ``created=False``. An email held by a soft-deleted user is a
        conflict.
        """
        try:
            user = await self.repo.create(
                name=payload.name,
                email=payload.email,
                status=payload.status,
                role=payload.role,
            )
            await self.repo.commit()
        except Exception as exc:
            if not is_unique_violation(exc, "email"):
                raise

            await self.repo.rollback()
            existing = await self.repo.find_by_email(payload.email)

            if existing is None:
                logger.error(
                    "Duplicate email %s reported but no row found; re-raising",
                    payload.email,
                )
                raise

            if existing.deleted_at is not None:
                logger.warning(
                    "Refusing to create user: email %s belongs to soft-deleted user %s",
                    payload.email,
                    existing.id,
                )
                raise UserConflictError(
                    "Email already exists (soft-deleted user)",
                    code="EMAIL_SOFT_DELETED",
                    details={"email": payload.email},
                ) from None

            logger.info("User %s already exists for %s", existing.id, payload.email)
            return CreateResult(user=existing, created=False)

        logger.info("Created user %s", user.id)
        return CreateResult(user=user, created=True)

    async def update_user(self, user_id: UUID, patch: UserUpdate) -> User:
        """
        Apply a sparse patch to an active user.

        Only fields present in ``patch`` are written.
        """
        if not await self.repo.exists(UserCriteria(id=user_id)):
            raise UserNotFoundError(user_id)

        data = patch.to_patch()

        try:
            user = await self.repo.update(user_id, data)
            await self.repo.commit()
        except Exception as exc:
            kind = classify_storage_error(exc)

            if kind is StorageErrorKind.UNIQUE_VIOLATION:
                await self.repo.rollback()
                raise UserConflictError(
                    "Email already exists",
                    details={"email": data.get("email")},
                ) from None

            if kind is StorageErrorKind.RECORD_NOT_FOUND:
                await self.repo.rollback()
                raise UserNotFoundError(user_id) from None

            raise

        logger.info("Updated user %s (fields: %s)", user_id, ", ".join(sorted(data)))
        return user

    async def soft_delete_user(self, user_id: UUID) -> None:
        """
        Soft-delete a user. Deleting an already deleted user succeeds;
        an unknown id raises :class:`UserNotFoundError`.
        """
        affected = await self.repo.update_many(
            UserCriteria(id=user_id),
            {"deleted_at": datetime.now(timezone.utc)},
        )
        await self.repo.commit()

        if affected > 0:
            logger.info("Soft-deleted user %s", user_id)
            return

        if not await self.repo.exists(UserCriteria(id=user_id, include_deleted=True)):
            raise UserNotFoundError(user_id)

        logger.debug("User %s was already soft-deleted", user_id)
