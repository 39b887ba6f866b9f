from typing import Any, Dict, Optional


class UserError(Exception):
    """
    Base exception for all user-management domain errors.

    Carries a stable machine-readable ``code`` next to the
    human-readable message so the HTTP layer can render both.
    """

    code: str = "USER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class UserValidationError(UserError):
    """
    Raised when input reaching the service is malformed
    (e.g. an unparsable date filter).
    """

    code = "VALIDATION_ERROR"


class UserNotFoundError(UserError):
    """
    Raised when an operation targets a user that does not exist
    or has been soft-deleted.
    """

    code = "USER_NOT_FOUND"

    def __init__(self, user_id: Any):
        super().__init__(
            f"User {user_id} not found",
            details={"id": str(user_id)},
        )
        self.user_id = user_id


class UserConflictError(UserError):
    """
    Raised when a uniqueness violation cannot be resolved transparently.
    """

    code = "EMAIL_EXISTS"
