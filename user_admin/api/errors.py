import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from user_admin.api.schemas import ErrorResponse
from user_admin.domain.users.errors import (
    UserConflictError,
    UserError,
    UserNotFoundError,
    UserValidationError,
)

logger = logging.getLogger(__name__)


STATUS_BY_ERROR: Dict[Type[UserError], int] = {
    UserValidationError: status.HTTP_400_BAD_REQUEST,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    UserConflictError: status.HTTP_409_CONFLICT,
}


def status_for(exc: UserError) -> int:
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map domain errors and request validation failures to JSON
    error bodies. Anything else is left to FastAPI (500).
    """

    @app.exception_handler(UserError)
    async def handle_user_error(_: Request, exc: UserError):
        status_code = status_for(exc)
        logger.debug("%s -> %s: %s", type(exc).__name__, status_code, exc.message)
        return error_response(status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(_: Request, exc: RequestValidationError):
        details = [
            {
                "loc": list(err.get("loc", ())),
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        message = details[0]["msg"] if details else "Invalid request"
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            UserValidationError.code,
            message,
            details,
        )
