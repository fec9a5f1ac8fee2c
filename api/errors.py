"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from access.exceptions import AccessDeniedError, AccountNotFoundError, InvalidTokenError
from access.types import AccessReason
from api.base import error_response, ErrorCodes

logger = logging.getLogger(__name__)

_DENIAL_CODES = {
    AccessReason.SUSPENDED: ErrorCodes.ACCOUNT_SUSPENDED,
    AccessReason.TRIAL_EXPIRED: ErrorCodes.TRIAL_EXPIRED,
}


def _json(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message).model_dump(mode="json"),
    )


def access_denied_response(exc: AccessDeniedError) -> JSONResponse:
    """403 carrying SUSPENDED or TRIAL_EXPIRED so the client can route the user."""
    code = _DENIAL_CODES.get(exc.reason, ErrorCodes.FORBIDDEN)
    return _json(403, code, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        lowered = message.lower()
        if "not found" in lowered:
            return _json(404, ErrorCodes.NOT_FOUND, message)
        if "cannot move from" in lowered:
            return _json(409, ErrorCodes.INVALID_STATUS_TRANSITION, message)
        if "restore window" in lowered:
            return _json(410, ErrorCodes.RESTORE_WINDOW_PASSED, message)
        return _json(400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(request: Request, exc: AccountNotFoundError):
        return _json(404, ErrorCodes.ACCOUNT_NOT_FOUND, str(exc))

    @app.exception_handler(AccessDeniedError)
    async def access_denied_handler(request: Request, exc: AccessDeniedError):
        return access_denied_response(exc)

    @app.exception_handler(InvalidTokenError)
    async def invalid_token_handler(request: Request, exc: InvalidTokenError):
        return _json(401, ErrorCodes.INVALID_TOKEN, "Invalid or expired token")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
