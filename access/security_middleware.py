"""Access middleware for FastAPI - identity, user context and access gating."""

import logging
from typing import Callable
from uuid import UUID

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from access.exceptions import AccessDeniedError, AccountNotFoundError, InvalidTokenError
from access.service import AccountService
from api.base import error_response, ErrorCodes
from api.errors import access_denied_response
from utils.user_context import set_current_user_id, clear_current_user_id

logger = logging.getLogger(__name__)

# Verifies a bearer token with the hosted identity provider and returns the user ID.
TokenVerifier = Callable[[str], UUID]


class AccessMiddleware(BaseHTTPMiddleware):
    """
    Resolves the caller and gates the application on account access.

    For every non-public path:
    1. Reads the bearer token and verifies it with the identity provider
    2. Sets user_id in request.state and the user context (for RLS)
    3. Unless the path is access-exempt, evaluates access and returns 403
       when the account is suspended or its trial has expired
    4. Clears the context after the request

    Access-exempt paths still need a signed-in user. They let a locked-out
    user see why (trial banner, subscribe page).
    """

    PUBLIC_PATHS = [
        "/health",
        "/docs",
        "/openapi.json",
    ]

    ACCESS_EXEMPT_PATHS = [
        "/api/access",
    ]

    def __init__(self, app, verify_token: TokenVerifier, account_service: AccountService):
        super().__init__(app)
        self._verify_token = verify_token
        self._account_service = account_service

    @staticmethod
    def _matches(path: str, prefixes: list[str]) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if self._matches(path, self.PUBLIC_PATHS):
            return await call_next(request)

        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Authentication required",
                ).model_dump(mode="json"),
            )

        try:
            user_id = self._verify_token(token)
        except InvalidTokenError:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.INVALID_TOKEN,
                    "Invalid or expired token",
                ).model_dump(mode="json"),
            )

        set_current_user_id(user_id)
        request.state.user_id = user_id

        try:
            if not self._matches(path, self.ACCESS_EXEMPT_PATHS):
                try:
                    request.state.access = self._account_service.require_access(user_id)
                except AccessDeniedError as exc:
                    return access_denied_response(exc)
                except AccountNotFoundError:
                    return JSONResponse(
                        status_code=404,
                        content=error_response(
                            ErrorCodes.ACCOUNT_NOT_FOUND,
                            "Account not found",
                        ).model_dump(mode="json"),
                    )

            return await call_next(request)
        finally:
            clear_current_user_id()
