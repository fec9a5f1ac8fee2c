"""Typed exceptions for access failures."""

from access.types import AccessReason


class AccessError(Exception):
    """Base class for account access errors."""


class AccountNotFoundError(AccessError):
    """No account row exists for the user ID."""


class AccessDeniedError(AccessError):
    """
    The account may not use the application right now.

    Carries the reason so the caller can route the user to the right page
    (suspended notice vs. trial-expired/subscribe).
    """

    def __init__(self, reason: AccessReason):
        self.reason = reason
        super().__init__(f"Access denied: {reason.value}")


class InvalidTokenError(AccessError):
    """The bearer token could not be verified with the identity provider."""
