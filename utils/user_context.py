"""Carry the signed-in account's user ID through the call stack.

Every tenant-scoped query (invoices, quotes, statements, recycle bin) reads
the user ID from here rather than taking it as a parameter, so a service can
never be pointed at another tenant's rows by a caller mistake.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import UUID

_current_user_id: ContextVar[UUID | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> UUID:
    """
    Return the user ID of the account the current request acts for.

    Raises RuntimeError when nothing set it: tenant-scoped code running
    outside a request is a programming error, not a state to recover from.
    """
    user_id = _current_user_id.get()
    if user_id is None:
        raise RuntimeError(
            "No user context set. Tenant-scoped services must run inside "
            "a request or a user_context() block."
        )
    return user_id


def peek_current_user_id() -> UUID | None:
    """User ID if one is set, otherwise None. For logging and middleware."""
    return _current_user_id.get()


def set_current_user_id(user_id: UUID) -> None:
    """Bind the account for the rest of this context (set by middleware)."""
    _current_user_id.set(user_id)


def clear_current_user_id() -> None:
    """Unbind the account. Middleware calls this in a finally block."""
    _current_user_id.set(None)


@contextmanager
def user_context(user_id: UUID):
    """
    Temporarily act as the given account.

    Used by tests and by maintenance jobs (e.g. the nightly recycle bin purge)
    that walk over every tenant in turn. The previous binding is restored on
    exit.

    Example:
        with user_context(account.user_id):
            recycle_bin_service.purge_expired(now_utc())
    """
    previous = _current_user_id.get()
    set_current_user_id(user_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_user_id()
        else:
            set_current_user_id(previous)
