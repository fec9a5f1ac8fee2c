"""Tests for utils/user_context.py - account identity propagation via contextvars."""

from uuid import uuid4

import pytest

from utils.user_context import (
    clear_current_user_id,
    get_current_user_id,
    peek_current_user_id,
    set_current_user_id,
    user_context,
)


class TestGetCurrentUserId:
    """Tests for get_current_user_id()."""

    def test_raises_without_set(self):
        """Must raise RuntimeError when no context is set."""
        with pytest.raises(RuntimeError, match="No user context"):
            get_current_user_id()

    def test_peek_returns_none_without_set(self):
        assert peek_current_user_id() is None


class TestSetAndClear:

    def test_set_then_get(self):
        user_id = uuid4()
        set_current_user_id(user_id)

        assert get_current_user_id() == user_id
        assert peek_current_user_id() == user_id

    def test_clear_then_get_raises(self):
        set_current_user_id(uuid4())
        clear_current_user_id()

        with pytest.raises(RuntimeError):
            get_current_user_id()


class TestUserContextManager:
    """Tests for user_context() context manager."""

    def test_sets_and_clears(self):
        user_id = uuid4()

        with user_context(user_id):
            assert get_current_user_id() == user_id

        assert peek_current_user_id() is None

    def test_restores_previous(self):
        """Nested blocks restore the outer account."""
        outer_id = uuid4()
        inner_id = uuid4()

        with user_context(outer_id):
            with user_context(inner_id):
                assert get_current_user_id() == inner_id
            assert get_current_user_id() == outer_id

    def test_clears_on_exception(self):
        with pytest.raises(ValueError):
            with user_context(uuid4()):
                raise ValueError("test exception")

        assert peek_current_user_id() is None
