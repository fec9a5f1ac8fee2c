"""Tests for access/evaluator.py - trial, subscription, admin and suspension gating."""

from datetime import timedelta

import pytest

from access.evaluator import (
    TRIAL_DAYS,
    days_since,
    evaluate_access,
    has_active_subscription,
    needs_renewal,
    trial_days_left,
)
from access.types import AccessReason, SubscriptionStatus


class TestSuspension:
    """Suspension wins over everything else."""

    @pytest.mark.parametrize("is_admin", [True, False])
    @pytest.mark.parametrize("granted", [True, False])
    @pytest.mark.parametrize("trial_age_days", [0, 3, 30])
    def test_suspended_is_always_denied(self, make_account, now, is_admin, granted, trial_age_days):
        account = make_account(
            is_suspended=True,
            is_admin=is_admin,
            is_subscriber=granted,
            is_admin_granted_subscription=granted,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now + timedelta(days=30),
            trial_start_date=now - timedelta(days=trial_age_days),
        )

        result = evaluate_access(account, now)

        assert result.access is False
        assert result.reason == AccessReason.SUSPENDED
        assert result.days_left is None


class TestAdmin:

    def test_admin_is_granted(self, make_account, now):
        """Admin access ignores trial and subscription state."""
        account = make_account(is_admin=True, trial_start_date=now - timedelta(days=400))

        result = evaluate_access(account, now)

        assert result.access is True
        assert result.reason == AccessReason.ADMIN

    def test_admin_without_trial_start_is_granted(self, make_account, now):
        account = make_account(is_admin=True, trial_start_date=None)
        assert evaluate_access(account, now).reason == AccessReason.ADMIN


class TestSubscription:

    def test_admin_granted_subscription_ignores_period_end(self, make_account, now):
        """Granted subscriptions never expire."""
        account = make_account(
            is_admin_granted_subscription=True,
            subscription_current_period_end=now - timedelta(days=365),
            trial_start_date=now - timedelta(days=100),
        )

        result = evaluate_access(account, now)

        assert result.access is True
        assert result.reason == AccessReason.SUBSCRIBER

    def test_admin_granted_subscription_without_period_end(self, make_account, now):
        account = make_account(is_admin_granted_subscription=True, trial_start_date=None)
        assert evaluate_access(account, now).reason == AccessReason.SUBSCRIBER

    def test_paid_subscription_in_period_is_granted(self, make_account, now):
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now + timedelta(days=1),
            trial_start_date=now - timedelta(days=100),
        )
        assert evaluate_access(account, now).reason == AccessReason.SUBSCRIBER

    def test_lapsed_subscription_falls_through_to_trial_rules(self, make_account, now):
        """Period ended yesterday and the trial is long over: expired, not subscriber."""
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now - timedelta(days=1),
            trial_start_date=now - timedelta(days=40),
        )

        result = evaluate_access(account, now)

        assert result.access is False
        assert result.reason == AccessReason.TRIAL_EXPIRED

    def test_lapsed_subscription_within_trial_gets_trial(self, make_account, now):
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now - timedelta(days=1),
            trial_start_date=now - timedelta(days=2),
        )

        result = evaluate_access(account, now)

        assert result.reason == AccessReason.TRIAL
        assert result.days_left == 5

    def test_period_end_equal_to_now_is_lapsed(self, make_account, now):
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now,
        )
        assert has_active_subscription(account, now) is False

    def test_cancelled_subscription_is_not_active(self, make_account, now):
        """Cancellation ends access even with time left in the period."""
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.CANCELLED,
            subscription_current_period_end=now + timedelta(days=20),
        )
        assert has_active_subscription(account, now) is False

    def test_subscriber_without_period_end_is_not_active(self, make_account, now):
        account = make_account(is_subscriber=True, subscription_status=SubscriptionStatus.ACTIVE)
        assert has_active_subscription(account, now) is False

    def test_period_end_without_subscriber_flag_is_not_active(self, make_account, now):
        account = make_account(
            is_subscriber=False,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now + timedelta(days=20),
        )
        assert has_active_subscription(account, now) is False


class TestTrial:

    def test_six_days_in_has_one_day_left(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=6))

        result = evaluate_access(account, now)

        assert result.access is True
        assert result.reason == AccessReason.TRIAL
        assert result.days_left == 1

    def test_eight_days_in_is_expired(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=8))

        result = evaluate_access(account, now)

        assert result.access is False
        assert result.reason == AccessReason.TRIAL_EXPIRED
        assert trial_days_left(account, now) == 0

    def test_exactly_seven_days_is_expired(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=7))
        assert evaluate_access(account, now).reason == AccessReason.TRIAL_EXPIRED

    def test_partial_day_is_floored(self, make_account, now):
        """6 days 23 hours is still day 6."""
        account = make_account(trial_start_date=now - timedelta(days=6, hours=23))

        result = evaluate_access(account, now)

        assert result.reason == AccessReason.TRIAL
        assert result.days_left == 1

    def test_first_day_has_full_trial(self, make_account, now):
        account = make_account(trial_start_date=now)
        assert evaluate_access(account, now).days_left == TRIAL_DAYS

    def test_missing_trial_start_fails_closed(self, make_account, now):
        account = make_account(trial_start_date=None)

        result = evaluate_access(account, now)

        assert result.access is False
        assert result.reason == AccessReason.TRIAL_EXPIRED
        assert trial_days_left(account, now) == 0

    def test_trial_start_in_future_counts_as_day_zero(self, make_account, now):
        account = make_account(trial_start_date=now + timedelta(days=2))
        assert evaluate_access(account, now).days_left == TRIAL_DAYS

    def test_custom_trial_length(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=10))

        result = evaluate_access(account, now, trial_days=14)

        assert result.reason == AccessReason.TRIAL
        assert result.days_left == 4

    def test_trial_days_left_ignores_subscription(self, make_account, now):
        """Banner countdown is computed the same for subscribers."""
        account = make_account(
            is_admin_granted_subscription=True,
            trial_start_date=now - timedelta(days=3),
        )
        assert trial_days_left(account, now) == 4


class TestDaysSince:

    def test_whole_days_floor(self, now):
        assert days_since(now - timedelta(days=2, hours=23, minutes=59), now) == 2

    def test_never_negative(self, now):
        assert days_since(now + timedelta(days=1), now) == 0


class TestNeedsRenewal:

    def test_expired_trial_needs_renewal(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=9))
        assert needs_renewal(account, now) is True

    def test_running_trial_does_not(self, make_account, now):
        assert needs_renewal(make_account(), now) is False

    def test_admin_does_not(self, make_account, now):
        account = make_account(is_admin=True, trial_start_date=now - timedelta(days=90))
        assert needs_renewal(account, now) is False

    def test_active_subscriber_does_not(self, make_account, now):
        account = make_account(
            is_subscriber=True,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_current_period_end=now + timedelta(days=3),
            trial_start_date=now - timedelta(days=90),
        )
        assert needs_renewal(account, now) is False


class TestPurity:

    def test_same_inputs_same_result(self, make_account, now):
        account = make_account(trial_start_date=now - timedelta(days=4))
        assert evaluate_access(account, now) == evaluate_access(account, now)
