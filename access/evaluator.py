"""
Access evaluation for accounts.

Pure functions over an Account snapshot and an explicit `now`. Nothing here
reads the clock or the database, so the same inputs always give the same
answer and callers can evaluate concurrently without coordination.

Precedence (first match wins):
    1. suspended        -> denied
    2. admin            -> granted
    3. active subscription -> granted
    4. trial running    -> granted, with days left
    5. otherwise        -> denied, trial expired
"""

from datetime import datetime, timedelta

from access.types import Account, AccessReason, AccessResult, SubscriptionStatus

TRIAL_DAYS = 7

_ONE_DAY = timedelta(days=1)


def days_since(start: datetime, now: datetime) -> int:
    """Whole days elapsed from start to now, floored. Never negative."""
    return max(0, (now - start) // _ONE_DAY)


def has_active_subscription(account: Account, now: datetime) -> bool:
    """
    Whether the account holds a subscription that currently grants access.

    Admin-granted subscriptions never expire and ignore the billing period.
    Paid subscriptions need a non-cancelled status and a period end in the
    future.
    """
    if account.is_admin_granted_subscription:
        return True

    if not account.is_subscriber:
        return False
    if account.subscription_status == SubscriptionStatus.CANCELLED:
        return False
    if account.subscription_current_period_end is None:
        return False
    return account.subscription_current_period_end > now


def trial_days_left(account: Account, now: datetime, trial_days: int = TRIAL_DAYS) -> int:
    """
    Days remaining in the free trial, for banners.

    Computed the same way for subscribers and non-subscribers. An account
    without a trial start date has no trial days.
    """
    if account.trial_start_date is None:
        return 0
    return max(0, trial_days - days_since(account.trial_start_date, now))


def evaluate_access(account: Account, now: datetime, trial_days: int = TRIAL_DAYS) -> AccessResult:
    """
    Decide whether the account may use the application at `now`.

    Suspension is checked before admin status, so a suspended admin is locked
    out. A missing trial start date on a non-admin account counts as a trial
    that never started and denies access.
    """
    if account.is_suspended:
        return AccessResult(access=False, reason=AccessReason.SUSPENDED)

    if account.is_admin:
        return AccessResult(access=True, reason=AccessReason.ADMIN)

    if has_active_subscription(account, now):
        return AccessResult(access=True, reason=AccessReason.SUBSCRIBER)

    if account.trial_start_date is not None:
        days_passed = days_since(account.trial_start_date, now)
        if days_passed < trial_days:
            return AccessResult(
                access=True,
                reason=AccessReason.TRIAL,
                days_left=max(0, trial_days - days_passed),
            )

    return AccessResult(access=False, reason=AccessReason.TRIAL_EXPIRED)


def needs_renewal(account: Account, now: datetime, trial_days: int = TRIAL_DAYS) -> bool:
    """
    Whether to prompt the user to subscribe or renew.

    True for a non-admin without an active subscription whose trial has run
    out. Suspension is a separate screen and is not considered here.
    """
    if account.is_admin:
        return False
    if has_active_subscription(account, now):
        return False
    return trial_days_left(account, now, trial_days) == 0
