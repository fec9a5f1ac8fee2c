"""Account access: trial, subscription, admin and suspension gating."""

from access.config import AccessConfig
from access.evaluator import (
    TRIAL_DAYS,
    evaluate_access,
    has_active_subscription,
    needs_renewal,
    trial_days_left,
)
from access.exceptions import AccessError, AccessDeniedError, AccountNotFoundError
from access.types import Account, AccessReason, AccessResult, SubscriptionStatus
