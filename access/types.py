"""Pydantic models for account access."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SubscriptionStatus(str, Enum):
    """Billing state of a paid subscription."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    NONE = "none"


class AccessReason(str, Enum):
    """Why access was granted or denied. Exactly one per evaluation."""

    SUSPENDED = "suspended"
    ADMIN = "admin"
    SUBSCRIBER = "subscriber"
    TRIAL = "trial"
    TRIAL_EXPIRED = "trial_expired"


class Account(BaseModel):
    """The access-relevant slice of a user record."""

    user_id: UUID
    email: EmailStr
    is_admin: bool = False
    is_suspended: bool = False
    trial_start_date: datetime | None = None  # Set once at signup
    is_subscriber: bool = False
    is_admin_granted_subscription: bool = False
    subscription_status: SubscriptionStatus = SubscriptionStatus.NONE
    subscription_current_period_end: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True, "frozen": True}


class AccessResult(BaseModel):
    """Outcome of evaluate_access."""

    access: bool
    reason: AccessReason
    days_left: int | None = Field(None, ge=0, description="Only set for trial access")

    model_config = {"frozen": True}
