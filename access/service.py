"""Account service - persists access state and answers access questions."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from access.config import AccessConfig
from access.evaluator import evaluate_access, trial_days_left
from access.exceptions import AccessDeniedError, AccountNotFoundError
from access.types import Account, AccessResult, SubscriptionStatus
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = (
    "user_id, email, is_admin, is_suspended, trial_start_date, is_subscriber, "
    "is_admin_granted_subscription, subscription_status, "
    "subscription_current_period_end, created_at, updated_at"
)


class AccountService:
    """
    Reads and mutates the access-relevant account fields.

    The decision itself is made by access.evaluator; this class only loads
    the snapshot, supplies the clock, and records changes in the audit log.
    Mutations here are admin or billing-webhook operations.
    """

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, config: AccessConfig | None = None):
        self.postgres = postgres
        self.audit = audit
        self.config = config or AccessConfig()

    def get(self, user_id: UUID) -> Account:
        """
        Load an account snapshot.

        Raises:
            AccountNotFoundError: If no account row exists
        """
        row = self.postgres.execute_single(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE user_id = %s",
            (user_id,)
        )
        if row is None:
            raise AccountNotFoundError(f"Account {user_id} not found")
        return Account.model_validate(row)

    def start_trial(self, user_id: UUID, email: str, now: datetime | None = None) -> Account:
        """
        Create the account row at signup, starting the trial clock.

        The trial start date is written once. Calling this again for an
        existing account returns it unchanged.
        """
        now = now or now_utc()
        rows = self.postgres.execute_returning(
            f"""
            INSERT INTO accounts (
                user_id, email, is_admin, is_suspended, trial_start_date,
                is_subscriber, is_admin_granted_subscription, subscription_status,
                subscription_current_period_end, created_at, updated_at
            ) VALUES (
                %s, lower(%s), FALSE, FALSE, %s,
                FALSE, FALSE, %s,
                NULL, %s, %s
            )
            ON CONFLICT (user_id) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
            """,
            (user_id, email, now, SubscriptionStatus.NONE.value, now, now)
        )

        if not rows:
            return self.get(user_id)

        account = Account.model_validate(rows[0])
        self.audit.log_change(
            entity_type="account",
            entity_id=user_id,
            action=AuditAction.CREATE,
            changes={"created": account.model_dump(mode="json")},
            user_id=user_id,
        )
        logger.info("Trial started for account %s", user_id)
        return account

    def evaluate(self, user_id: UUID, now: datetime | None = None) -> AccessResult:
        """Evaluate the account's current access tier."""
        account = self.get(user_id)
        return evaluate_access(account, now or now_utc(), self.config.trial_days)

    def require_access(self, user_id: UUID, now: datetime | None = None) -> AccessResult:
        """
        Evaluate access and raise if denied.

        Raises:
            AccountNotFoundError: If no account row exists
            AccessDeniedError: Carrying the denial reason
        """
        result = self.evaluate(user_id, now)
        if not result.access:
            logger.info("Access denied for %s: %s", user_id, result.reason.value)
            raise AccessDeniedError(result.reason)
        return result

    def trial_days_left(self, user_id: UUID, now: datetime | None = None) -> int:
        """Trial days remaining, for the banner."""
        account = self.get(user_id)
        return trial_days_left(account, now or now_utc(), self.config.trial_days)

    def grant_subscription(self, user_id: UUID) -> Account:
        """Give the account a non-expiring, non-billed subscription."""
        return self._update(user_id, {
            "is_subscriber": True,
            "is_admin_granted_subscription": True,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
        })

    def revoke_granted_subscription(self, user_id: UUID) -> Account:
        """Remove an admin grant. A paid subscription, if any, still applies."""
        return self._update(user_id, {"is_admin_granted_subscription": False})

    def activate_subscription(self, user_id: UUID, current_period_end: datetime) -> Account:
        """Record a paid subscription (or a renewal) running until current_period_end."""
        return self._update(user_id, {
            "is_subscriber": True,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "subscription_current_period_end": current_period_end,
        })

    def cancel_subscription(self, user_id: UUID) -> Account:
        """Mark the paid subscription cancelled. Access from it ends immediately."""
        return self._update(user_id, {
            "subscription_status": SubscriptionStatus.CANCELLED.value,
        })

    def suspend(self, user_id: UUID) -> Account:
        """Lock the account out regardless of admin or subscription status."""
        account = self._update(user_id, {"is_suspended": True})
        logger.warning("Account %s suspended", user_id)
        return account

    def reactivate(self, user_id: UUID) -> Account:
        """Lift a suspension."""
        return self._update(user_id, {"is_suspended": False})

    def _update(self, user_id: UUID, fields: dict[str, Any]) -> Account:
        current = self.get(user_id)

        set_parts = [f"{column} = %s" for column in fields]
        set_parts.append("updated_at = %s")
        params = list(fields.values()) + [now_utc(), user_id]

        rows = self.postgres.execute_returning(
            f"""
            UPDATE accounts
            SET {", ".join(set_parts)}
            WHERE user_id = %s
            RETURNING {_ACCOUNT_COLUMNS}
            """,
            tuple(params)
        )
        if not rows:
            raise AccountNotFoundError(f"Account {user_id} not found")

        updated = Account.model_validate(rows[0])

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="account",
                entity_id=user_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated
