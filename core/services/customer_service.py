"""
Customer service.

Customers are soft deleted through RecycleBinService, which flips is_deleted;
every read here skips those rows.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.models import Customer, CustomerCreate, CustomerUpdate
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {"name", "email", "phone", "address"}


class CustomerService:
    """Service for customer operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            data: Customer creation data

        Returns:
            Created customer
        """
        user_id = get_current_user_id()
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO customers (
                id, user_id, name, email, phone, address,
                is_deleted, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s,
                FALSE, %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), user_id, data.name, data.email, data.phone, data.address,
                now, now
            )
        )[0]

        customer = Customer.model_validate(row)

        self.audit.log_change(
            entity_type="customer",
            entity_id=customer.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )
        logger.info("Created customer %s", customer.id)

        return customer

    def get_by_id(self, customer_id: UUID) -> Customer | None:
        """Customer if found and not in the recycle bin, else None."""
        row = self.postgres.execute_single(
            "SELECT * FROM customers WHERE id = %s AND is_deleted = FALSE",
            (customer_id,)
        )

        if row is None:
            return None

        return Customer.model_validate(row)

    def list_all(self, limit: int = 100) -> list[Customer]:
        """Live customers, newest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM customers
            WHERE is_deleted = FALSE
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (limit,)
        )
        return [Customer.model_validate(row) for row in rows]

    def update(self, customer_id: UUID, data: CustomerUpdate) -> Customer:
        """
        Update customer fields.

        Documents keep the customer_name they were issued with; renaming a
        customer does not rewrite them.

        Raises:
            ValueError: If customer not found
        """
        current = self.get_by_id(customer_id)
        if current is None:
            raise ValueError(f"Customer {customer_id} not found")

        updates = {
            k: v for k, v in data.model_dump(exclude_none=True).items()
            if k in _UPDATABLE_COLUMNS
        }
        if not updates:
            return current

        set_parts = [f"{field} = %s" for field in updates]
        params = list(updates.values())

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(customer_id)

        row = self.postgres.execute_returning(
            f"""
            UPDATE customers
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING *
            """,
            tuple(params)
        )[0]

        updated = Customer.model_validate(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="customer",
                entity_id=customer_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated
