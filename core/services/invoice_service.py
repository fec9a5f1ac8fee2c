"""
Invoice service.

Totals are recomputed from the line items on every write; callers never
supply subtotal, tax or total. Soft deletion goes through RecycleBinService.
"""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.event_bus import EventBus
from core.events import InvoiceCreated, InvoiceSent, InvoicePaid, InvoiceOverdue
from core.models import Invoice, InvoiceCreate, InvoiceStatus, LineItem, LineItemInput
from core.numbering import INVOICE_PREFIX, next_document_number
from core.totals import compute_document_totals
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


def items_json(items: list[LineItem]) -> Json:
    """Line items as a JSONB parameter."""
    return Json([item.model_dump(mode="json") for item in items])


class InvoiceService:
    """Service for invoice operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, event_bus: EventBus):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus

    def _next_number(self) -> str:
        rows = self.postgres.execute("SELECT number FROM invoices")
        return next_document_number((row["number"] for row in rows), INVOICE_PREFIX)

    def create(
        self,
        data: InvoiceCreate,
        line_items: list[LineItem] | None = None,
        invoice_id: UUID | None = None,
    ) -> Invoice:
        """
        Create an invoice with computed totals and the next invoice number.

        Args:
            data: Invoice creation data
            line_items: Stored line items to copy as they are, in place of
                data.items (used when converting a quote)
            invoice_id: Id reserved by the caller, generated if omitted

        Returns:
            Created invoice in the requested initial status
        """
        user_id = get_current_user_id()

        if line_items is None:
            line_items = [item.to_line_item() for item in data.items]
        totals = compute_document_totals(line_items).rounded()

        invoice_id = invoice_id or uuid4()
        number = self._next_number()
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO invoices (
                id, user_id, number, customer_id, customer_name,
                date, due_date, items,
                subtotal, tax_amount, total,
                status, notes, quote_id, is_deleted,
                created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s, FALSE,
                %s, %s
            )
            RETURNING *
            """,
            (
                invoice_id, user_id, number, data.customer_id, data.customer_name,
                data.date, data.due_date, items_json(line_items),
                totals.subtotal, totals.tax_amount, totals.total,
                data.status.value, data.notes, data.quote_id,
                now, now
            )
        )[0]

        invoice = Invoice.model_validate(row)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice.id,
            action=AuditAction.CREATE,
            changes={"created": invoice.model_dump(mode="json")}
        )
        logger.info("Created invoice %s (%s)", invoice.number, invoice.id)

        self.event_bus.publish(InvoiceCreated.create(invoice=invoice))

        return invoice

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        """Invoice if found and not in the recycle bin, else None."""
        row = self.postgres.execute_single(
            "SELECT * FROM invoices WHERE id = %s AND is_deleted = FALSE",
            (invoice_id,)
        )

        if row is None:
            return None

        return Invoice.model_validate(row)

    def list_all(self, limit: int = 100) -> list[Invoice]:
        """Live invoices, newest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM invoices
            WHERE is_deleted = FALSE
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (limit,)
        )
        return [Invoice.model_validate(row) for row in rows]

    def list_for_customer(self, customer_id: UUID) -> list[Invoice]:
        """All live invoices for a customer, oldest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM invoices
            WHERE customer_id = %s AND is_deleted = FALSE
            ORDER BY date ASC
            """,
            (customer_id,)
        )
        return [Invoice.model_validate(row) for row in rows]

    def update_items(self, invoice_id: UUID, items: list[LineItemInput]) -> Invoice:
        """
        Replace the line items and recompute totals.

        Raises:
            ValueError: If invoice not found or already paid
        """
        current = self.get_by_id(invoice_id)
        if current is None:
            raise ValueError(f"Invoice {invoice_id} not found")

        if current.status == InvoiceStatus.PAID:
            raise ValueError(f"Invoice {invoice_id} is paid and cannot be edited")

        line_items = [item.to_line_item() for item in items]
        totals = compute_document_totals(line_items).rounded()

        row = self.postgres.execute_returning(
            """
            UPDATE invoices
            SET items = %s, subtotal = %s, tax_amount = %s, total = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (items_json(line_items), totals.subtotal, totals.tax_amount, totals.total,
             now_utc(), invoice_id)
        )[0]

        updated = Invoice.model_validate(row)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.UPDATE,
            changes=compute_changes(
                current.model_dump(mode="json"),
                updated.model_dump(mode="json")
            )
        )

        return updated

    def send(self, invoice_id: UUID) -> Invoice:
        """Mark a draft invoice as sent."""
        updated = self._transition(invoice_id, InvoiceStatus.SENT)
        self.event_bus.publish(InvoiceSent.create(invoice=updated))
        return updated

    def mark_paid(self, invoice_id: UUID) -> Invoice:
        """Mark an invoice paid. Paid is terminal."""
        updated = self._transition(invoice_id, InvoiceStatus.PAID)
        self.event_bus.publish(InvoicePaid.create(invoice=updated))
        return updated

    def mark_overdue(self, invoice_id: UUID) -> Invoice:
        """Called by the due-date scheduler for invoices past due."""
        updated = self._transition(invoice_id, InvoiceStatus.OVERDUE)
        self.event_bus.publish(InvoiceOverdue.create(invoice=updated))
        return updated

    def list_past_due(self, now: datetime) -> list[Invoice]:
        """Invoices the scheduler should mark overdue."""
        rows = self.postgres.execute(
            """
            SELECT * FROM invoices
            WHERE status IN (%s, %s) AND due_date < %s AND is_deleted = FALSE
            ORDER BY due_date ASC
            """,
            (InvoiceStatus.SENT.value, InvoiceStatus.UNPAID.value, now)
        )
        return [Invoice.model_validate(row) for row in rows]

    def _transition(self, invoice_id: UUID, target: InvoiceStatus) -> Invoice:
        """
        Move an invoice to a new status.

        Raises:
            ValueError: If invoice not found or the transition is not allowed
        """
        current = self.get_by_id(invoice_id)
        if current is None:
            raise ValueError(f"Invoice {invoice_id} not found")

        if not current.status.can_transition_to(target):
            raise ValueError(
                f"Invoice {invoice_id} cannot move from {current.status.value} to {target.value}"
            )

        row = self.postgres.execute_returning(
            """
            UPDATE invoices
            SET status = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (target.value, now_utc(), invoice_id)
        )[0]

        updated = Invoice.model_validate(row)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.UPDATE,
            changes={"status": {"old": current.status.value, "new": target.value}}
        )

        return updated
