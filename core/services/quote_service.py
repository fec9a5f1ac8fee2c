"""
Quote service.

Quotes share invoice pricing rules. An accepted or sent quote can be turned
into an unpaid invoice carrying the same line items.
"""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.event_bus import EventBus
from core.events import QuoteSent, QuoteAccepted, QuoteConverted
from core.models import (
    Invoice, InvoiceCreate, InvoiceStatus,
    LineItemInput, Quote, QuoteCreate, QuoteStatus,
)
from core.numbering import QUOTE_PREFIX, next_document_number
from core.services.invoice_service import InvoiceService, items_json
from core.totals import compute_document_totals
from utils.user_context import get_current_user_id
from utils.timezone import now_utc, to_utc

logger = logging.getLogger(__name__)

_CONVERTIBLE = {QuoteStatus.SENT, QuoteStatus.ACCEPTED}


class QuoteService:
    """Service for quote operations."""

    def __init__(
        self,
        postgres: PostgresClient,
        audit: AuditLogger,
        event_bus: EventBus,
        invoice_service: InvoiceService,
    ):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus
        self.invoice_service = invoice_service

    def create(self, data: QuoteCreate) -> Quote:
        """Create a draft quote with computed totals and the next quote number."""
        user_id = get_current_user_id()

        items = [item.to_line_item() for item in data.items]
        totals = compute_document_totals(items).rounded()

        rows = self.postgres.execute("SELECT number FROM quotes")
        number = next_document_number((row["number"] for row in rows), QUOTE_PREFIX)
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO quotes (
                id, user_id, number, customer_id, customer_name,
                date, valid_until, items,
                subtotal, tax_amount, total,
                status, notes, is_deleted,
                created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s,
                %s, %s, FALSE,
                %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), user_id, number, data.customer_id, data.customer_name,
                data.date, data.valid_until, items_json(items),
                totals.subtotal, totals.tax_amount, totals.total,
                QuoteStatus.DRAFT.value, data.notes,
                now, now
            )
        )[0]

        quote = Quote.model_validate(row)

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote.id,
            action=AuditAction.CREATE,
            changes={"created": quote.model_dump(mode="json")}
        )

        return quote

    def get_by_id(self, quote_id: UUID) -> Quote | None:
        """Quote if found and not in the recycle bin, else None."""
        row = self.postgres.execute_single(
            "SELECT * FROM quotes WHERE id = %s AND is_deleted = FALSE",
            (quote_id,)
        )
        return Quote.model_validate(row) if row else None

    def list_all(self, limit: int = 100) -> list[Quote]:
        rows = self.postgres.execute(
            """
            SELECT * FROM quotes
            WHERE is_deleted = FALSE
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (limit,)
        )
        return [Quote.model_validate(row) for row in rows]

    def update_items(self, quote_id: UUID, items: list[LineItemInput]) -> Quote:
        """
        Replace the line items and recompute totals.

        Raises:
            ValueError: If quote not found or no longer a draft/sent quote
        """
        current = self.get_by_id(quote_id)
        if current is None:
            raise ValueError(f"Quote {quote_id} not found")

        if current.status.is_terminal:
            raise ValueError(f"Quote {quote_id} is {current.status.value} and cannot be edited")

        line_items = [item.to_line_item() for item in items]
        totals = compute_document_totals(line_items).rounded()

        row = self.postgres.execute_returning(
            """
            UPDATE quotes
            SET items = %s, subtotal = %s, tax_amount = %s, total = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (items_json(line_items), totals.subtotal, totals.tax_amount, totals.total,
             now_utc(), quote_id)
        )[0]

        updated = Quote.model_validate(row)

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote_id,
            action=AuditAction.UPDATE,
            changes=compute_changes(
                current.model_dump(mode="json"),
                updated.model_dump(mode="json")
            )
        )

        return updated

    def send(self, quote_id: UUID) -> Quote:
        updated = self._transition(quote_id, QuoteStatus.SENT)
        self.event_bus.publish(QuoteSent.create(quote=updated))
        return updated

    def accept(self, quote_id: UUID) -> Quote:
        updated = self._transition(quote_id, QuoteStatus.ACCEPTED)
        self.event_bus.publish(QuoteAccepted.create(quote=updated))
        return updated

    def reject(self, quote_id: UUID) -> Quote:
        return self._transition(quote_id, QuoteStatus.REJECTED)

    def expire(self, quote_id: UUID) -> Quote:
        """Called by the validity scheduler once valid_until has passed."""
        return self._transition(quote_id, QuoteStatus.EXPIRED)

    def convert_to_invoice(self, quote_id: UUID, due_date: datetime) -> Invoice:
        """
        Raise an unpaid invoice from a sent or accepted quote.

        The invoice copies the quote's stored line items as they are (totals
        are recomputed) and records the quote it came from. A quote converts
        at most once: the quote row is claimed with a conditional update
        before the invoice is written, so a concurrent convert finds it taken.

        Raises:
            ValueError: If quote not found, already converted, rejected/expired,
                or due_date is naive
        """
        due_date = to_utc(due_date)

        quote = self.get_by_id(quote_id)
        if quote is None:
            raise ValueError(f"Quote {quote_id} not found")

        if quote.is_converted:
            raise ValueError(f"Quote {quote_id} was already converted to an invoice")

        if quote.status not in _CONVERTIBLE:
            raise ValueError(f"Quote {quote_id} is {quote.status.value} and cannot be converted")

        invoice_id = uuid4()
        claimed = self.postgres.execute_returning(
            """
            UPDATE quotes
            SET converted_invoice_id = %s, updated_at = %s
            WHERE id = %s AND converted_invoice_id IS NULL AND is_deleted = FALSE
              AND status IN (%s, %s)
            RETURNING *
            """,
            (invoice_id, now_utc(), quote_id, QuoteStatus.SENT.value, QuoteStatus.ACCEPTED.value)
        )
        if not claimed:
            raise ValueError(f"Quote {quote_id} was already converted to an invoice")
        updated = Quote.model_validate(claimed[0])

        now = now_utc()
        try:
            invoice = self.invoice_service.create(
                InvoiceCreate(
                    customer_id=quote.customer_id,
                    customer_name=quote.customer_name,
                    date=now,
                    due_date=max(due_date, now),
                    status=InvoiceStatus.UNPAID,
                    notes=quote.notes,
                    quote_id=quote.id,
                ),
                line_items=quote.items,
                invoice_id=invoice_id,
            )
        except Exception:
            logger.exception("Invoice for quote %s failed, releasing the quote", quote.number)
            self.postgres.execute_rowcount(
                """
                UPDATE quotes
                SET converted_invoice_id = NULL
                WHERE id = %s AND converted_invoice_id = %s
                """,
                (quote_id, invoice_id)
            )
            raise

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote_id,
            action=AuditAction.UPDATE,
            changes={"converted_invoice_id": {"old": None, "new": str(invoice.id)}}
        )
        logger.info("Converted quote %s to invoice %s", quote.number, invoice.number)

        self.event_bus.publish(QuoteConverted.create(quote=updated, invoice=invoice))

        return invoice

    def _transition(self, quote_id: UUID, target: QuoteStatus) -> Quote:
        """
        Move a quote to a new status.

        Raises:
            ValueError: If quote not found or the transition is not allowed
        """
        current = self.get_by_id(quote_id)
        if current is None:
            raise ValueError(f"Quote {quote_id} not found")

        if not current.status.can_transition_to(target):
            raise ValueError(
                f"Quote {quote_id} cannot move from {current.status.value} to {target.value}"
            )

        row = self.postgres.execute_returning(
            """
            UPDATE quotes
            SET status = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (target.value, now_utc(), quote_id)
        )[0]

        updated = Quote.model_validate(row)

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote_id,
            action=AuditAction.UPDATE,
            changes={"status": {"old": current.status.value, "new": target.value}}
        )

        return updated
