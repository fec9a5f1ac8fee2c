"""
Statement service.

Generates a statement from a customer's live invoices. The statement stores
the IDs of the invoices it covers and one line per invoice, so re-rendering
it later does not depend on invoices changing status afterwards.
"""

import logging
from uuid import UUID, uuid4

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.event_bus import EventBus
from core.events import StatementGenerated
from core.models import Statement, StatementCreate, StatementSummary
from core.numbering import STATEMENT_PREFIX, next_document_number
from core.services.invoice_service import InvoiceService, items_json
from core.statements import (
    select_unpaid_invoices_for_statement,
    statement_lines,
    statement_period,
    summarize_statement,
)
from core.totals import compute_document_totals
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class StatementService:
    """Service for statement operations."""

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

    def preview(self, data: StatementCreate) -> StatementSummary:
        """Count and outstanding total the statement would show, without saving."""
        period_start, period_end = statement_period(
            data.period, data.date, data.start_date, data.end_date
        )
        selected = select_unpaid_invoices_for_statement(
            self.invoice_service.list_for_customer(data.customer_id),
            data.customer_id,
            period_start,
            period_end,
        )
        return summarize_statement(selected)

    def generate(self, data: StatementCreate) -> Statement:
        """
        Build and save a statement for the customer and period.

        A period with no unpaid invoices still produces a (zero) statement.
        """
        user_id = get_current_user_id()

        period_start, period_end = statement_period(
            data.period, data.date, data.start_date, data.end_date
        )
        selected = select_unpaid_invoices_for_statement(
            self.invoice_service.list_for_customer(data.customer_id),
            data.customer_id,
            period_start,
            period_end,
        )

        items = statement_lines(selected)
        totals = compute_document_totals(items).rounded()

        rows = self.postgres.execute("SELECT number FROM statements")
        number = next_document_number((row["number"] for row in rows), STATEMENT_PREFIX)
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO statements (
                id, user_id, number, customer_id, customer_name,
                date, start_date, end_date, period, items, invoice_ids,
                subtotal, tax_amount, total,
                notes, is_deleted, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s,
                %s, %s, %s, %s, %s, %s,
                %s, %s, %s,
                %s, FALSE, %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), user_id, number, data.customer_id, data.customer_name,
                data.date, period_start, period_end, data.period.value,
                items_json(items), Json([str(invoice.id) for invoice in selected]),
                totals.subtotal, totals.tax_amount, totals.total,
                data.notes, now, now
            )
        )[0]

        statement = Statement.model_validate(row)

        self.audit.log_change(
            entity_type="statement",
            entity_id=statement.id,
            action=AuditAction.CREATE,
            changes={"created": statement.model_dump(mode="json")}
        )
        logger.info(
            "Generated statement %s covering %d invoices", statement.number, len(selected)
        )

        self.event_bus.publish(StatementGenerated.create(statement=statement))

        return statement

    def get_by_id(self, statement_id: UUID) -> Statement | None:
        row = self.postgres.execute_single(
            "SELECT * FROM statements WHERE id = %s AND is_deleted = FALSE",
            (statement_id,)
        )
        return Statement.model_validate(row) if row else None

    def list_all(self, limit: int = 100) -> list[Statement]:
        rows = self.postgres.execute(
            """
            SELECT * FROM statements
            WHERE is_deleted = FALSE
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (limit,)
        )
        return [Statement.model_validate(row) for row in rows]
