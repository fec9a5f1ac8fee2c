"""
Statement generation rules.

Selects the invoices a statement covers and turns them into statement lines.
Pure functions; StatementService does the loading and saving.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from core.models.invoice import Invoice, InvoiceStatus
from core.models.line_item import LineItem
from core.models.statement import StatementPeriod, StatementSummary
from core.money import ZERO
from utils.timezone import end_of_day, start_of_day

STATEMENT_STATUSES = frozenset({InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE})


def select_unpaid_invoices_for_statement(
    invoices: Iterable[Invoice],
    customer_id: UUID,
    period_start: datetime,
    period_end: datetime,
) -> list[Invoice]:
    """
    Pick a customer's unpaid and overdue invoices dated within the period.

    The upper bound is the end of period_end's calendar day, so an invoice
    dated any time on the last day is included. Results are ordered by date,
    then number.
    """
    upper = end_of_day(period_end)
    selected = [
        invoice for invoice in invoices
        if invoice.customer_id == customer_id
        and invoice.status in STATEMENT_STATUSES
        and period_start <= invoice.date <= upper
    ]
    return sorted(selected, key=lambda invoice: (invoice.date, invoice.number))


def summarize_statement(invoices: Iterable[Invoice]) -> StatementSummary:
    """Count and total of the selected invoices."""
    count = 0
    total = ZERO
    for invoice in invoices:
        count += 1
        total += invoice.total
    return StatementSummary(count=count, total_outstanding=total)


def statement_lines(invoices: Iterable[Invoice]) -> list[LineItem]:
    """One untaxed line per invoice, priced at the invoice total."""
    return [
        LineItem(
            description=f"Invoice {invoice.number} ({invoice.date.date().isoformat()})",
            quantity=Decimal("1"),
            unit_price=invoice.total,
            tax_rate_percent=ZERO,
        )
        for invoice in invoices
    ]


def statement_period(
    period: StatementPeriod,
    today: datetime,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> tuple[datetime, datetime]:
    """
    Resolve the (start, end) of a statement period.

    Presets count back whole days from today: "7" covers the last 7 days,
    "30" the last 30. Start is midnight of the first day; end is today and is
    made inclusive by the selection. Custom periods use the given dates.

    Raises:
        ValueError: If a custom period is missing either date
    """
    if period == StatementPeriod.CUSTOM:
        if start_date is None or end_date is None:
            raise ValueError("start_date and end_date are required for a custom period")
        return start_of_day(start_date), end_date

    days = int(period.value)
    return start_of_day(today - timedelta(days=days)), today
