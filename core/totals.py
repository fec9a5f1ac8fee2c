"""
Document totals.

The only place subtotal, tax and total are computed. Stored document
aggregates are caches of compute_document_totals(items); every write path
recomputes them from the line items.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from core.money import ZERO, round_money

if TYPE_CHECKING:
    from core.models.line_item import LineItem


@dataclass(frozen=True)
class DocumentTotals:
    """Unrounded aggregates of a line item sequence."""

    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO

    def rounded(self) -> "DocumentTotals":
        """Cent-rounded copy for rendering and persistence."""
        return DocumentTotals(
            subtotal=round_money(self.subtotal),
            tax_amount=round_money(self.tax_amount),
            total=round_money(self.total),
        )


def compute_line_amount(item: "LineItem") -> Decimal:
    """quantity * unit_price * (1 + tax_rate_percent / 100), unrounded."""
    return item.quantity * item.unit_price * (1 + item.tax_rate_percent / 100)


def compute_document_totals(items: Iterable["LineItem"]) -> DocumentTotals:
    """
    Sum a document's line items.

    Subtotal is the sum of quantity * unit_price; tax is the sum of each
    line's own tax; total is their sum. An empty sequence gives zeros.
    Negative quantities or prices are not rejected and flow through as
    negative amounts.
    """
    subtotal = ZERO
    tax_amount = ZERO
    for item in items:
        net = item.quantity * item.unit_price
        subtotal += net
        tax_amount += net * item.tax_rate_percent / 100

    return DocumentTotals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)


def totals_match(stored: DocumentTotals, items: Iterable["LineItem"]) -> bool:
    """
    Whether stored aggregates agree with the line items, to the cent.

    Used to spot rows whose cached totals drifted from their items.
    """
    return stored.rounded() == compute_document_totals(items).rounded()
