"""Fields and behavior shared by invoices, quotes and statements."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from core.models.line_item import LineItem
from core.totals import DocumentTotals, compute_document_totals, totals_match


class Document(BaseModel):
    """
    A priced document with an ordered list of line items.

    Item order matters for display only. subtotal, tax_amount and total are
    the values last persisted; computed_totals() is authoritative.
    """

    id: UUID
    user_id: UUID
    number: str
    customer_id: UUID
    customer_name: str
    date: datetime
    items: list[LineItem]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    notes: str | None = None
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    def computed_totals(self) -> DocumentTotals:
        return compute_document_totals(self.items)

    def stored_totals(self) -> DocumentTotals:
        return DocumentTotals(subtotal=self.subtotal, tax_amount=self.tax_amount, total=self.total)

    @property
    def has_stale_totals(self) -> bool:
        """Whether the persisted aggregates disagree with the items."""
        return not totals_match(self.stored_totals(), self.items)
