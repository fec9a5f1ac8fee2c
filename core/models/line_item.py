"""Line item domain models.

Prices and quantities are Decimal. A line item's amount is always derived
from quantity, unit price and tax rate; it is never stored as the source of
truth.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from core.totals import compute_line_amount


class LineItemInput(BaseModel):
    """A line item as entered on an invoice, quote or statement form."""

    product_id: UUID | None = None
    description: str = Field("", max_length=500)
    quantity: Decimal = Field(Decimal("1"), ge=0)
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    tax_rate_percent: Decimal = Field(Decimal("0"), ge=0, le=100)

    def to_line_item(self) -> "LineItem":
        return LineItem(**self.model_dump())


class LineItem(BaseModel):
    """
    A line item as stored on a document.

    Values are not range-checked here. Rows written before input validation
    existed, or built by internal code, compute with whatever they hold.
    """

    product_id: UUID | None = None
    description: str = ""
    quantity: Decimal
    unit_price: Decimal
    tax_rate_percent: Decimal = Decimal("0")

    model_config = {"from_attributes": True, "frozen": True}

    @property
    def net_amount(self) -> Decimal:
        """quantity * unit_price, before tax."""
        return self.quantity * self.unit_price

    @property
    def tax_amount(self) -> Decimal:
        return self.net_amount * self.tax_rate_percent / 100

    @property
    def amount(self) -> Decimal:
        """Gross amount including tax."""
        return compute_line_amount(self)
