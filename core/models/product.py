"""Product catalog domain models.

A product is a saved price and tax rate. Picking one on a document form
copies its values into a new line item; later product edits do not touch
documents already issued.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from core.models.line_item import LineItemInput


class ProductCreate(BaseModel):
    """Data required to create a product."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=500)
    unit_price: Decimal = Field(..., ge=0)
    tax_rate_percent: Decimal = Field(Decimal("0"), ge=0, le=100)


class ProductUpdate(BaseModel):
    """Data that can be updated on a product. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=500)
    unit_price: Decimal | None = Field(None, ge=0)
    tax_rate_percent: Decimal | None = Field(None, ge=0, le=100)


class Product(BaseModel):
    """Full product entity as stored."""

    id: UUID
    user_id: UUID
    name: str
    description: str | None = None
    unit_price: Decimal
    tax_rate_percent: Decimal = Decimal("0")
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    def to_line_item(self, quantity: Decimal = Decimal("1")) -> LineItemInput:
        """A line item prefilled from this product."""
        return LineItemInput(
            product_id=self.id,
            description=self.description or self.name,
            quantity=quantity,
            unit_price=self.unit_price,
            tax_rate_percent=self.tax_rate_percent,
        )
