"""Statement domain models.

A statement lists a customer's unpaid and overdue invoices dated within a
period. Each selected invoice becomes one untaxed line on the statement, so
the statement total equals the amount outstanding.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from core.models.document import Document


class StatementPeriod(str, Enum):
    """How the statement period was chosen on the form."""

    LAST_7_DAYS = "7"
    LAST_30_DAYS = "30"
    CUSTOM = "custom"


class StatementCreate(BaseModel):
    """Data required to generate a statement."""

    customer_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=255)
    date: AwareDatetime
    period: StatementPeriod = StatementPeriod.LAST_30_DAYS
    start_date: AwareDatetime | None = None
    end_date: AwareDatetime | None = None
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def custom_period_needs_dates(self) -> "StatementCreate":
        if self.period == StatementPeriod.CUSTOM:
            if self.start_date is None or self.end_date is None:
                raise ValueError("start_date and end_date are required for a custom period")
            if self.end_date < self.start_date:
                raise ValueError("end_date cannot be before start_date")
        return self


class StatementSummary(BaseModel):
    """Aggregate shown at the foot of a statement."""

    count: int
    total_outstanding: Decimal


class Statement(Document):
    """Full statement entity as stored."""

    start_date: datetime
    end_date: datetime
    period: StatementPeriod
    invoice_ids: list[UUID] = Field(default_factory=list)
