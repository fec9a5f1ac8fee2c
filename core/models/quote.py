"""Quote domain models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from core.models.document import Document
from core.models.line_item import LineItemInput


class QuoteStatus(str, Enum):
    """
    Quote lifecycle status.

    draft -> sent -> accepted | rejected | expired. The last three are terminal.
    """

    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"

    def can_transition_to(self, target: "QuoteStatus") -> bool:
        return target in _QUOTE_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _QUOTE_TRANSITIONS[self]


_QUOTE_TRANSITIONS: dict[QuoteStatus, set[QuoteStatus]] = {
    QuoteStatus.DRAFT: {QuoteStatus.SENT},
    QuoteStatus.SENT: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED},
    QuoteStatus.ACCEPTED: set(),
    QuoteStatus.REJECTED: set(),
    QuoteStatus.EXPIRED: set(),
}


class QuoteCreate(BaseModel):
    """Data required to create a quote."""

    customer_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=255)
    date: AwareDatetime
    valid_until: AwareDatetime
    items: list[LineItemInput] = Field(default_factory=list)
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def valid_until_not_before_date(self) -> "QuoteCreate":
        if self.valid_until < self.date:
            raise ValueError("valid_until cannot be before date")
        return self


class Quote(Document):
    """Full quote entity as stored."""

    valid_until: datetime
    status: QuoteStatus
    converted_invoice_id: UUID | None = None

    @property
    def is_converted(self) -> bool:
        return self.converted_invoice_id is not None
