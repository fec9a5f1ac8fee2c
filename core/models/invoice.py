"""Invoice domain models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from core.models.document import Document
from core.models.line_item import LineItemInput


class InvoiceStatus(str, Enum):
    """
    Invoice lifecycle status.

    draft -> sent -> paid and sent -> overdue -> paid. An invoice can also be
    issued straight to unpaid (the form default, and what quote conversion
    produces), which behaves like sent. Paid is terminal. Moving invoices to
    overdue is done by an external scheduler.
    """

    DRAFT = "draft"
    SENT = "sent"
    UNPAID = "unpaid"
    OVERDUE = "overdue"
    PAID = "paid"

    def can_transition_to(self, target: "InvoiceStatus") -> bool:
        return target in _INVOICE_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _INVOICE_TRANSITIONS[self]


_INVOICE_TRANSITIONS: dict[InvoiceStatus, set[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: {InvoiceStatus.SENT, InvoiceStatus.UNPAID},
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE},
    InvoiceStatus.UNPAID: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID},
    InvoiceStatus.PAID: set(),
}

# Statuses a new invoice may be created in
INITIAL_INVOICE_STATUSES = {InvoiceStatus.DRAFT, InvoiceStatus.UNPAID}


class InvoiceCreate(BaseModel):
    """Data required to create an invoice. Totals are always computed."""

    customer_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=255)
    date: AwareDatetime
    due_date: AwareDatetime
    items: list[LineItemInput] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: str | None = Field(None, max_length=2000)
    quote_id: UUID | None = None

    @model_validator(mode="after")
    def check_dates_and_status(self) -> "InvoiceCreate":
        if self.due_date < self.date:
            raise ValueError("due_date cannot be before date")
        if self.status not in INITIAL_INVOICE_STATUSES:
            raise ValueError(f"New invoices cannot start as {self.status.value}")
        return self


class Invoice(Document):
    """Full invoice entity as stored."""

    due_date: datetime
    status: InvoiceStatus
    quote_id: UUID | None = None

    def is_past_due(self, now: datetime) -> bool:
        """Awaiting payment and past its due date. The scheduler marks these overdue."""
        return self.status in (InvoiceStatus.SENT, InvoiceStatus.UNPAID) and self.due_date < now
