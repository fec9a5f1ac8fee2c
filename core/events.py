"""
Domain events.

Immutable records of what happened to a document or a recycle bin entry.
Services publish them after the write and audit entry are done; handlers
(email delivery, push notifications, analytics) subscribe without the
service knowing about them.

Events carry the full domain object so handlers never re-read the database
mid-request.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for all domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceEvent(DomainEvent):
    """Events related to invoice lifecycle."""
    invoice: Any = None  # Invoice; Any avoids a models import cycle


@dataclass(frozen=True)
class InvoiceCreated(InvoiceEvent):
    """A new invoice was saved."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCreated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceSent(InvoiceEvent):
    """Invoice was sent to the customer."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceSent":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoicePaid(InvoiceEvent):
    """Invoice was marked paid."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoicePaid":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceOverdue(InvoiceEvent):
    """Invoice passed its due date unpaid."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceOverdue":
        return cls(invoice=invoice)


# =============================================================================
# QUOTE EVENTS
# =============================================================================


@dataclass(frozen=True)
class QuoteEvent(DomainEvent):
    """Events related to quote lifecycle."""
    quote: Any = None


@dataclass(frozen=True)
class QuoteSent(QuoteEvent):
    """Quote was sent to the customer."""

    @classmethod
    def create(cls, quote: Any) -> "QuoteSent":
        return cls(quote=quote)


@dataclass(frozen=True)
class QuoteAccepted(QuoteEvent):
    """Customer accepted the quote."""

    @classmethod
    def create(cls, quote: Any) -> "QuoteAccepted":
        return cls(quote=quote)


@dataclass(frozen=True)
class QuoteConverted(QuoteEvent):
    """An invoice was raised from the quote."""
    invoice: Any = None

    @classmethod
    def create(cls, quote: Any, invoice: Any) -> "QuoteConverted":
        return cls(quote=quote, invoice=invoice)


# =============================================================================
# STATEMENT EVENTS
# =============================================================================


@dataclass(frozen=True)
class StatementGenerated(DomainEvent):
    """A statement was generated for a customer."""
    statement: Any = None

    @classmethod
    def create(cls, statement: Any) -> "StatementGenerated":
        return cls(statement=statement)


# =============================================================================
# RECYCLE BIN EVENTS
# =============================================================================


@dataclass(frozen=True)
class RecycleBinEvent(DomainEvent):
    """Events related to soft delete and restore."""
    entry: Any = None


@dataclass(frozen=True)
class ItemDeleted(RecycleBinEvent):
    """A record was moved to the recycle bin."""

    @classmethod
    def create(cls, entry: Any) -> "ItemDeleted":
        return cls(entry=entry)


@dataclass(frozen=True)
class ItemRestored(RecycleBinEvent):
    """A record was restored from the recycle bin."""

    @classmethod
    def create(cls, entry: Any) -> "ItemRestored":
        return cls(entry=entry)


@dataclass(frozen=True)
class ItemPurged(RecycleBinEvent):
    """A record was permanently removed."""

    @classmethod
    def create(cls, entry: Any) -> "ItemPurged":
        return cls(entry=entry)
