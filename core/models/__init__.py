"""Core domain models."""

from core.models.line_item import LineItem, LineItemInput
from core.models.document import Document
from core.models.customer import Customer, CustomerCreate, CustomerUpdate
from core.models.product import Product, ProductCreate, ProductUpdate
from core.models.invoice import Invoice, InvoiceCreate, InvoiceStatus
from core.models.quote import Quote, QuoteCreate, QuoteStatus
from core.models.statement import Statement, StatementCreate, StatementPeriod, StatementSummary
from core.models.recycle_bin import RecycleBinEntry, EntityType

__all__ = [
    # LineItem
    "LineItem", "LineItemInput",
    # Document
    "Document",
    # Customer
    "Customer", "CustomerCreate", "CustomerUpdate",
    # Product
    "Product", "ProductCreate", "ProductUpdate",
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceStatus",
    # Quote
    "Quote", "QuoteCreate", "QuoteStatus",
    # Statement
    "Statement", "StatementCreate", "StatementPeriod", "StatementSummary",
    # RecycleBin
    "RecycleBinEntry", "EntityType",
]
