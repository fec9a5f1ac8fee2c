"""Recycle bin domain models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class EntityType(str, Enum):
    """Record types that can be soft-deleted into the recycle bin."""

    INVOICE = "invoice"
    QUOTE = "quote"
    STATEMENT = "statement"
    CUSTOMER = "customer"
    PRODUCT = "product"

    @property
    def table(self) -> str:
        return _ENTITY_TABLES[self]


_ENTITY_TABLES = {
    EntityType.INVOICE: "invoices",
    EntityType.QUOTE: "quotes",
    EntityType.STATEMENT: "statements",
    EntityType.CUSTOMER: "customers",
    EntityType.PRODUCT: "products",
}


class RecycleBinEntry(BaseModel):
    """A soft-deleted record and the snapshot taken when it was deleted."""

    id: UUID
    user_id: UUID
    original_id: UUID
    entity_type: EntityType
    data: dict[str, Any]
    deleted_at: datetime

    model_config = {"from_attributes": True}

    @property
    def display_name(self) -> str:
        """Label for the recycle bin list."""
        if self.entity_type == EntityType.INVOICE:
            return f"Invoice {self.data.get('number', '')}".strip()
        if self.entity_type == EntityType.QUOTE:
            return f"Quote {self.data.get('number', '')}".strip()
        if self.entity_type == EntityType.STATEMENT:
            return f"Statement {self.data.get('number', '')}".strip()
        return self.data.get("name") or "Unnamed"
