"""POST /api/actions - unified mutation endpoint."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, TypeAdapter

from api.base import success_response
from core.models import (
    CustomerCreate,
    CustomerUpdate,
    EntityType,
    InvoiceCreate,
    LineItemInput,
    ProductCreate,
    ProductUpdate,
    QuoteCreate,
    StatementCreate,
)
from utils.timezone import parse_iso

_ITEMS = TypeAdapter(list[LineItemInput])


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "customer": CustomerHandler(services["customer"]),
        "product": ProductHandler(services["product"]),
        "invoice": InvoiceHandler(services["invoice"]),
        "quote": QuoteHandler(services["quote"]),
        "statement": StatementHandler(services["statement"]),
        "recycle_bin": RecycleBinHandler(services["recycle_bin"]),
    }

    @router.post("/actions")
    def perform_action(body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(body.data)
        return success_response(result).model_dump(mode="json")

    return router


def _require(data: dict, key: str) -> Any:
    """Value of a required field in the action data."""
    value = data.get(key)
    if value is None:
        raise ValueError(f"'{key}' is required")
    return value


def _require_id(data: dict) -> UUID:
    return UUID(str(_require(data, "id")))


def _fields(data: dict) -> dict:
    """Action data without the target id."""
    return {k: v for k, v in data.items() if k != "id"}


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class CustomerHandler:
    ALLOWED_ACTIONS = {"create", "update"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        return self.service.create(CustomerCreate(**data)).model_dump(mode="json")

    def _handle_update(self, data: dict):
        customer = self.service.update(_require_id(data), CustomerUpdate(**_fields(data)))
        return customer.model_dump(mode="json")


class ProductHandler:
    ALLOWED_ACTIONS = {"create", "update"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        return self.service.create(ProductCreate(**data)).model_dump(mode="json")

    def _handle_update(self, data: dict):
        product = self.service.update(_require_id(data), ProductUpdate(**_fields(data)))
        return product.model_dump(mode="json")


class InvoiceHandler:
    ALLOWED_ACTIONS = {"create", "update_items", "send", "mark_paid", "mark_overdue"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        invoice = self.service.create(InvoiceCreate(**data))
        return invoice.model_dump(mode="json")

    def _handle_update_items(self, data: dict):
        items = _ITEMS.validate_python(_require(data, "items"))
        invoice = self.service.update_items(_require_id(data), items)
        return invoice.model_dump(mode="json")

    def _handle_send(self, data: dict):
        return self.service.send(_require_id(data)).model_dump(mode="json")

    def _handle_mark_paid(self, data: dict):
        return self.service.mark_paid(_require_id(data)).model_dump(mode="json")

    def _handle_mark_overdue(self, data: dict):
        return self.service.mark_overdue(_require_id(data)).model_dump(mode="json")


class QuoteHandler:
    ALLOWED_ACTIONS = {"create", "update_items", "send", "accept", "reject", "expire", "convert"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        quote = self.service.create(QuoteCreate(**data))
        return quote.model_dump(mode="json")

    def _handle_update_items(self, data: dict):
        items = _ITEMS.validate_python(_require(data, "items"))
        quote = self.service.update_items(_require_id(data), items)
        return quote.model_dump(mode="json")

    def _handle_send(self, data: dict):
        return self.service.send(_require_id(data)).model_dump(mode="json")

    def _handle_accept(self, data: dict):
        return self.service.accept(_require_id(data)).model_dump(mode="json")

    def _handle_reject(self, data: dict):
        return self.service.reject(_require_id(data)).model_dump(mode="json")

    def _handle_expire(self, data: dict):
        return self.service.expire(_require_id(data)).model_dump(mode="json")

    def _handle_convert(self, data: dict):
        due_date = parse_iso(str(_require(data, "due_date")))
        invoice = self.service.convert_to_invoice(_require_id(data), due_date)
        return invoice.model_dump(mode="json")


class StatementHandler:
    ALLOWED_ACTIONS = {"generate", "preview"}

    def __init__(self, service):
        self.service = service

    def _handle_generate(self, data: dict):
        statement = self.service.generate(StatementCreate(**data))
        return statement.model_dump(mode="json")

    def _handle_preview(self, data: dict):
        summary = self.service.preview(StatementCreate(**data))
        return summary.model_dump(mode="json")


class RecycleBinHandler:
    ALLOWED_ACTIONS = {"delete", "restore", "permanently_delete", "purge_expired"}

    def __init__(self, service):
        self.service = service

    def _handle_delete(self, data: dict):
        entity_type = EntityType(_require(data, "type"))
        entry = self.service.move_to_bin(entity_type, _require_id(data))
        return entry.model_dump(mode="json")

    def _handle_restore(self, data: dict):
        entry = self.service.restore(_require_id(data))
        return {"restored": True, "original_id": str(entry.original_id)}

    def _handle_permanently_delete(self, data: dict):
        entry_id = _require_id(data)
        if not self.service.permanently_delete(entry_id):
            raise ValueError(f"Recycle bin entry {entry_id} not found")
        return {"deleted": True}

    def _handle_purge_expired(self, data: dict):
        return {"purged": self.service.purge_expired()}
