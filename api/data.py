"""GET /api/data - unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query

from api.base import success_response
from core.recycle_bin import days_remaining
from utils.timezone import now_utc


VALID_TYPES = {"customers", "products", "invoices", "quotes", "statements", "recycle_bin"}


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    customer_svc = services["customer"]
    product_svc = services["product"]
    invoice_svc = services["invoice"]
    quote_svc = services["quote"]
    statement_svc = services["statement"]
    recycle_bin_svc = services["recycle_bin"]

    @router.get("/data")
    def get_data(
        type: str | None = Query(None),
        id: str | None = Query(None),
        customer_id: str | None = Query(None),
        limit: int = Query(100, ge=1, le=500),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        if type == "customers":
            return _handle_record(customer_svc, "Customer", id, limit)

        if type == "products":
            return _handle_record(product_svc, "Product", id, limit)

        if type == "invoices":
            return _handle_invoices(invoice_svc, id, customer_id, limit)

        if type == "quotes":
            return _handle_single_or_list(quote_svc, "Quote", id, limit)

        if type == "statements":
            return _handle_single_or_list(statement_svc, "Statement", id, limit)

        return _handle_recycle_bin(recycle_bin_svc)

    return router


def _handle_record(service, label, id, limit):
    if id:
        record = service.get_by_id(UUID(id))
        if record is None:
            raise ValueError(f"{label} {id} not found")
        return success_response(record.model_dump(mode="json")).model_dump(mode="json")

    return success_response(
        [r.model_dump(mode="json") for r in service.list_all(limit)]
    ).model_dump(mode="json")


def _handle_invoices(invoice_svc, id, customer_id, limit):
    if customer_id:
        invoices = invoice_svc.list_for_customer(UUID(customer_id))
        return success_response(
            [i.model_dump(mode="json") for i in invoices]
        ).model_dump(mode="json")

    return _handle_single_or_list(invoice_svc, "Invoice", id, limit)


def _handle_single_or_list(service, label, id, limit):
    if id:
        document = service.get_by_id(UUID(id))
        if document is None:
            raise ValueError(f"{label} {id} not found")

        data = document.model_dump(mode="json")
        data["has_stale_totals"] = document.has_stale_totals
        return success_response(data).model_dump(mode="json")

    documents = service.list_all(limit)
    return success_response(
        [d.model_dump(mode="json") for d in documents]
    ).model_dump(mode="json")


def _handle_recycle_bin(recycle_bin_svc):
    now = now_utc()
    entries = recycle_bin_svc.list_entries()
    return success_response([
        {
            **entry.model_dump(mode="json"),
            "display_name": entry.display_name,
            "days_remaining": days_remaining(entry, now),
        }
        for entry in entries
    ]).model_dump(mode="json")
