"""POST /api/documents/totals - live totals while a form is being edited."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.base import success_response
from core.models import LineItemInput
from core.money import format_currency, round_money
from core.totals import compute_document_totals


class TotalsRequest(BaseModel):
    items: list[LineItemInput] = Field(default_factory=list)
    currency: str = Field("GBP", min_length=3, max_length=3)


def create_documents_router() -> APIRouter:
    router = APIRouter()

    @router.post("/documents/totals")
    def document_totals(body: TotalsRequest):
        items = [item.to_line_item() for item in body.items]
        totals = compute_document_totals(items).rounded()

        lines = [
            {
                "description": item.description,
                "amount": str(round_money(item.amount)),
                "amount_display": format_currency(item.amount, body.currency),
            }
            for item in items
        ]

        return success_response({
            "items": lines,
            "subtotal": str(totals.subtotal),
            "tax_amount": str(totals.tax_amount),
            "total": str(totals.total),
            "total_display": format_currency(totals.total, body.currency),
        }).model_dump(mode="json")

    return router
