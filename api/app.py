"""Application factory - wires services, middleware and routers."""

import logging

from fastapi import FastAPI

from access.config import AccessConfig
from access.security_middleware import AccessMiddleware, TokenVerifier
from access.service import AccountService
from api.access import create_access_router
from api.actions import create_actions_router
from api.base import success_response
from api.data import create_data_router
from api.documents import create_documents_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.event_bus import EventBus
from core.services.customer_service import CustomerService
from core.services.invoice_service import InvoiceService
from core.services.product_service import ProductService
from core.services.quote_service import QuoteService
from core.services.recycle_bin_service import RecycleBinService
from core.services.statement_service import StatementService

logger = logging.getLogger(__name__)


def create_services(
    postgres: PostgresClient,
    config: AccessConfig | None = None,
    event_bus: EventBus | None = None,
) -> dict:
    """Build every service over one database client, audit log and event bus."""
    audit = AuditLogger(postgres)
    event_bus = event_bus or EventBus()

    invoice = InvoiceService(postgres, audit, event_bus)

    return {
        "account": AccountService(postgres, audit, config),
        "customer": CustomerService(postgres, audit),
        "product": ProductService(postgres, audit),
        "invoice": invoice,
        "quote": QuoteService(postgres, audit, event_bus, invoice),
        "statement": StatementService(postgres, audit, event_bus, invoice),
        "recycle_bin": RecycleBinService(postgres, audit, event_bus),
        "event_bus": event_bus,
    }


def create_app(services: dict, verify_token: TokenVerifier) -> FastAPI:
    app = FastAPI(title="Eazee Invoice")

    # Starlette runs the last-added middleware first
    app.add_middleware(
        AccessMiddleware,
        verify_token=verify_token,
        account_service=services["account"],
    )
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return success_response({"status": "ok"}).model_dump(mode="json")

    app.include_router(create_access_router(services["account"]), prefix="/api")
    app.include_router(create_documents_router(), prefix="/api")
    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    logger.info("Application created with %d routes", len(app.routes))
    return app
