"""API test fixtures - the real app over mocked services."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from access.service import AccountService
from access.types import AccessReason, AccessResult
from api.app import create_app
from core.event_bus import EventBus
from core.services.customer_service import CustomerService
from core.services.invoice_service import InvoiceService
from core.services.product_service import ProductService
from core.services.quote_service import QuoteService
from core.services.recycle_bin_service import RecycleBinService
from core.services.statement_service import StatementService


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def account_service(make_account):
    service = Mock(spec=AccountService)
    service.require_access.return_value = AccessResult(access=True, reason=AccessReason.TRIAL, days_left=5)
    service.get.return_value = make_account()
    service.config = Mock(trial_days=7)
    return service


@pytest.fixture
def services(account_service):
    return {
        "account": account_service,
        "customer": Mock(spec=CustomerService),
        "product": Mock(spec=ProductService),
        "invoice": Mock(spec=InvoiceService),
        "quote": Mock(spec=QuoteService),
        "statement": Mock(spec=StatementService),
        "recycle_bin": Mock(spec=RecycleBinService),
        "event_bus": EventBus(),
    }


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def verify_token(test_user_id):
    return Mock(return_value=test_user_id)


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services, verify_token):
    return create_app(services, verify_token)


@pytest.fixture
def client(app):
    """Authenticated test client."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["Authorization"] = "Bearer test-token"
    return c


@pytest.fixture
def unauthed_client(app):
    """Test client without a bearer token."""
    return TestClient(app, raise_server_exceptions=False)
