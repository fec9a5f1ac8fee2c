"""Shared test fixtures for the Eazee Invoice test suite."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock
from uuid import UUID, uuid4

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from access.types import Account
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.event_bus import EventBus
from utils.user_context import user_context, clear_current_user_id


# =============================================================================
# TEST CONSTANTS
# =============================================================================

TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
TEST_USER_EMAIL = "owner@example.com"

TEST_CUSTOMER_ID = UUID("00000000-0000-0000-0000-0000000000c1")

# Fixed clock. Business rules take `now` explicitly.
NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# USER CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean user context before and after each test."""
    clear_current_user_id()
    yield
    clear_current_user_id()


@pytest.fixture
def test_user_id() -> UUID:
    return TEST_USER_ID


@pytest.fixture
def customer_id() -> UUID:
    return TEST_CUSTOMER_ID


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def as_test_user(test_user_id):
    """Run the test inside the primary test user's context."""
    with user_context(test_user_id):
        yield test_user_id


# =============================================================================
# INFRASTRUCTURE FIXTURES - no database; the client is mocked
# =============================================================================


@pytest.fixture
def db():
    """PostgresClient double. Tests program execute/execute_returning per call."""
    client = Mock(spec=PostgresClient)
    client.execute.return_value = []
    client.execute_single.return_value = None
    client.execute_returning.return_value = []
    client.execute_rowcount.return_value = 1
    return client


@pytest.fixture
def audit():
    return Mock(spec=AuditLogger)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Every event published on the bus, in order."""
    events = []
    event_bus.subscribe("DomainEvent", events.append)
    return events


# =============================================================================
# ENTITY FACTORIES
# =============================================================================


@pytest.fixture
def make_account():
    """Account in its second trial day unless overridden."""
    def _make(**overrides) -> Account:
        fields = {
            "user_id": TEST_USER_ID,
            "email": TEST_USER_EMAIL,
            "trial_start_date": NOW - timedelta(days=2),
        }
        fields.update(overrides)
        return Account(**fields)
    return _make


@pytest.fixture
def make_account_row():
    """Row shape returned by SELECT ... FROM accounts."""
    def _make(**overrides) -> dict:
        row = {
            "user_id": TEST_USER_ID,
            "email": TEST_USER_EMAIL,
            "is_admin": False,
            "is_suspended": False,
            "trial_start_date": NOW - timedelta(days=2),
            "is_subscriber": False,
            "is_admin_granted_subscription": False,
            "subscription_status": "none",
            "subscription_current_period_end": None,
            "created_at": NOW - timedelta(days=2),
            "updated_at": NOW - timedelta(days=2),
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def make_customer_row():
    def _make(**overrides) -> dict:
        row = {
            "id": TEST_CUSTOMER_ID,
            "user_id": TEST_USER_ID,
            "name": "Acme Ltd",
            "email": "accounts@acme.example.com",
            "phone": None,
            "address": "1 High Street",
            "is_deleted": False,
            "created_at": NOW,
            "updated_at": NOW,
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def make_product_row():
    def _make(**overrides) -> dict:
        row = {
            "id": uuid4(),
            "user_id": TEST_USER_ID,
            "name": "Design work",
            "description": None,
            "unit_price": Decimal("10.00"),
            "tax_rate_percent": Decimal("20"),
            "is_deleted": False,
            "created_at": NOW,
            "updated_at": NOW,
        }
        row.update(overrides)
        return row
    return _make


def _document_row(number: str, overrides: dict) -> dict:
    row = {
        "id": uuid4(),
        "user_id": TEST_USER_ID,
        "number": number,
        "customer_id": TEST_CUSTOMER_ID,
        "customer_name": "Acme Ltd",
        "date": NOW,
        "items": [
            {"description": "Design work", "quantity": "2", "unit_price": "10.00", "tax_rate_percent": "20"},
        ],
        "subtotal": Decimal("20.00"),
        "tax_amount": Decimal("4.00"),
        "total": Decimal("24.00"),
        "notes": None,
        "is_deleted": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_invoice_row():
    def _make(**overrides) -> dict:
        defaults = {"due_date": NOW + timedelta(days=14), "status": "draft", "quote_id": None}
        defaults.update(overrides)
        return _document_row(defaults.pop("number", "INV-100000"), defaults)
    return _make


@pytest.fixture
def make_quote_row():
    def _make(**overrides) -> dict:
        defaults = {"valid_until": NOW + timedelta(days=30), "status": "draft", "converted_invoice_id": None}
        defaults.update(overrides)
        return _document_row(defaults.pop("number", "QUO-100000"), defaults)
    return _make


@pytest.fixture
def make_statement_row():
    def _make(**overrides) -> dict:
        defaults = {
            "start_date": NOW - timedelta(days=30),
            "end_date": NOW,
            "period": "30",
            "invoice_ids": [],
        }
        defaults.update(overrides)
        return _document_row(defaults.pop("number", "STM-100000"), defaults)
    return _make


@pytest.fixture
def make_entry_row():
    """Recycle bin row for a deleted invoice, deleted one day before NOW."""
    def _make(**overrides) -> dict:
        row = {
            "id": uuid4(),
            "user_id": TEST_USER_ID,
            "original_id": uuid4(),
            "entity_type": "invoice",
            "data": {"number": "INV-100000", "total": "24.00"},
            "deleted_at": NOW - timedelta(days=1),
        }
        row.update(overrides)
        return row
    return _make
