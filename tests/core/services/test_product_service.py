"""Tests for ProductService."""

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import Product, ProductCreate, ProductUpdate
from core.services.product_service import ProductService


@pytest.fixture
def product_service(db, audit):
    return ProductService(db, audit)


class TestCreate:

    def test_inserts_and_audits(self, product_service, db, audit, make_product_row, as_test_user):
        db.execute_returning.return_value = [make_product_row()]

        product = product_service.create(ProductCreate(
            name="Design work", unit_price="10.00", tax_rate_percent="20",
        ))

        params = db.execute_returning.call_args[0][1]
        assert params[2] == "Design work"
        assert params[4:6] == (Decimal("10.00"), Decimal("20"))
        assert product.unit_price == Decimal("10.00")
        audit.log_change.assert_called_once()

    @pytest.mark.parametrize("field,value", [
        ("unit_price", "-1"),
        ("tax_rate_percent", "-5"),
        ("tax_rate_percent", "101"),
    ])
    def test_rejects_out_of_range(self, field, value):
        fields = {"name": "Design work", "unit_price": "10"}
        fields[field] = value

        with pytest.raises(ValidationError):
            ProductCreate(**fields)


class TestReads:

    def test_get_by_id_missing(self, product_service):
        assert product_service.get_by_id(uuid4()) is None

    def test_list_all_ordered_by_name(self, product_service, db, make_product_row):
        db.execute.return_value = [make_product_row(name="Audit"), make_product_row(name="Design work")]

        products = product_service.list_all()

        assert [p.name for p in products] == ["Audit", "Design work"]
        assert "ORDER BY name ASC" in db.execute.call_args[0][0]


class TestUpdate:

    def test_updates_price(self, product_service, db, audit, make_product_row):
        current = make_product_row()
        db.execute_single.return_value = current
        db.execute_returning.return_value = [make_product_row(id=current["id"], unit_price=Decimal("12.50"))]

        updated = product_service.update(current["id"], ProductUpdate(unit_price="12.50"))

        query, params = db.execute_returning.call_args[0]
        assert "unit_price = %s" in query
        assert params[0] == Decimal("12.50")
        assert updated.unit_price == Decimal("12.50")
        audit.log_change.assert_called_once()

    def test_missing_product(self, product_service):
        with pytest.raises(ValueError, match="not found"):
            product_service.update(uuid4(), ProductUpdate(name="Hosting"))


class TestToLineItem:

    def test_prefills_line_item(self, make_product_row):
        product = Product.model_validate(make_product_row(description="Logo design"))

        item = product.to_line_item(quantity=Decimal("3"))

        assert item.product_id == product.id
        assert item.description == "Logo design"
        assert item.quantity == Decimal("3")
        assert item.unit_price == Decimal("10.00")
        assert item.tax_rate_percent == Decimal("20")

    def test_falls_back_to_name(self, make_product_row):
        product = Product.model_validate(make_product_row())

        assert product.to_line_item().description == "Design work"
