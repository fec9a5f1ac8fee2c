"""Tests for core/totals.py and core/money.py."""

from decimal import Decimal

import pytest

from core.models import LineItem
from core.money import format_currency, round_money, to_decimal
from core.totals import DocumentTotals, compute_document_totals, compute_line_amount, totals_match


def item(quantity, unit_price, tax_rate_percent="0"):
    return LineItem(
        description="Work",
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        tax_rate_percent=Decimal(tax_rate_percent),
    )


class TestComputeLineAmount:

    def test_includes_tax(self):
        assert compute_line_amount(item("2", "10", "20")) == Decimal("24")

    def test_zero_tax(self):
        assert compute_line_amount(item("3", "1.50")) == Decimal("4.50")

    def test_is_unrounded(self):
        """Rounding is left to the presentation boundary."""
        assert compute_line_amount(item("1", "0.333", "10")) == Decimal("0.3663")

    def test_matches_item_property(self):
        line = item("4", "2.25", "5")
        assert line.amount == compute_line_amount(line)
        assert line.net_amount + line.tax_amount == line.amount


class TestComputeDocumentTotals:

    def test_empty_gives_zeros(self):
        totals = compute_document_totals([])

        assert totals.subtotal == 0
        assert totals.tax_amount == 0
        assert totals.total == 0

    def test_single_taxed_line(self):
        totals = compute_document_totals([item("2", "10", "20")])

        assert totals == DocumentTotals(
            subtotal=Decimal("20"), tax_amount=Decimal("4"), total=Decimal("24")
        )

    def test_mixed_tax_rates(self):
        totals = compute_document_totals([
            item("1", "100", "20"),
            item("2", "50", "0"),
            item("1", "10", "5"),
        ])

        assert totals.subtotal == Decimal("210")
        assert totals.tax_amount == Decimal("20.5")
        assert totals.total == Decimal("230.5")

    def test_total_is_sum_of_line_amounts(self):
        items = [item("3", "19.99", "20"), item("1", "0.01", "17.5")]
        assert compute_document_totals(items).total == sum(i.amount for i in items)

    def test_idempotent(self):
        items = [item("2", "10", "20"), item("1", "5.55", "12.5")]
        assert compute_document_totals(items) == compute_document_totals(items)

    def test_accepts_generator(self):
        totals = compute_document_totals(item("1", "10") for _ in range(3))
        assert totals.total == Decimal("30")

    def test_negative_values_pass_through(self):
        """Stored items are not range-checked; a credit line reduces the total."""
        totals = compute_document_totals([item("1", "100"), item("-1", "30")])
        assert totals.total == Decimal("70")


class TestRounding:

    def test_rounded_copy(self):
        totals = DocumentTotals(
            subtotal=Decimal("10.005"), tax_amount=Decimal("2.001"), total=Decimal("12.006")
        ).rounded()

        assert totals.subtotal == Decimal("10.01")
        assert totals.tax_amount == Decimal("2.00")
        assert totals.total == Decimal("12.01")

    def test_totals_match_to_the_cent(self):
        items = [item("1", "0.333", "10")]
        assert totals_match(DocumentTotals(Decimal("0.33"), Decimal("0.03"), Decimal("0.37")), items)

    def test_totals_mismatch(self):
        items = [item("2", "10", "20")]
        assert not totals_match(DocumentTotals(Decimal("20"), Decimal("4"), Decimal("25")), items)


class TestMoney:

    @pytest.mark.parametrize("raw,expected", [
        ("2.675", "2.68"),
        ("2.665", "2.67"),
        ("-1.005", "-1.01"),
        ("3", "3.00"),
    ])
    def test_round_money_half_up(self, raw, expected):
        assert round_money(Decimal(raw)) == Decimal(expected)

    def test_to_decimal_float_uses_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_passthrough(self):
        value = Decimal("1.23")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("amount,currency,expected", [
        (Decimal("24"), "GBP", "£24.00"),
        (Decimal("1234.5"), "USD", "$1234.50"),
        ("9.999", "eur", "€10.00"),
        (Decimal("-5"), "GBP", "-£5.00"),
        (Decimal("7"), "CHF", "CHF7.00"),
    ])
    def test_format_currency(self, amount, currency, expected):
        assert format_currency(amount, currency) == expected
