"""
Money helpers.

Amounts are Decimal end to end. Arithmetic is done at full precision and
rounded only when a value leaves the core for display, PDF or email, so
per-line rounding never accumulates across a long document.
"""

from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "CAD": "$",
}


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Coerce a numeric input to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than the
    binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(amount: Decimal) -> Decimal:
    """Round to whole cents, half up. Presentation boundary only."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def format_currency(amount: Decimal | int | float | str, currency: str) -> str:
    """Format for display, e.g. format_currency(Decimal("24"), "GBP") -> "£24.00"."""
    rounded = round_money(to_decimal(amount))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol(currency)}{abs(rounded):.2f}"
