"""Sequential document numbers per tenant: INV-100000, INV-100001, ..."""

import re
from typing import Iterable

INVOICE_PREFIX = "INV"
QUOTE_PREFIX = "QUO"
STATEMENT_PREFIX = "STM"

FIRST_NUMBER = 100000


def next_document_number(existing: Iterable[str], prefix: str) -> str:
    """
    Next number after the highest existing one with this prefix.

    Numbers that don't match PREFIX-<digits> are ignored. With nothing to
    go on the sequence starts at 100000.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)$")

    highest = FIRST_NUMBER - 1
    for number in existing:
        match = pattern.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{prefix}-{highest + 1}"
