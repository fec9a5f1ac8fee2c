"""Tests for core/numbering.py."""

from core.numbering import (
    FIRST_NUMBER,
    INVOICE_PREFIX,
    QUOTE_PREFIX,
    STATEMENT_PREFIX,
    next_document_number,
)


class TestNextDocumentNumber:

    def test_first_number(self):
        assert next_document_number([], INVOICE_PREFIX) == f"INV-{FIRST_NUMBER}"

    def test_one_past_highest(self):
        existing = ["INV-100000", "INV-100007", "INV-100003"]
        assert next_document_number(existing, INVOICE_PREFIX) == "INV-100008"

    def test_ignores_other_prefixes(self):
        existing = ["QUO-100050", "INV-100001"]
        assert next_document_number(existing, INVOICE_PREFIX) == "INV-100002"

    def test_ignores_malformed_numbers(self):
        existing = ["INV-abc", "INV-", "XINV-100900", "INV-100900-copy", None]
        assert next_document_number(existing, INVOICE_PREFIX) == "INV-100000"

    def test_low_legacy_numbers_do_not_restart_sequence(self):
        assert next_document_number(["STM-12"], STATEMENT_PREFIX) == "STM-100000"

    def test_quote_prefix(self):
        assert next_document_number(["QUO-100000"], QUOTE_PREFIX) == "QUO-100001"
