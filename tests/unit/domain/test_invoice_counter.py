"""Unit tests for invoice number formatting"""

import pytest
from src.domain.invoice_counter import format_invoice_number


class TestFormatInvoiceNumber:
    def test_zero_padded_to_four_digits(self):
        assert format_invoice_number(2025, 1) == "INV-2025-0001"
        assert format_invoice_number(2025, 42) == "INV-2025-0042"

    def test_sequence_beyond_four_digits_is_not_truncated(self):
        assert format_invoice_number(2025, 12345) == "INV-2025-12345"

    @pytest.mark.parametrize("sequence", [0, -1])
    def test_sequence_must_be_positive(self, sequence):
        with pytest.raises(ValueError):
            format_invoice_number(2025, sequence)
