"""
Totals calculation tests.

Reference document: tax rate 0.06, one taxable line of 20.00 and one
non-taxable line of 5.00.
"""

from decimal import Decimal

import pytest

from invoicer.services.line_resolver import resolve_custom_line
from invoicer.services.totals import (
    DiscountSpec,
    compute_totals,
    quantize_money,
    sanitize_tax_rate,
)

RATE = Decimal("0.06")


@pytest.fixture
def lines():
    return [
        resolve_custom_line(product_name="Banner", price=Decimal("10"), quantity=2, taxable=True),
        resolve_custom_line(product_name="Delivery", price=Decimal("5"), taxable=False),
    ]


# ============================================================
# Tax
# ============================================================


class TestTax:
    """Tax on taxable lines only."""

    def test_no_discount(self, lines):
        """Test 20 * 1.06 + 5 = 26.20."""
        totals = compute_totals(lines, RATE)

        assert totals.taxable_subtotal == Decimal("20")
        assert totals.nontaxable_subtotal == Decimal("5")
        assert totals.rounded_total == Decimal("26.20")
        assert totals.discount_amount == Decimal("0")

    def test_empty_document(self):
        assert compute_totals([], RATE).rounded_total == Decimal("0.00")

    def test_zero_rate(self, lines):
        assert compute_totals(lines, Decimal("0")).rounded_total == Decimal("25.00")

    def test_invalid_rate_uses_default(self, lines):
        """Test that an out of range rate falls back to 0.06."""
        assert compute_totals(lines, Decimal("6")).rounded_total == Decimal("26.20")


# ============================================================
# Discounts
# ============================================================


class TestDiscounts:
    """Amount and percent discounts."""

    def test_percent_discount(self, lines):
        """Test 50% applied to each subtotal before tax: 13.10."""
        totals = compute_totals(lines, RATE, DiscountSpec("percent", Decimal("50")))
        assert totals.rounded_total == Decimal("13.10")
        assert quantize_money(totals.discount_amount) == Decimal("13.10")

    def test_amount_discount(self, lines):
        """Test 10 subtracted from the taxed total: 16.20."""
        totals = compute_totals(lines, RATE, DiscountSpec("amount", Decimal("10")))
        assert totals.rounded_total == Decimal("16.20")
        assert totals.pre_discount_total == Decimal("26.20")

    def test_amount_larger_than_total(self, lines):
        totals = compute_totals(lines, RATE, DiscountSpec("amount", Decimal("1000")))
        assert totals.rounded_total == Decimal("0.00")

    def test_percent_over_hundred(self, lines):
        totals = compute_totals(lines, RATE, DiscountSpec("percent", Decimal("150")))
        assert totals.rounded_total == Decimal("0.00")

    def test_negative_values_ignored(self, lines):
        """Test that negative discounts never raise the total."""
        for kind in ("amount", "percent"):
            totals = compute_totals(lines, RATE, DiscountSpec(kind, Decimal("-20")))
            assert totals.rounded_total == Decimal("26.20")

    def test_unknown_kind_ignored(self, lines):
        totals = compute_totals(lines, RATE, DiscountSpec("coupon", Decimal("5")))
        assert totals.rounded_total == Decimal("26.20")


# ============================================================
# Helpers
# ============================================================


class TestHelpers:
    """Rounding and tax rate sanitizing."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (Decimal("1.005"), Decimal("1.01")),
            (Decimal("1.004"), Decimal("1.00")),
            (Decimal("2.675"), Decimal("2.68")),
        ],
    )
    def test_half_up(self, raw, expected):
        assert quantize_money(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (Decimal("0.0825"), Decimal("0.0825")),
            ("0.1", Decimal("0.1")),
            (0, Decimal("0")),
            (1, Decimal("1")),
            (None, Decimal("0.06")),
            (-0.1, Decimal("0.06")),
            (6, Decimal("0.06")),
            ("abc", Decimal("0.06")),
            (True, Decimal("0.06")),
        ],
    )
    def test_sanitize_tax_rate(self, raw, expected):
        assert sanitize_tax_rate(raw) == expected
