"""
Unit tests for checkout pricing and money helpers.

Tests cover:
- Subtotal of (price, quantity) lines
- Tax on the subtotal only, rounded half-up to a whole cent
- total = subtotal + shipping + tax
- to_cents / from_cents / apply_rate edge cases
"""

from decimal import Decimal

import pytest

from services.pricing import PricingService
from utils.money import apply_rate, format_amount, from_cents, to_cents


class TestCalculateTotals:

    def test_checkout_example(self):
        """124.99 subtotal, 20.00 shipping, 15 % VAT -> 163.74."""
        totals = PricingService.calculate_totals(12499, 2000, Decimal("0.15"))

        assert totals.subtotal_cents == 12499
        assert totals.shipping_cents == 2000
        assert totals.tax_cents == 1875
        assert totals.total_cents == 16374
        assert totals.as_amounts() == {
            "subtotal": 124.99,
            "shippingCost": 20.0,
            "tax": 18.75,
            "total": 163.74,
        }

    def test_tax_not_charged_on_shipping(self):
        totals = PricingService.calculate_totals(10000, 2500, Decimal("0.15"))

        assert totals.tax_cents == 1500
        assert totals.total_cents == 14000

    def test_uses_configured_rate_by_default(self):
        totals = PricingService.calculate_totals(1000, 0)

        assert totals.tax_rate == Decimal("0.15")
        assert totals.tax_cents == 150

    def test_empty_cart_totals_only_shipping(self):
        totals = PricingService.calculate_totals(0, 500, Decimal("0.15"))

        assert totals.tax_cents == 0
        assert totals.total_cents == 500

    @pytest.mark.parametrize("subtotal,expected_tax", [
        (10, 2),     # 1.5 -> 2
        (30, 5),     # 4.5 -> 5
        (1, 0),      # 0.15 -> 0
        (3, 0),      # 0.45 -> 0
        (7, 1),      # 1.05 -> 1
    ])
    def test_tax_rounds_half_up(self, subtotal, expected_tax):
        totals = PricingService.calculate_totals(subtotal, 0, Decimal("0.15"))

        assert totals.tax_cents == expected_tax

    def test_total_is_sum_of_parts(self):
        for subtotal in (1, 99, 12345, 987654):
            totals = PricingService.calculate_totals(subtotal, 1500, Decimal("0.15"))
            assert totals.total_cents == totals.subtotal_cents + totals.shipping_cents + totals.tax_cents


class TestCalculateSubtotal:

    def test_sum_of_lines(self):
        assert PricingService.calculate_subtotal([(8999, 2), (3500, 1)]) == 21498

    def test_no_lines(self):
        assert PricingService.calculate_subtotal([]) == 0


class TestMoney:

    @pytest.mark.parametrize("amount,expected", [
        (89.99, 8999),
        ("124.99", 12499),
        (Decimal("0.005"), 1),
        (0, 0),
        (15, 1500),
    ])
    def test_to_cents(self, amount, expected):
        assert to_cents(amount) == expected

    @pytest.mark.parametrize("amount", ["abc", -1, "NaN", float("inf")])
    def test_to_cents_rejects_invalid(self, amount):
        with pytest.raises(ValueError):
            to_cents(amount)

    def test_from_cents(self):
        assert from_cents(16374) == Decimal("163.74")
        assert from_cents(5) == Decimal("0.05")

    def test_apply_rate(self):
        assert apply_rate(12499, Decimal("0.15")) == 1875

    def test_format_amount(self):
        assert format_amount(123456, "Rs") == "Rs 1,234.56"
