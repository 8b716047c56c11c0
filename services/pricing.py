from decimal import Decimal

from pydantic import BaseModel

import config
from utils.money import apply_rate, from_cents


class OrderTotals(BaseModel):
    subtotal_cents: int
    shipping_cents: int
    tax_cents: int
    total_cents: int
    tax_rate: Decimal

    def as_amounts(self) -> dict[str, float]:
        return {
            "subtotal": float(from_cents(self.subtotal_cents)),
            "shippingCost": float(from_cents(self.shipping_cents)),
            "tax": float(from_cents(self.tax_cents)),
            "total": float(from_cents(self.total_cents)),
        }


class PricingService:
    """Checkout arithmetic. All inputs and outputs are integer cents."""

    @staticmethod
    def get_tax_rate() -> Decimal:
        # TAX_RATE is checked by utils.config_validator at startup
        return Decimal(str(config.TAX_RATE))

    @staticmethod
    def calculate_subtotal(lines: list[tuple[int, int]]) -> int:
        """
        Args:
            lines: (unit_price_cents, quantity) pairs
        """
        return sum(unit_price * quantity for unit_price, quantity in lines)

    @staticmethod
    def calculate_totals(subtotal_cents: int, shipping_cents: int, tax_rate: Decimal | None = None) -> OrderTotals:
        """
        Tax is charged on the subtotal only and rounded half-up to a whole cent.

        Example:
            subtotal 124.99, shipping 20.00, rate 0.15
            -> tax 18.75, total 163.74
        """
        rate = tax_rate if tax_rate is not None else PricingService.get_tax_rate()
        tax_cents = apply_rate(subtotal_cents, rate)
        return OrderTotals(
            subtotal_cents=subtotal_cents,
            shipping_cents=shipping_cents,
            tax_cents=tax_cents,
            total_cents=subtotal_cents + shipping_cents + tax_cents,
            tax_rate=rate,
        )
