"""
Unit tests for ShippingService (delivery methods and checkout address checks).
"""

from datetime import datetime

import pytest

from exceptions.shipping import InvalidAddressException, UnknownShippingMethodException
from services.shipping import ShippingService


@pytest.fixture
def address():
    return {
        "name": "Jean Dupont",
        "email": "jean@example.mu",
        "phone": "+230 5712 3456",
        "street": "12 Royal Road",
        "city": "Port Louis",
    }


class TestShippingMethods:

    @pytest.mark.parametrize("method,cents", [
        ("standard", 500),
        ("express", 1500),
        ("sameday", 2500),
    ])
    def test_cost_of_each_method(self, method, cents):
        assert ShippingService.get_cost_cents(method) == cents

    def test_unknown_method_raises(self):
        with pytest.raises(UnknownShippingMethodException):
            ShippingService.get_cost_cents("drone")

    def test_estimate_delivery_uses_method_days(self):
        now = datetime(2026, 3, 2, 10, 0)

        assert ShippingService.estimate_delivery("express", now=now) == datetime(2026, 3, 4, 10, 0)
        assert ShippingService.estimate_delivery("standard", now=now) == datetime(2026, 3, 7, 10, 0)


class TestValidateAddress:

    def test_complete_address_passes(self, address):
        ShippingService.validate_address(address)

    @pytest.mark.parametrize("field", ["name", "email", "phone", "street", "city"])
    def test_blank_required_field(self, address, field):
        address[field] = "   "

        with pytest.raises(InvalidAddressException) as exc_info:
            ShippingService.validate_address(address)

        assert exc_info.value.field == field

    def test_missing_field(self, address):
        del address["city"]

        with pytest.raises(InvalidAddressException) as exc_info:
            ShippingService.validate_address(address)

        assert exc_info.value.field == "city"

    def test_malformed_email(self, address):
        address["email"] = "jean.example.mu"

        with pytest.raises(InvalidAddressException) as exc_info:
            ShippingService.validate_address(address)

        assert exc_info.value.field == "email"
