"""
Shipping Service

Delivery method lookup and checkout address validation.
"""

import re
from datetime import datetime, timedelta

import config
from exceptions.shipping import UnknownShippingMethodException, InvalidAddressException
from utils.money import to_cents
from utils.shipping_types_loader import load_shipping_types, get_shipping_type

# Checkout form fields that must be non-blank
REQUIRED_ADDRESS_FIELDS = ["name", "email", "phone", "street", "city"]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ShippingService:

    @staticmethod
    def get_methods(country_code: str | None = None) -> dict:
        return load_shipping_types(country_code or config.SHIPPING_COUNTRY)

    @staticmethod
    def get_method(method: str, country_code: str | None = None) -> dict:
        """
        Raises:
            UnknownShippingMethodException: If the method is not offered in the country
        """
        shipping_type = get_shipping_type(ShippingService.get_methods(country_code), method)
        if shipping_type is None:
            raise UnknownShippingMethodException(method)
        return shipping_type

    @staticmethod
    def get_cost_cents(method: str, country_code: str | None = None) -> int:
        return to_cents(ShippingService.get_method(method, country_code)["base_cost"])

    @staticmethod
    def estimate_delivery(method: str, now: datetime | None = None) -> datetime:
        shipping_type = ShippingService.get_method(method)
        days = shipping_type.get("estimated_days", config.DEFAULT_DELIVERY_DAYS)
        return (now or datetime.now()) + timedelta(days=days)

    @staticmethod
    def validate_address(address: dict) -> None:
        """
        Check the required checkout fields.

        Raises:
            InvalidAddressException: On the first missing field or a malformed e-mail
        """
        for field in REQUIRED_ADDRESS_FIELDS:
            value = address.get(field)
            if value is None or not str(value).strip():
                raise InvalidAddressException(field, "required")
        if not _EMAIL_PATTERN.match(address["email"].strip()):
            raise InvalidAddressException("email", "invalid format")
