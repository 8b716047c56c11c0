"""
Shipping-related exceptions.
"""

from .base import ShopException


class ShippingException(ShopException):
    """Base exception for shipping-related errors."""
    pass


class UnknownShippingMethodException(ShippingException):
    """Raised when the selected shipping method is not offered."""

    def __init__(self, method: str):
        super().__init__(
            f"Unknown shipping method '{method}'",
            details={'method': method}
        )
        self.method = method


class InvalidAddressException(ShippingException):
    """Raised when a required checkout field is missing or malformed."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid shipping address ({field}): {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason
