"""
Cart-related exceptions.
"""

from .base import ShopException


class CartException(ShopException):
    """Base exception for cart-related errors."""
    pass


class EmptyCartException(CartException):
    """Raised when trying to checkout with an empty cart."""

    def __init__(self, session_id: str | None = None):
        super().__init__(
            "Cart is empty",
            details={'session_id': session_id}
        )
        self.session_id = session_id


class CartBusyException(CartException):
    """Raised when concurrent writers keep invalidating a cart update."""

    def __init__(self, session_id: str, attempts: int):
        super().__init__(
            f"Cart {session_id} changed concurrently {attempts} times",
            details={'session_id': session_id, 'attempts': attempts}
        )
        self.session_id = session_id
        self.attempts = attempts


class MissingCartSessionException(CartException):
    """Raised when a cart route is called without a session key."""

    def __init__(self):
        super().__init__("X-Cart-Session header is required")
