"""
Quote request exceptions.
"""

from .base import ShopException


class QuoteException(ShopException):
    """Base exception for quote request errors."""
    pass


class QuoteNotFoundException(QuoteException):
    """Raised when a quote request does not exist."""

    def __init__(self, quote_id: int):
        super().__init__(
            f"Quote {quote_id} not found",
            details={'quote_id': quote_id}
        )
        self.quote_id = quote_id


class InvalidQuoteDataException(QuoteException):
    """Raised when a quote request or staff response is out of range."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid quote data ({field}): {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason
