"""
Catalog client exceptions.
"""

from .base import ShopException


class CatalogException(ShopException):
    """Base exception for remote catalog errors."""
    pass


class CatalogUnavailableException(CatalogException):
    """Raised when the parts listing could not be fetched (transport error or non-2xx)."""

    def __init__(self, url: str, reason: str, status: int | None = None):
        super().__init__(
            f"Catalog request to {url} failed: {reason}",
            details={'url': url, 'reason': reason, 'status': status}
        )
        self.url = url
        self.reason = reason
        self.status = status
