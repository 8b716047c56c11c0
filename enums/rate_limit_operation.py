from enum import Enum


class RateLimitOperation(str, Enum):
    """
    Rate limit operation types.

    Each operation has its own independent rate limit counter.
    """

    # Order operations
    ORDER_CREATE = "order_create"
    """
    Rate limit for order creation.
    Config: MAX_ORDERS_PER_USER_PER_HOUR
    Default: 5 orders per hour
    """

    # Partner operations
    PARTNER_APPLY = "partner_apply"
    """
    Rate limit for partner application submissions.
    Duplicate active applications are rejected separately with 409.
    """

    # Quote operations
    QUOTE_REQUEST = "quote_request"
    """
    Rate limit for quote requests, keyed by user id or, for guests, by e-mail.
    Config: MAX_QUOTE_REQUESTS_PER_HOUR
    """
