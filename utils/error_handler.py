"""
Error Handler Utility for the HTTP API

Provides centralized error handling for route handlers with:
- Exception to HTTP status mapping
- Localized error messages
- Logging for debugging

Routes never catch service exceptions themselves; the handlers installed by
install_exception_handlers() turn them into {"error": "..."} responses.

Usage in services:
    raise OrderNotFoundException(order_id)   # -> 404 "Order not found"
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from enums.message_scope import MessageScope
from exceptions import (
    ShopException,
    AuthenticationRequiredException,
    AccessDeniedException,
    RateLimitExceededException,
    EmptyCartException,
    CartBusyException,
    MissingCartSessionException,
    PartNotFoundException,
    DuplicatePartNumberException,
    InvalidPartDataException,
    OrderNotFoundException,
    InsufficientStockException,
    EmptyOrderException,
    UnknownOrderPartException,
    InvalidOrderStateException,
    OrderOwnershipException,
    PartnerApplicationNotFoundException,
    DuplicatePartnerApplicationException,
    InvalidPartnerDataException,
    PartnerApplicationLockedException,
    QuoteNotFoundException,
    InvalidQuoteDataException,
    UserNotFoundException,
    UserDeactivatedException,
    EmailAlreadyInUseException,
    SelfModificationException,
    UnknownShippingMethodException,
    InvalidAddressException,
    CatalogUnavailableException,
)
from utils.localizator import Localizator

# Exception type -> (HTTP status, localization key)
ERROR_MAPPING: dict[type[ShopException], tuple[int, str]] = {
    # Identity
    AuthenticationRequiredException: (401, "error_unauthorized"),
    AccessDeniedException: (403, "error_access_denied"),
    RateLimitExceededException: (429, "error_rate_limited"),

    # Cart exceptions
    MissingCartSessionException: (400, "error_cart_session_missing"),
    EmptyCartException: (400, "error_empty_cart"),
    CartBusyException: (409, "error_cart_busy"),

    # Part exceptions
    PartNotFoundException: (404, "error_part_not_found"),
    DuplicatePartNumberException: (409, "error_duplicate_part_number"),
    InvalidPartDataException: (400, "error_invalid_part_data"),

    # Order exceptions
    OrderNotFoundException: (404, "error_order_not_found"),
    InsufficientStockException: (400, "error_insufficient_stock"),
    EmptyOrderException: (400, "error_empty_order"),
    UnknownOrderPartException: (400, "error_order_part_unavailable"),
    InvalidOrderStateException: (400, "error_order_invalid_state"),
    OrderOwnershipException: (403, "error_order_access_denied"),

    # Partner exceptions
    PartnerApplicationNotFoundException: (404, "error_partner_application_not_found"),
    DuplicatePartnerApplicationException: (409, "error_duplicate_partner_application"),
    InvalidPartnerDataException: (400, "error_invalid_partner_data"),
    PartnerApplicationLockedException: (400, "error_partner_application_locked"),

    # Quote exceptions
    QuoteNotFoundException: (404, "error_quote_not_found"),
    InvalidQuoteDataException: (400, "error_invalid_quote_data"),

    # User exceptions
    UserNotFoundException: (404, "error_user_not_found"),
    UserDeactivatedException: (403, "error_account_deactivated"),
    EmailAlreadyInUseException: (409, "error_email_in_use"),
    SelfModificationException: (403, "error_self_modification"),

    # Shipping exceptions
    UnknownShippingMethodException: (400, "error_unknown_shipping_method"),
    InvalidAddressException: (400, "error_invalid_address"),

    # Upstream catalog
    CatalogUnavailableException: (502, "error_catalog_unavailable"),
}

# Exception attributes usable as message placeholders
_FORMAT_ATTRIBUTES = [
    "order_id", "part_id", "current_state", "required_state", "available",
    "requested", "reason", "field", "application_number", "status",
]


def handle_service_error(exception: ShopException,
                         scope: MessageScope = MessageScope.CUSTOMER) -> tuple[int, str]:
    """
    Convert service exception to HTTP status and localized message.

    Returns:
        (status_code, message)

    Example:
        >>> handle_service_error(OrderNotFoundException(123))
        (404, 'Order not found')
    """
    logging.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")

    mapping = ERROR_MAPPING.get(type(exception))
    if mapping is None:
        # Unknown exception type - use generic error message
        logging.error(f"Unmapped exception type: {type(exception).__name__}")
        return 500, Localizator.get_text(scope, "error_unexpected")

    status_code, localization_key = mapping
    exception_data = {name: getattr(exception, name) for name in _FORMAT_ATTRIBUTES if hasattr(exception, name)}
    if isinstance(exception, RateLimitExceededException):
        exception_data["retry_after"] = exception.retry_after_seconds

    try:
        return status_code, Localizator.get_text(scope, localization_key).format(**exception_data)
    except KeyError as e:
        # Missing formatting parameter - log and return without formatting
        logging.error(f"Missing format parameter in error message: {e}")
        return status_code, Localizator.get_text(scope, localization_key)


def handle_unexpected_error(exception: Exception, scope: MessageScope = MessageScope.CUSTOMER) -> str:
    """Log the full traceback and return the generic message."""
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=exception)
    return Localizator.get_text(scope, "error_unexpected")


async def shop_exception_handler(request: Request, exception: ShopException) -> JSONResponse:
    status_code, message = handle_service_error(exception)
    headers = None
    if isinstance(exception, RateLimitExceededException):
        headers = {"Retry-After": str(exception.retry_after_seconds)}
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def unexpected_exception_handler(request: Request, exception: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": handle_unexpected_error(exception)})


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopException, shop_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
