"""
Custom exceptions for the storefront service.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
ShopException (base)
├── AuthenticationRequiredException
├── AccessDeniedException
├── RateLimitExceededException
├── CartException
│   ├── EmptyCartException
│   ├── CartBusyException
│   └── MissingCartSessionException
├── PartException
│   ├── PartNotFoundException
│   ├── DuplicatePartNumberException
│   └── InvalidPartDataException
├── OrderException
│   ├── OrderNotFoundException
│   ├── InsufficientStockException
│   ├── EmptyOrderException
│   ├── UnknownOrderPartException
│   ├── InvalidOrderStateException
│   └── OrderOwnershipException
├── PartnerException
│   ├── PartnerApplicationNotFoundException
│   ├── DuplicatePartnerApplicationException
│   ├── InvalidPartnerDataException
│   └── PartnerApplicationLockedException
├── QuoteException
│   ├── QuoteNotFoundException
│   └── InvalidQuoteDataException
├── UserException
│   ├── UserNotFoundException
│   ├── UserDeactivatedException
│   ├── EmailAlreadyInUseException
│   └── SelfModificationException
├── ShippingException
│   ├── UnknownShippingMethodException
│   └── InvalidAddressException
└── CatalogException
    └── CatalogUnavailableException

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

The FastAPI exception handler in utils/error_handler.py turns them into
JSON responses with a status code and a localized message.
"""

from .base import (
    ShopException,
    AuthenticationRequiredException,
    AccessDeniedException,
    RateLimitExceededException,
)
from .cart import CartException, EmptyCartException, CartBusyException, MissingCartSessionException
from .part import PartException, PartNotFoundException, DuplicatePartNumberException, InvalidPartDataException
from .order import (
    OrderException,
    OrderNotFoundException,
    InsufficientStockException,
    EmptyOrderException,
    UnknownOrderPartException,
    InvalidOrderStateException,
    OrderOwnershipException,
)
from .partner import (
    PartnerException,
    PartnerApplicationNotFoundException,
    DuplicatePartnerApplicationException,
    InvalidPartnerDataException,
    PartnerApplicationLockedException,
)
from .quote import QuoteException, QuoteNotFoundException, InvalidQuoteDataException
from .user import (
    UserException,
    UserNotFoundException,
    UserDeactivatedException,
    EmailAlreadyInUseException,
    SelfModificationException,
)
from .shipping import ShippingException, UnknownShippingMethodException, InvalidAddressException
from .catalog import CatalogException, CatalogUnavailableException

__all__ = [
    # Base
    'ShopException',
    'AuthenticationRequiredException',
    'AccessDeniedException',
    'RateLimitExceededException',

    # Cart
    'CartException',
    'EmptyCartException',
    'CartBusyException',
    'MissingCartSessionException',

    # Part
    'PartException',
    'PartNotFoundException',
    'DuplicatePartNumberException',
    'InvalidPartDataException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'InsufficientStockException',
    'EmptyOrderException',
    'UnknownOrderPartException',
    'InvalidOrderStateException',
    'OrderOwnershipException',

    # Partner
    'PartnerException',
    'PartnerApplicationNotFoundException',
    'DuplicatePartnerApplicationException',
    'InvalidPartnerDataException',
    'PartnerApplicationLockedException',

    # Quote
    'QuoteException',
    'QuoteNotFoundException',
    'InvalidQuoteDataException',

    # User
    'UserException',
    'UserNotFoundException',
    'UserDeactivatedException',
    'EmailAlreadyInUseException',
    'SelfModificationException',

    # Shipping
    'ShippingException',
    'UnknownShippingMethodException',
    'InvalidAddressException',

    # Catalog
    'CatalogException',
    'CatalogUnavailableException',
]
