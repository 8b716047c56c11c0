"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.user import User
from models.part import Part
from models.order import Order
from models.orderItem import OrderItem
from models.partner import PartnerApplication
from models.quote import Quote

__all__ = [
    'Base',
    'User',
    'Part',
    'Order',
    'OrderItem',
    'PartnerApplication',
    'Quote',
]
