"""
Order-related exceptions.
"""

from .base import ShopException


class OrderException(ShopException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when order is not found in database."""

    def __init__(self, order_id: int | str):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class InsufficientStockException(OrderException):
    """Raised when an order requests more units than are in stock."""

    def __init__(self, part_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for part {part_id}: requested {requested}, available {available}",
            details={'part_id': part_id, 'requested': requested, 'available': available}
        )
        self.part_id = part_id
        self.requested = requested
        self.available = available


class EmptyOrderException(OrderException):
    """Raised when an order is submitted without line items."""

    def __init__(self, user_id: int):
        super().__init__(
            f"Order from user {user_id} has no items",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class InvalidOrderStateException(OrderException):
    """Raised when a status change is not allowed from the current state."""

    def __init__(self, order_id: int, current_state: str, required_state: str):
        super().__init__(
            f"Order {order_id} is in state '{current_state}', cannot move to '{required_state}'",
            details={'order_id': order_id, 'current_state': current_state, 'required_state': required_state}
        )
        self.order_id = order_id
        self.current_state = current_state
        self.required_state = required_state


class OrderOwnershipException(OrderException):
    """Raised when user attempts to access/modify order they don't own."""

    def __init__(self, order_id: int, user_id: int):
        super().__init__(
            f"User {user_id} does not have permission to access order {order_id}",
            details={'order_id': order_id, 'user_id': user_id}
        )
        self.order_id = order_id
        self.user_id = user_id


class UnknownOrderPartException(OrderException):
    """Raised when an order line references a part that does not exist or is inactive."""

    def __init__(self, part_id: int):
        super().__init__(
            f"Part {part_id} in order is not available",
            details={'part_id': part_id}
        )
        self.part_id = part_id
