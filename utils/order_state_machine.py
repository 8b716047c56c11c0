"""
Order State Machine for validating order status transitions and maintaining consistency.

This module implements a finite state machine to ensure valid order status transitions
and provide audit logging for all status changes.
"""

import logging
from typing import Dict, List, Optional, Set

from enums.order_status import OrderStatus

logger = logging.getLogger(__name__)


class OrderStatusTransition:
    """Represents a valid status transition with metadata"""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus, requires_admin: bool = True,
                 description: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.requires_admin = requires_admin
        self.description = description

    def __repr__(self):
        admin_flag = " (Admin)" if self.requires_admin else ""
        return f"{self.from_status.value} -> {self.to_status.value}{admin_flag}"


class OrderStateMachine:
    """
    Finite state machine for order status transitions with validation and audit logging.

    Valid status transitions:
    - PENDING -> CONFIRMED | PROCESSING | CANCELLED
    - CONFIRMED -> PROCESSING | CANCELLED
    - PROCESSING -> SHIPPED | CANCELLED
    - SHIPPED -> DELIVERED
    - DELIVERED -> REFUNDED
    - CANCELLED -> REFUNDED

    REFUNDED is final. Only PENDING -> CANCELLED may be done without admin rights.
    """

    VALID_TRANSITIONS: List[OrderStatusTransition] = [
        # From PENDING
        OrderStatusTransition(OrderStatus.PENDING, OrderStatus.CONFIRMED,
                              description="Order confirmed by staff"),
        OrderStatusTransition(OrderStatus.PENDING, OrderStatus.PROCESSING,
                              description="Order picked for dispatch"),
        OrderStatusTransition(OrderStatus.PENDING, OrderStatus.CANCELLED, requires_admin=False,
                              description="Order cancelled before confirmation"),

        # From CONFIRMED
        OrderStatusTransition(OrderStatus.CONFIRMED, OrderStatus.PROCESSING,
                              description="Order picked for dispatch"),
        OrderStatusTransition(OrderStatus.CONFIRMED, OrderStatus.CANCELLED,
                              description="Confirmed order cancelled by staff"),

        # From PROCESSING
        OrderStatusTransition(OrderStatus.PROCESSING, OrderStatus.SHIPPED,
                              description="Order handed to carrier"),
        OrderStatusTransition(OrderStatus.PROCESSING, OrderStatus.CANCELLED,
                              description="Order cancelled during processing"),

        # From SHIPPED / DELIVERED / CANCELLED
        OrderStatusTransition(OrderStatus.SHIPPED, OrderStatus.DELIVERED,
                              description="Order delivered to customer"),
        OrderStatusTransition(OrderStatus.DELIVERED, OrderStatus.REFUNDED,
                              description="Delivered order refunded"),
        OrderStatusTransition(OrderStatus.CANCELLED, OrderStatus.REFUNDED,
                              description="Payment of cancelled order refunded"),
    ]

    # Build transition map for fast lookup
    _transition_map: Dict[OrderStatus, Set[OrderStatus]] = {}
    _admin_required_transitions: Set[tuple] = set()
    _transition_descriptions: Dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        """Build internal transition maps for performance"""
        if cls._transition_map:
            return  # Already built

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_status, set()).add(transition.to_status)
            if transition.requires_admin:
                cls._admin_required_transitions.add((transition.from_status, transition.to_status))
            cls._transition_descriptions[(transition.from_status, transition.to_status)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        """
        Check if a status transition is valid according to the state machine.

        Staying in the same status is always allowed (no-op).
        """
        cls._build_transition_map()

        if from_status == to_status:
            return True

        return to_status in cls._transition_map.get(from_status, set())

    @classmethod
    def requires_admin(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        cls._build_transition_map()
        return (from_status, to_status) in cls._admin_required_transitions

    @classmethod
    def get_valid_transitions(cls, from_status: OrderStatus) -> List[OrderStatus]:
        cls._build_transition_map()
        return sorted(cls._transition_map.get(from_status, set()), key=lambda s: s.value)

    @classmethod
    def get_transition_description(cls, from_status: OrderStatus, to_status: OrderStatus) -> str:
        cls._build_transition_map()
        return cls._transition_descriptions.get(
            (from_status, to_status),
            f"Transition from {from_status.value} to {to_status.value}"
        )

    @classmethod
    def is_final_status(cls, status: OrderStatus) -> bool:
        """A status is final when no transition leaves it."""
        cls._build_transition_map()
        return not cls._transition_map.get(status)

    @classmethod
    def validate_and_log_transition(cls, order_id: int, from_status: OrderStatus, to_status: OrderStatus,
                                    admin_id: Optional[int] = None, user_id: Optional[int] = None) -> bool:
        """
        Validate a status transition and write an audit log line.

        Returns:
            True if transition is valid and logged, False otherwise
        """
        if not cls.is_valid_transition(from_status, to_status):
            logger.error(f"Invalid status transition for order {order_id}: {from_status.value} -> {to_status.value}")
            return False

        if cls.requires_admin(from_status, to_status) and admin_id is None:
            logger.error(f"Admin required for transition {from_status.value} -> {to_status.value} on order {order_id}")
            return False

        transition_desc = cls.get_transition_description(from_status, to_status)
        performer = f"admin {admin_id}" if admin_id else f"user {user_id}" if user_id else "system"

        logger.info(f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} "
                    f"by {performer}: {transition_desc}")
        return True
