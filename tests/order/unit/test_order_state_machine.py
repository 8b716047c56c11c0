"""
Unit tests for OrderStateMachine and order filter mapping.
"""

import pytest

from enums.order_filter import OrderFilterType
from enums.order_status import OrderStatus
from utils.order_filters import get_status_filter_for_filter_type
from utils.order_state_machine import OrderStateMachine


class TestTransitions:

    @pytest.mark.parametrize("from_status,to_status", [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
        (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.DELIVERED, OrderStatus.REFUNDED),
        (OrderStatus.CANCELLED, OrderStatus.REFUNDED),
    ])
    def test_valid_transitions(self, from_status, to_status):
        assert OrderStateMachine.is_valid_transition(from_status, to_status) is True

    @pytest.mark.parametrize("from_status,to_status", [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.PENDING, OrderStatus.DELIVERED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.PENDING),
        (OrderStatus.REFUNDED, OrderStatus.PENDING),
        (OrderStatus.CANCELLED, OrderStatus.PROCESSING),
    ])
    def test_invalid_transitions(self, from_status, to_status):
        assert OrderStateMachine.is_valid_transition(from_status, to_status) is False

    def test_same_status_is_noop_transition(self):
        assert OrderStateMachine.is_valid_transition(OrderStatus.SHIPPED, OrderStatus.SHIPPED) is True

    def test_only_pending_cancel_is_customer_allowed(self):
        assert OrderStateMachine.requires_admin(OrderStatus.PENDING, OrderStatus.CANCELLED) is False
        assert OrderStateMachine.requires_admin(OrderStatus.CONFIRMED, OrderStatus.CANCELLED) is True
        assert OrderStateMachine.requires_admin(OrderStatus.PENDING, OrderStatus.CONFIRMED) is True

    def test_final_statuses(self):
        assert OrderStateMachine.is_final_status(OrderStatus.REFUNDED) is True
        assert OrderStateMachine.is_final_status(OrderStatus.DELIVERED) is False
        assert OrderStateMachine.is_final_status(OrderStatus.PENDING) is False

    def test_validate_and_log_requires_admin(self):
        assert OrderStateMachine.validate_and_log_transition(
            1, OrderStatus.PENDING, OrderStatus.CONFIRMED, admin_id=None, user_id=5
        ) is False
        assert OrderStateMachine.validate_and_log_transition(
            1, OrderStatus.PENDING, OrderStatus.CONFIRMED, admin_id=2
        ) is True

    def test_get_valid_transitions(self):
        assert OrderStateMachine.get_valid_transitions(OrderStatus.PROCESSING) == [
            OrderStatus.CANCELLED, OrderStatus.SHIPPED
        ]


class TestOrderFilters:

    def test_all_and_none_mean_no_filter(self):
        assert get_status_filter_for_filter_type(None) is None
        assert get_status_filter_for_filter_type(OrderFilterType.ALL) is None

    def test_groups(self):
        assert get_status_filter_for_filter_type("active") == [
            OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED
        ]
        assert get_status_filter_for_filter_type(OrderFilterType.CLOSED) == [
            OrderStatus.CANCELLED, OrderStatus.REFUNDED
        ]

    def test_single_status(self):
        assert get_status_filter_for_filter_type("shipped") == [OrderStatus.SHIPPED]

    def test_unknown_value_raises(self):
        with pytest.raises(ValueError):
            get_status_filter_for_filter_type("lost")
