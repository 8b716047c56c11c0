"""
Order Filter Utilities

Maps OrderFilterType values to lists of OrderStatus for database queries.
"""
from enums.order_filter import OrderFilterType
from enums.order_status import OrderStatus


def get_status_filter_for_filter_type(filter_type: OrderFilterType | str | None) -> list[OrderStatus] | None:
    """
    Converts an OrderFilterType to the list of OrderStatus values to query.

    Args:
        filter_type: OrderFilterType (or its string value), None for all orders

    Returns:
        List of OrderStatus to filter by, or None for all orders

    Raises:
        ValueError: If the string is not a known filter
    """
    if filter_type is None:
        return None
    filter_type = OrderFilterType(filter_type)

    # Filter groups
    if filter_type == OrderFilterType.ALL:
        return None

    if filter_type == OrderFilterType.ACTIVE:
        return [
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
        ]

    if filter_type == OrderFilterType.COMPLETED:
        return [OrderStatus.DELIVERED]

    if filter_type == OrderFilterType.CLOSED:
        return [OrderStatus.CANCELLED, OrderStatus.REFUNDED]

    # Individual status filters share their value with OrderStatus
    return [OrderStatus(filter_type.value)]
