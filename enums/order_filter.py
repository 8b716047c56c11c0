from enum import Enum


class OrderFilterType(str, Enum):
    """
    Filter values accepted by GET /api/orders?status=...

    Group filters expand to several statuses, individual values match one.
    """
    # Predefined filter groups
    ALL = "all"
    ACTIVE = "active"            # pending, confirmed, processing, shipped
    COMPLETED = "completed"      # delivered
    CLOSED = "closed"            # cancelled, refunded

    # Individual status filters
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
