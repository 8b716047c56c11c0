from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"          # Created, cash on delivery or awaiting confirmation
    CONFIRMED = "confirmed"      # Confirmed by staff
    PROCESSING = "processing"    # Card payment accepted, being picked
    SHIPPED = "shipped"          # Handed to the carrier (tracking number set)
    DELIVERED = "delivered"      # Final
    CANCELLED = "cancelled"      # Final, stock returned
    REFUNDED = "refunded"        # Final
