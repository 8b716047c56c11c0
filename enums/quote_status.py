from enum import Enum


class QuoteStatus(str, Enum):
    PENDING = "pending"      # Submitted, waiting for staff
    QUOTED = "quoted"        # Price sent to the customer
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"      # validUntil passed without an answer
