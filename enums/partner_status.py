from enum import Enum


class PartnerStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def active(cls) -> list["PartnerStatus"]:
        """Statuses that block a new application from the same user."""
        return [cls.PENDING, cls.UNDER_REVIEW, cls.APPROVED]
