"""
Partner application exceptions.
"""

from .base import ShopException


class PartnerException(ShopException):
    """Base exception for partner application errors."""
    pass


class PartnerApplicationNotFoundException(PartnerException):
    """Raised when a partner application does not exist."""

    def __init__(self, application_id: int):
        super().__init__(
            f"Partner application {application_id} not found",
            details={'application_id': application_id}
        )
        self.application_id = application_id


class DuplicatePartnerApplicationException(PartnerException):
    """Raised when the user already has a pending, under review or approved application."""

    def __init__(self, user_id: int, application_number: str, status: str):
        super().__init__(
            f"User {user_id} already has application {application_number} ({status})",
            details={'user_id': user_id, 'application_number': application_number, 'status': status}
        )
        self.user_id = user_id
        self.application_number = application_number
        self.status = status


class InvalidPartnerDataException(PartnerException):
    """Raised when application or review data is out of range."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid partner data ({field}): {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason


class PartnerApplicationLockedException(PartnerException):
    """Raised when deleting an application that has already been approved."""

    def __init__(self, application_id: int, status: str):
        super().__init__(
            f"Partner application {application_id} is {status} and cannot be deleted",
            details={'application_id': application_id, 'status': status}
        )
        self.application_id = application_id
        self.status = status
