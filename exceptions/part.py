"""
Part (catalog) exceptions.
"""

from .base import ShopException


class PartException(ShopException):
    """Base exception for catalog part errors."""
    pass


class PartNotFoundException(PartException):
    """Raised when a part does not exist or is no longer active."""

    def __init__(self, part_id: int | str):
        super().__init__(
            f"Part {part_id} not found",
            details={'part_id': part_id}
        )
        self.part_id = part_id


class DuplicatePartNumberException(PartException):
    """Raised when creating a part whose part number is already taken."""

    def __init__(self, part_number: str):
        super().__init__(
            f"Part number {part_number} already exists",
            details={'part_number': part_number}
        )
        self.part_number = part_number


class InvalidPartDataException(PartException):
    """Raised when part data fails validation."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid part data ({field}): {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason
