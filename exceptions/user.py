"""
User-related exceptions.
"""

from .base import ShopException


class UserException(ShopException):
    """Base exception for user-related errors."""
    pass


class UserNotFoundException(UserException):
    """Raised when user is not found."""

    def __init__(self, user_id: int):
        super().__init__(
            f"User {user_id} not found",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class UserDeactivatedException(UserException):
    """Raised when a deactivated account tries to use the API."""

    def __init__(self, user_id: int):
        super().__init__(
            f"User {user_id} is deactivated",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class EmailAlreadyInUseException(UserException):
    """Raised when changing a user's e-mail to one that belongs to another account."""

    def __init__(self, email: str):
        super().__init__(
            "E-mail address is already in use",
            details={'email': email}
        )
        self.email = email


class SelfModificationException(UserException):
    """Raised when an admin tries to demote or deactivate their own account."""

    def __init__(self, user_id: int, field: str):
        super().__init__(
            f"Admin {user_id} cannot change their own {field}",
            details={'user_id': user_id, 'field': field}
        )
        self.user_id = user_id
        self.field = field
