"""
Base exception classes for the storefront service.
"""


class ShopException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions in the service should inherit from this class.
    This allows catching all domain exceptions with a single handler.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, states, etc.)
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class AuthenticationRequiredException(ShopException):
    """Raised when a request carries no (or an unknown) user identity."""

    def __init__(self, reason: str = "missing identity"):
        super().__init__(
            f"Authentication required: {reason}",
            details={'reason': reason}
        )
        self.reason = reason


class AccessDeniedException(ShopException):
    """Raised when the caller lacks the role or ownership for an operation."""

    def __init__(self, user_id: int | None, action: str):
        super().__init__(
            f"Access denied for user {user_id}: {action}",
            details={'user_id': user_id, 'action': action}
        )
        self.user_id = user_id
        self.action = action


class RateLimitExceededException(ShopException):
    """Raised when a user exceeds the allowed number of operations in a window."""

    def __init__(self, operation: str, user_id: int | str, retry_after_seconds: int):
        super().__init__(
            f"Rate limit exceeded for {operation} by user {user_id}, retry in {retry_after_seconds}s",
            details={'operation': operation, 'user_id': user_id, 'retry_after': retry_after_seconds}
        )
        self.operation = operation
        self.user_id = user_id
        self.retry_after_seconds = retry_after_seconds
