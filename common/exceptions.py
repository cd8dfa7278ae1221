"""
SpareLink - Custom Exceptions
==============================
Business-level exceptions that can be caught and converted to HTTP responses.
Every exception carries the status code the API answers with.
"""

from fastapi import status


class SparelinkError(Exception):
    """Base exception for all business logic errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Server error"):
        self.message = message
        super().__init__(self.message)


class ValidationError(SparelinkError):
    """Raised for missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(SparelinkError):
    """Raised when no caller identity can be resolved."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthorizationError(SparelinkError):
    """Raised when the caller lacks permission (wrong role, not the owner)."""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(SparelinkError):
    """Raised when a requested resource doesn't exist."""
    status_code = status.HTTP_404_NOT_FOUND


class EmptyCartError(ValidationError):
    """Raised when placing an order without a cart or without items."""
    def __init__(self):
        super().__init__("Cart is empty")


class NoValidItemsError(ValidationError):
    """Raised when every cart item lost its product."""
    def __init__(self):
        super().__init__("No valid items in cart")

