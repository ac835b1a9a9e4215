"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
The HTTP layer maps them to status codes, the notes store maps them to
user-facing notifications.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when an operation needs an authenticated user and there is none."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class PasswordError(ApplicationError):
    """Raised when a note password does not verify."""

    def __init__(self, message: str = "Incorrect password") -> None:
        super().__init__(message, code="AUTH_PASSWORD_INVALID")


class TransportError(ApplicationError):
    """Raised when the storage backend (database or local file) fails."""

    def __init__(self, message: str = "Storage backend unavailable") -> None:
        super().__init__(message, code="SYS_TRANSPORT_ERROR")
