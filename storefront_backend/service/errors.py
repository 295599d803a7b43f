from typing import Dict, List, Optional


class StorefrontError(Exception):
    """Base class for errors raised by the storefront services."""

    status_code = 500
    public_message = "Something went wrong. Please try again."


class ValidationError(StorefrontError):
    """One or more fields failed validation. Not retried."""

    status_code = 400
    public_message = "Validation failed. Please check your inputs."

    def __init__(self, field_errors: Dict[str, List[str]], message: Optional[str] = None):
        self.field_errors = field_errors
        super().__init__(message or self.public_message)

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Group a pydantic ValidationError's messages by field name."""
        field_errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ())) or "general"
            field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
        return cls(field_errors)


class AuthenticationError(StorefrontError):
    """The session credential is missing, invalid or expired."""

    status_code = 401
    public_message = "Authentication failed. Invalid or expired session token."


class NotFoundError(StorefrontError):
    """A user, address or product does not exist."""

    status_code = 404
    public_message = "The requested resource was not found."


class ConflictError(StorefrontError):
    status_code = 409
    public_message = "The resource already exists."


class ConcurrentModificationError(StorefrontError):
    """The document changed between read and write. Retried by the caller."""

    status_code = 409


class TransientError(StorefrontError):
    """Retries were exhausted. The whole operation may be tried again later."""

    status_code = 503
    public_message = "The service is busy. Please try again."


class PersistenceError(StorefrontError):
    """The document store was unreachable or rejected the write."""

    status_code = 500
    public_message = "Failed to save your changes. Please try again."
