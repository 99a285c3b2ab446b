"""Domain-specific exceptions for the expense tracker core services."""

from sqlalchemy.exc import SQLAlchemyError

__all__ = ["ValidationError", "RecordNotFoundError", "StorageError"]


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when an expense record cannot be located."""


# Store failures are never wrapped; this is the base every one of them shares.
StorageError = SQLAlchemyError
