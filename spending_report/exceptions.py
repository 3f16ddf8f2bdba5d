"""Domain-specific exceptions for the spending report core."""

class ValidationError(ValueError):
    """Raised when user supplied data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when an expense record cannot be located by id."""


class PersistenceError(IOError):
    """Raised when the storage layer cannot read or write a resource."""
