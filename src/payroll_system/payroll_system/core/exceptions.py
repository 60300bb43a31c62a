class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RecordNotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class PersistenceConflictError(DomainError):
    """Raised when a write loses a uniqueness race against a concurrent writer."""
