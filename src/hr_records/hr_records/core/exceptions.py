class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials are invalid or no usable session exists."""


class AuthorizationError(DomainError):
    """Raised when the caller is not allowed to act on the target record."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule."""


class DuplicateError(ConflictError):
    """Raised when an embedded entry already exists for the same key (e.g. date)."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConcurrencyError(DomainError):
    """Raised when a write could not be committed because the record changed underneath."""


class StoreError(DomainError):
    """Raised on transport or availability failures of the document store."""


class ConfigurationError(DomainError):
    """Raised when the system is asked for something it is not configured for."""
