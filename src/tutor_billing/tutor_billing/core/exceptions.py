class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidAmountError(ValidationError):
    """Raised when a payment amount is not a positive number."""


class NotFoundError(DomainError):
    """Raised when a student id does not exist."""


class StorageError(Exception):
    """Raised when the backing store fails. Never retried by the core."""


class ConcurrentUpdateError(StorageError):
    """Raised when a conditional write lost against another writer."""
