class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFound(DomainError):
    """Raised when a cohort or member is unknown to the enrollment records."""


class StoreError(DomainError):
    """Raised when the record store fails to read or persist data."""


class NotificationError(DomainError):
    """Raised by a notifier when a message could not be delivered."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks the capability for an action."""
