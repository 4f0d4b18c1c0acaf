class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a scanned code or lookup key matches no record."""


class DailyLimitReachedError(DomainError):
    """Raised when a person already has an ENTRY/EXIT pair for the day."""


class ConflictError(DomainError):
    """Raised when a versioned document changed since it was read."""


class AuthenticationError(DomainError):
    """Raised when the identity provider session cannot be resolved."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DuplicateScanError(DomainError):
    """Raised when the same code is re-submitted inside the debounce window."""


class ScannerBusyError(DomainError):
    """Raised when a scanning session already has a scan in flight."""
