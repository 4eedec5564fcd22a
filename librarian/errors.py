"""Custom domain exceptions for the lending core."""

# Stable, machine-readable error codes for callers of the core.
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
OUT_OF_RANGE = "OUT_OF_RANGE"
ILLEGAL_STATE = "ILLEGAL_STATE"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    code: str = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    code = NOT_FOUND


class PendingListNotFoundError(NotFoundError):
    """Raised when a borrower has no pending loan list (create one with create_new_pending_list first)."""

    pass


class DomainValidationError(DomainError, ValueError):
    """Raised when constructor arguments are malformed (e.g. empty strings, due date before borrow date)."""

    code = VALIDATION_ERROR


class DomainRangeError(DomainValidationError):
    """Raised when a numeric argument is out of range (e.g. negative fines, non-positive ids)."""

    code = OUT_OF_RANGE


class IllegalStateError(DomainError):
    """Raised when an entity is asked to make a transition its current state does not allow."""

    code = ILLEGAL_STATE
