class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable machine-readable identifier and ``status`` the
    HTTP-equivalent status the boundary layer responds with.
    """

    code = "DOMAIN_ERROR"
    status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "AUTH_REQUIRED"
    status = 401


class ForbiddenError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    status = 403


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status = 404


# Attendance state machine


class DuplicateCheckInError(DomainError):
    code = "DUPLICATE_CHECK_IN"
    status = 409


class DuplicateCheckOutError(DomainError):
    code = "DUPLICATE_CHECK_OUT"
    status = 409


class NoCheckInError(DomainError):
    code = "NO_CHECK_IN"
    status = 409


class InvalidOrderError(DomainError):
    """Check-out timestamp is not after the check-in timestamp."""

    code = "INVALID_ORDER"


# Leave state machine


class OverlapError(DomainError):
    code = "LEAVE_OVERLAP"
    status = 409


class InsufficientBalanceError(DomainError):
    code = "INSUFFICIENT_BALANCE"
    status = 422


class NotPendingError(DomainError):
    code = "NOT_PENDING"
    status = 409


class NotCancellableError(DomainError):
    code = "NOT_CANCELLABLE"
    status = 409


class ConflictError(DomainError):
    """A unique field (employee code, email, department name) is already taken."""

    code = "CONFLICT"
    status = 409
