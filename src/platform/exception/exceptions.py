from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    error_code: str = 'error'

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_content(self) -> dict[str, Any]:
        return {'error': self.error_code, 'detail': self.message}


class DomainError(CustomBaseError):
    error_code = 'domain_error'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    error_code = 'not_found'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    error_code = 'conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    error_code = 'unauthenticated'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class AlreadyResolvedError(ConflictError):
    error_code = 'already_resolved'


class InsufficientCapacityError(ConflictError):
    error_code = 'insufficient_capacity'

    def __init__(self, message: str, *, available: int) -> None:
        self.available = available
        super().__init__(message)

    def to_content(self) -> dict[str, Any]:
        return super().to_content() | {'available': self.available}


class InvalidSeatCountError(DomainError):
    error_code = 'invalid_seat_count'


class MalformedTimeLabelError(ValueError):
    """Raised by the strict time-label parser; the date resolver absorbs it."""


class TransientFailureError(CustomBaseError):
    error_code = 'transient_failure'

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)

    def to_content(self) -> dict[str, Any]:
        return super().to_content() | {'retryable': True}


class InvariantViolationError(CustomBaseError):
    error_code = 'invariant_violation'

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
