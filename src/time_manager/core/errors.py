"""Error kinds raised by the core and translated once at the API boundary."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a failure, carrying the HTTP status it maps to."""

    VALIDATION = 400
    AUTHENTICATION = 401
    AUTHORIZATION = 403
    NOT_FOUND = 404
    CONFLICT = 409

    @property
    def status_code(self) -> int:
        """HTTP status code for this kind."""
        return int(self.value)


class TimeManagerError(Exception):
    """Base class for expected, user-facing failures."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        """HTTP status code of this error's kind."""
        return self.kind.status_code


class ValidationError(TimeManagerError):
    """Missing or malformed input."""

    kind = ErrorKind.VALIDATION


class AuthenticationError(TimeManagerError):
    """Missing, invalid or expired credentials."""

    kind = ErrorKind.AUTHENTICATION


class AuthorizationError(TimeManagerError):
    """Requester is not allowed to perform the operation."""

    kind = ErrorKind.AUTHORIZATION


class NotFoundError(TimeManagerError):
    """Referenced user or team does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(TimeManagerError):
    """Unique username or email already taken."""

    kind = ErrorKind.CONFLICT
