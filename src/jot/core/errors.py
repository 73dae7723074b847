"""Error types surfaced to protocol callers with a stable code."""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error codes carried in failed responses."""

    INVALID_INPUT = "INVALID_INPUT"
    PATH_NOT_FOUND = "PATH_NOT_FOUND"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class JotError(Exception):
    """Base error for store operations that callers can branch on."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidInputError(JotError):
    """Raised when a required field is missing or empty."""

    code = ErrorCode.INVALID_INPUT


class PathNotFoundError(JotError):
    """Raised when the configured vault path does not exist."""

    code = ErrorCode.PATH_NOT_FOUND


class NotConfiguredError(JotError):
    """Raised when an operation needs a vault but none is configured."""

    code = ErrorCode.NOT_CONFIGURED

    def __init__(self, message: str = "Not configured"):
        super().__init__(message)


class NotFoundError(JotError):
    """Raised when a referenced thread or comment does not exist."""

    code = ErrorCode.NOT_FOUND


class FramingError(Exception):
    """Raised when the transport stream carries a malformed frame."""

    pass
