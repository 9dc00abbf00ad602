"""Domain error codes for the order sheet module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_DATE = "INVALID_DATE"
    DATE_OUT_OF_RANGE = "DATE_OUT_OF_RANGE"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    INVALID_REQUEST = "INVALID_REQUEST"
    PROVIDER_FAILURE = "PROVIDER_FAILURE"
    CACHE_STORE_FAILURE = "CACHE_STORE_FAILURE"
    LOG_SINK_FAILURE = "LOG_SINK_FAILURE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidDateError(DomainError):
    """Raised when a requested report date is malformed or out of range."""

    def __init__(self, code: ErrorCode = ErrorCode.INVALID_DATE) -> None:
        message = "Invalid date format." if code is ErrorCode.INVALID_DATE_FORMAT else "Invalid date."
        super().__init__(code=code, message=message)


class AuthorizationError(DomainError):
    """Raised when an actor lacks the order sheet capability."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_AUTHORIZED,
            message="Security check failed.",
        )


class ProviderError(DomainError):
    """Raised by an event or order provider that cannot serve a lookup."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PROVIDER_FAILURE, message=message)


class CacheStoreError(DomainError):
    """Raised when the cache backend cannot be read or written."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CACHE_STORE_FAILURE, message=message)


class LogSinkError(DomainError):
    """Raised by an access log sink that failed to persist an entry."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.LOG_SINK_FAILURE, message=message)
