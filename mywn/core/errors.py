"""Storage error taxonomy and classification utilities."""

import sqlite3
from enum import Enum

from pydantic import BaseModel


class StorageError(Exception):
    """Base class for storage adapter errors."""


class StorageUnavailableError(StorageError):
    """The database file could not be created or opened. Fatal for the session."""


class OperationFailedError(StorageError):
    """A single statement did not take effect."""


class AdapterClosedError(StorageError, RuntimeError):
    """A CRUD method was called on an adapter that is not open."""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific storage conditions."""

    ERR_STORAGE_UNAVAILABLE = "ERR_STORAGE_UNAVAILABLE"
    ERR_ADAPTER_CLOSED = "ERR_ADAPTER_CLOSED"
    ERR_VALUE_OUT_OF_RANGE = "ERR_VALUE_OUT_OF_RANGE"
    ERR_CONSTRAINT_VIOLATION = "ERR_CONSTRAINT_VIOLATION"
    ERR_DATABASE_BUSY = "ERR_DATABASE_BUSY"
    ERR_OPERATION_FAILED = "ERR_OPERATION_FAILED"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with a recovery suggestion."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_UNAVAILABLE_PHRASES = (
    "unable to open database",
    "file is not a database",
    "database disk image is malformed",
    "no such table",
    "readonly database",
)
_BUSY_PHRASES = ("database is locked", "database table is locked", "busy")


def classify_storage_error(exception: BaseException | None) -> ErrorResponse:  # noqa: PLR0911
    """Classify a storage failure and return a structured response.

    Args:
        exception: The exception raised by the adapter or SQLite, if one was recorded

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if exception is None:
        return ErrorResponse(
            code=ErrorCode.ERR_OPERATION_FAILED,
            message="The operation did not take effect.",
            suggestion="Check that the record still exists and try again.",
            severity=ErrorSeverity.LOW,
        )

    error_str = str(exception).lower()

    if isinstance(exception, AdapterClosedError):
        return ErrorResponse(
            code=ErrorCode.ERR_ADAPTER_CLOSED,
            message="The database is not open.",
            suggestion="Call open() before using the adapter.",
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, StorageUnavailableError) or any(p in error_str for p in _UNAVAILABLE_PHRASES):
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE_UNAVAILABLE,
            message="The database could not be opened.",
            suggestion="Check the database path, its permissions, and that the file is not corrupt.",
            severity=ErrorSeverity.CRITICAL,
        )

    if isinstance(exception, OverflowError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALUE_OUT_OF_RANGE,
            message="A number is too large to store.",
            suggestion="Use an id or order number within the 64-bit integer range.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, sqlite3.IntegrityError) or "constraint failed" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_CONSTRAINT_VIOLATION,
            message="The record violates a table constraint.",
            suggestion="Make sure every required field has a value.",
            severity=ErrorSeverity.LOW,
        )

    if any(p in error_str for p in _BUSY_PHRASES):
        return ErrorResponse(
            code=ErrorCode.ERR_DATABASE_BUSY,
            message="The database is busy.",
            suggestion="Wait a moment and try again.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, OperationFailedError | sqlite3.Error):
        return ErrorResponse(
            code=ErrorCode.ERR_OPERATION_FAILED,
            message="The database rejected the operation.",
            suggestion="Try again. If the problem persists, reinstall the app data.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later.",
        severity=ErrorSeverity.MEDIUM,
    )
