"""Tagged results returned by the service layer."""

from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel

from mywn.core.errors import ErrorResponse


T = TypeVar("T")


class OperationStatus(StrEnum):
    """Outcome of a storage operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class OperationResult(BaseModel, Generic[T]):
    """Result of a storage operation: a value, a miss, or a failure with details."""

    status: OperationStatus
    value: T | None = None
    error: ErrorResponse | None = None

    @property
    def is_ok(self) -> bool:
        return self.status == OperationStatus.OK

    @classmethod
    def ok(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(status=OperationStatus.OK, value=value)

    @classmethod
    def not_found(cls) -> "OperationResult[T]":
        return cls(status=OperationStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: ErrorResponse) -> "OperationResult[T]":
        return cls(status=OperationStatus.FAILED, error=error)
