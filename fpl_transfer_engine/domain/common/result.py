"""Result types for reporting expected optimizer outcomes without raising."""

from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorType(str, Enum):
    """Error categories an engine operation can report."""

    VALIDATION_ERROR = "validation_error"
    DATA_NOT_FOUND = "data_not_found"
    DATA_ACCESS_ERROR = "data_access_error"
    INFEASIBLE = "infeasible"
    NO_LEGAL_REPLACEMENT = "no_legal_replacement"
    CANCELLED = "cancelled"


class DomainError(BaseModel):
    """Structured error information for callers."""

    error_type: ErrorType = Field(..., description="Error category")
    message: str = Field(..., min_length=1, description="Human-readable message")
    details: Optional[Dict] = Field(None, description="Extra context, e.g. ids")

    @classmethod
    def validation_error(cls, message: str, details: Optional[Dict] = None):
        return cls(
            error_type=ErrorType.VALIDATION_ERROR, message=message, details=details
        )

    @classmethod
    def data_not_found(cls, message: str, details: Optional[Dict] = None):
        return cls(
            error_type=ErrorType.DATA_NOT_FOUND, message=message, details=details
        )

    @classmethod
    def infeasible(cls, message: str, details: Optional[Dict] = None) -> "DomainError":
        """No legal lineup, formation or wildcard squad exists for the data."""
        return cls(error_type=ErrorType.INFEASIBLE, message=message, details=details)

    @classmethod
    def no_legal_replacement(
        cls, player_name: str, details: Optional[Dict] = None
    ) -> "DomainError":
        """Every candidate for an outgoing slot failed a hard constraint."""
        return cls(
            error_type=ErrorType.NO_LEGAL_REPLACEMENT,
            message=f"No legal replacement for {player_name}",
            details=details,
        )

    @classmethod
    def cancelled(cls, message: Optional[str] = None) -> "DomainError":
        return cls(
            error_type=ErrorType.CANCELLED, message=message or "Operation cancelled"
        )


class Result(Generic[T]):
    """
    Either a value or a DomainError.

    Operations whose failure is an expected outcome (no feasible formation,
    no budget-legal wildcard, cancellation) return one of these instead of
    raising. A successful result may carry ``None``.
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[DomainError] = None):
        if error is not None and value is not None:
            raise ValueError("Result holds a value or an error, not both")
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "Result[T]":
        if error is None:
            raise ValueError("Failed result needs an error")
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        """Success value. Raises ValueError on a failed result."""
        if self.is_failure:
            raise ValueError(f"Result failed: {self._error.message}")
        return self._value

    @property
    def error(self) -> DomainError:
        if self.is_success:
            raise ValueError("No error on a successful result")
        return self._error

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error.error_type.value}: {self._error.message})"
