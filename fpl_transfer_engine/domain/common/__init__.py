"""Common domain types and utilities."""

from .cancellation import CancellationToken
from .errors import (
    BudgetViolation,
    ClubCapViolation,
    ConstraintViolation,
    DuplicatePlayerError,
    InvalidMoveError,
    InvalidSquadError,
    OperationCancelledError,
    ProjectionUnavailableError,
    TransferEngineError,
)
from .result import DomainError, ErrorType, Result

__all__ = [
    "Result",
    "DomainError",
    "ErrorType",
    "CancellationToken",
    "TransferEngineError",
    "InvalidSquadError",
    "ConstraintViolation",
    "BudgetViolation",
    "ClubCapViolation",
    "DuplicatePlayerError",
    "InvalidMoveError",
    "ProjectionUnavailableError",
    "OperationCancelledError",
]
