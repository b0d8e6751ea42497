"""Data-access exceptions for stored-procedure calls.

These carry structured context for the single log record written at the
operation boundary. They never escape ``ChargeRepository``: callers only ever
see ``None`` for unavailable data.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ProcedureStage(str, Enum):
    """Stages of a stored-procedure call."""

    EXECUTE = "execute"
    FETCH = "fetch"
    ADVANCE = "advance"


class ChargeDataError(Exception):
    """Base class for charge data-access failures."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to structured dict for logging."""
        return {
            "error_type": type(self).__name__,
            "message": str(self),
        }


class ConnectionPoolTimeout(ChargeDataError):
    """No pooled connection became available within the checkout timeout."""

    def __init__(self, pool_name: str, timeout: float):
        self.pool_name = pool_name
        self.timeout = timeout
        super().__init__(
            f"No connection available from pool '{pool_name}' within {timeout}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "pool": self.pool_name,
            "timeout": self.timeout,
        }


class ConnectionPoolClosed(ChargeDataError):
    """A connection was requested from a pool that has been disposed."""

    def __init__(self, pool_name: str):
        self.pool_name = pool_name
        super().__init__(f"Connection pool '{pool_name}' is closed")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "pool": self.pool_name}


class ProcedureCallError(ChargeDataError):
    """Structured error for a failed stored-procedure call with stage context."""

    def __init__(
        self,
        procedure: str,
        stage: ProcedureStage,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.procedure = procedure
        self.stage = stage
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:  # pragma: no cover - trivial string repr
        return (
            f"Procedure '{self.procedure}' failed "
            f"at stage '{self.stage.value}': {self.args[0]}"
        )

    def to_dict(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {
            **super().to_dict(),
            "procedure": self.procedure,
            "failed_stage": self.stage.value,
        }
        if self.original_error is not None:
            details["original_error_type"] = type(self.original_error).__name__
            details["original_error_message"] = str(self.original_error)
        return details


class MissingResultSetError(ProcedureCallError):
    """The procedure did not produce a result set the protocol requires."""

    def __init__(self, procedure: str, result_set_index: int):
        self.result_set_index = result_set_index
        stage = ProcedureStage.EXECUTE if result_set_index == 0 else ProcedureStage.ADVANCE
        super().__init__(
            procedure,
            stage,
            f"expected result set #{result_set_index + 1} is missing",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "result_set_index": self.result_set_index}


class RowMappingError(ChargeDataError):
    """A result-set row lacks a required column or holds an unconvertible value."""

    def __init__(self, column: str, message: str, original_error: Optional[Exception] = None):
        self.column = column
        self.original_error = original_error
        super().__init__(f"column '{column}': {message}")

    def to_dict(self) -> Dict[str, Any]:
        details = {**super().to_dict(), "column": self.column}
        if self.original_error is not None:
            details["original_error_type"] = type(self.original_error).__name__
        return details
