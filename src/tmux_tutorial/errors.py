"""
Error handling types.

Two layers live here:

- Values (Error, Result, ErrorReport) for outcomes that are reported and
  carried on, e.g. a missing session when attaching.
- Exceptions (TutorialError and subclasses) raised at the tmux/file
  boundary and caught at the point of use. Only PreconditionError is allowed
  to end the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class ErrorType(Enum):
    NOT_FOUND = "not_found"
    DRIVER_ERROR = "driver_error"
    RESOURCE_ERROR = "resource_error"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"
    PRECONDITION_FAILED = "precondition_failed"
    CORRUPT_STATE = "corrupt_state"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception | None = None


@dataclass
class Result(Generic[T]):
    success: bool
    value: T | None = None
    error: Error | None = None

    @staticmethod
    def ok(value: T | None = None) -> Result[T]:
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> Result[T]:
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success


@dataclass
class ErrorReport:
    errors: list[Error] = field(default_factory=list)
    warnings: list[Error] = field(default_factory=list)

    def add_error(self, error: Error):
        self.errors.append(error)
        logger.error(
            "{}", error.message,
            operation="error_report",
            status="error",
            error_type=error.error_type.value,
            **error.context
        )

    def add_warning(self, error: Error):
        self.warnings.append(error)
        logger.warning(
            "{}", error.message,
            operation="error_report",
            status="warning",
            error_type=error.error_type.value,
            **error.context
        )

    def collect_result(self, result: Result) -> bool:
        """Collect error from Result into report as a warning if failed."""
        if result.is_err():
            self.add_warning(result.error)
            return False
        return True

    def log_summary(self, op_trace_id: str):
        logger.info(
            "Operation complete",
            operation="error_report",
            status="complete",
            trace_id=op_trace_id,
            metrics={
                "total_errors": len(self.errors),
                "total_warnings": len(self.warnings)
            }
        )


# =============================================================================
# Exceptions
# =============================================================================


class TutorialError(Exception):
    """Base exception for the tutorial."""

    error_type = ErrorType.VALIDATION_ERROR

    def context(self) -> dict:
        return {}

    def to_error(self) -> Error:
        return Error(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
            original_exception=self,
        )


class PreconditionError(TutorialError):
    """Raised before any session exists when the tutorial cannot run at all."""

    error_type = ErrorType.PRECONDITION_FAILED

    def __init__(self, message: str, guidance: tuple[str, ...] = ()):
        super().__init__(message)
        self.guidance = guidance


class DriverError(TutorialError):
    """A tmux control command failed or printed something unparseable."""

    error_type = ErrorType.DRIVER_ERROR

    def __init__(
        self,
        operation: str,
        target: str | None,
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.operation = operation
        self.target = target
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        where = f" on '{target}'" if target else ""
        super().__init__(f"tmux {operation}{where} failed (exit {returncode}){detail}")

    def context(self) -> dict:
        return {
            "tmux_operation": self.operation,
            "target": self.target,
            "returncode": self.returncode,
        }


class ResourceError(TutorialError):
    """A temporary message artifact could not be written."""

    error_type = ErrorType.RESOURCE_ERROR


class NotFoundError(TutorialError):
    """An attach or verification target does not exist."""

    error_type = ErrorType.NOT_FOUND

    def __init__(self, target: str):
        super().__init__(f"Session '{target}' not found")
        self.target = target

    def context(self) -> dict:
        return {"target": self.target}


class CorruptStateError(TutorialError):
    """The progress file holds something other than a valid chapter number."""

    error_type = ErrorType.CORRUPT_STATE
