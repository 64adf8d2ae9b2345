"""Standardized error handling for dispatched operations.

Provides error codes, the structured `ToolError` record and the
`OperationError` exception every tool contract raises. Uses Pydantic for
validation and serialization of the error record.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for operation failures.

    Used for structured logging and to tell callers whether a retry makes sense.
    """
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INVALID_PARAMS = "INVALID_PARAMS"
    INVALID_OUTPUT = "INVALID_OUTPUT"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    TIMEOUT = "TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFIGURATION = "CONFIGURATION"
    UNKNOWN = "UNKNOWN"


# Flattened pattern -> code mapping, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "rate": ErrorCode.RATE_LIMITED,
    "limit": ErrorCode.RATE_LIMITED,
    "permission": ErrorCode.PERMISSION_DENIED,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "notfound": ErrorCode.NOT_FOUND,
    "modulenotfound": ErrorCode.NOT_FOUND,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXECUTION_FAILED


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on name/message."""
    return _classify_cached(f"{type(exc).__name__} {exc}")


def format_validation_error(exc: ValidationError) -> str:
    """Join every violation as `loc: msg` in the order pydantic reports them."""
    parts = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return ", ".join(parts)


class ToolError(BaseModel):
    """Structured record of an operation failure.

    Attributes:
        tool_name: Name of the operation that failed
        message: Human-readable error message
        code: Machine-readable error code
        retryable: Whether the caller may retry (set by the collaborator)
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True)

    tool_name: Annotated[str, Field(min_length=1, description="Name of the operation that produced the error")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    retryable: bool = Field(default=False, description="Whether retry might succeed")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message; never allow an empty one."""
        v = str(v) if isinstance(v, Exception) else v
        return v if isinstance(v, str) and v.strip() else "Unknown error occurred"

    @computed_field
    @property
    def severity(self) -> str:
        """Log severity reported by the dispatcher for this failure."""
        if self.code in (ErrorCode.RATE_LIMITED, ErrorCode.TIMEOUT, ErrorCode.NETWORK_ERROR):
            return "warning"
        if self.code in (ErrorCode.INVALID_OUTPUT, ErrorCode.CONFIGURATION):
            return "critical"
        return "error"

    def render(self) -> str:
        """Format error the way it is shown to the calling agent."""
        return f"[{self.tool_name}] {self.message}"

    __str__ = render


class OperationError(Exception):
    """Exception raised by a tool contract or collaborator; wraps a `ToolError`.

    Collaborators signal transient failures by constructing it themselves with
    `retryable=True`. Every other failure surfaces as non-retryable.
    """

    __slots__ = ("error",)

    def __init__(self, error: ToolError, cause: BaseException | None = None) -> None:
        self.error = error
        super().__init__(error.render())
        if cause is not None:
            self.__cause__ = cause

    @property
    def operation(self) -> str:
        return self.error.tool_name

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def retryable(self) -> bool:
        return self.error.retryable

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    @classmethod
    def create(
        cls,
        operation: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        retryable: bool = False,
        cause: BaseException | None = None,
    ) -> Self:
        """Factory method for construction."""
        return cls(ToolError(tool_name=operation, message=message, code=code, retryable=retryable), cause)

    @classmethod
    def from_exception(
        cls,
        operation: str,
        exc: BaseException,
        *,
        retryable: bool = False,
    ) -> Self:
        """Wrap an arbitrary exception, classifying its code."""
        error = ToolError(
            tool_name=operation,
            message=str(exc) or type(exc).__name__,
            code=classify_exception(exc),
            retryable=retryable,
        )
        return cls(error, exc)


class UnknownToolError(LookupError):
    """Routing error: no registry entry for the requested wire name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class RegistryError(RuntimeError):
    """Base class for catalog construction failures."""


class DuplicateToolError(RegistryError):
    """Two catalog entries normalize to the same wire name."""

    def __init__(self, wire_name: str, first: str, second: str) -> None:
        self.wire_name = wire_name
        super().__init__(f"Wire name '{wire_name}' is produced by both {first} and {second}")


class SchemaError(ValueError):
    """An input model cannot be translated into a self-contained wire schema."""


class ConfigurationError(RuntimeError):
    """Fatal startup configuration problem."""
