"""Unified error handling for mcpgate.

- ErrorCode: Standard error codes for operation failures
- ToolError/OperationError: Structured error record and the exception carrying it
- UnknownToolError: Routing failure, surfaced as a protocol-level error
- RegistryError/DuplicateToolError/SchemaError: Catalog construction failures
- ConfigurationError: Fatal startup configuration problems
"""

from .errors import (
    ConfigurationError,
    DuplicateToolError,
    ErrorCode,
    OperationError,
    RegistryError,
    SchemaError,
    ToolError,
    UnknownToolError,
    classify_exception,
    format_validation_error,
)

__all__ = [
    "ErrorCode", "ToolError", "OperationError", "classify_exception", "format_validation_error",
    "UnknownToolError", "RegistryError", "DuplicateToolError", "SchemaError", "ConfigurationError",
]
