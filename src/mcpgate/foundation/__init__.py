"""Foundation - Core building blocks for mcpgate.

Contains: naming, schema translation, tool contract, errors, registry, config.
"""

from __future__ import annotations

__all__ = [
    # Core
    "Tool", "ToolContract", "create_tool", "ToolRef", "camel_to_snake", "normalize_group", "wire_name",
    "to_wire_schema", "has_refs",
    # Errors
    "ErrorCode", "ToolError", "OperationError", "UnknownToolError", "RegistryError",
    "DuplicateToolError", "SchemaError", "ConfigurationError", "classify_exception", "format_validation_error",
    # Registry
    "ToolRegistry", "RegistryEntry", "ServerGroup", "ToolSpec", "ModuleLoader",
    # Config
    "Settings", "ServerSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]

_CORE = frozenset(__all__[:9])
_ERRORS = frozenset(__all__[9:19])
_REGISTRY = frozenset(__all__[19:24])
_CONFIG = frozenset(__all__[24:])


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in _CORE:
        from . import core
        return getattr(core, name)
    if name in _ERRORS:
        from . import errors
        return getattr(errors, name)
    if name in _REGISTRY:
        from . import registry
        return getattr(registry, name)
    if name in _CONFIG:
        from . import config
        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
