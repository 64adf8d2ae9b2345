"""mcpgate - lazy-loading Model Context Protocol tool gateway.

Advertises a catalog of typed operations and runs exactly one per call,
importing its implementation only at call time.

Quick Start:
    >>> from mcpgate import ToolRegistry, Dispatcher
    >>> from mcpgate.servers import SERVERS
    >>>
    >>> registry = ToolRegistry.build(SERVERS)
    >>> dispatcher = Dispatcher(registry)
    >>> [t.name for t in dispatcher.list_tools()]
    ['example__greet']

Writing a collaborator:
    >>> from pydantic import BaseModel
    >>> from mcpgate import create_tool
    >>>
    >>> class AddInput(BaseModel):
    ...     a: int
    ...     b: int
    >>>
    >>> class AddOutput(BaseModel):
    ...     total: int
    >>>
    >>> async def _add(p: AddInput) -> AddOutput:
    ...     return AddOutput(total=p.a + p.b)
    >>>
    >>> add = create_tool(name="math__add", input=AddInput, output=AddOutput, execute=_add)
"""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = [
    # Contract
    "Tool", "ToolContract", "create_tool", "ToolRef", "wire_name",
    # Errors
    "ErrorCode", "ToolError", "OperationError", "UnknownToolError", "DuplicateToolError", "ConfigurationError",
    # Registry
    "ToolRegistry", "RegistryEntry", "ServerGroup", "ToolSpec",
    # Dispatch & transports
    "Dispatcher", "create_http_app", "run_stdio", "serve_http",
    # Config & logging
    "Settings", "get_settings", "configure_logging", "get_logger",
]


def __getattr__(name: str):
    """Lazy imports keep `import mcpgate` free of the protocol and HTTP stacks."""
    if name in ("Tool", "ToolContract", "create_tool", "ToolRef", "wire_name"):
        from .foundation import core
        return getattr(core, name)
    if name in ("ErrorCode", "ToolError", "OperationError", "UnknownToolError", "DuplicateToolError",
                "ConfigurationError"):
        from .foundation import errors
        return getattr(errors, name)
    if name in ("ToolRegistry", "RegistryEntry", "ServerGroup", "ToolSpec"):
        from .foundation import registry
        return getattr(registry, name)
    if name in ("Dispatcher", "create_http_app", "run_stdio", "serve_http"):
        from .ext import mcp
        return getattr(mcp, name)
    if name in ("Settings", "get_settings"):
        from .foundation import config
        return getattr(config, name)
    if name in ("configure_logging", "get_logger"):
        from .runtime.observability import logging
        return getattr(logging, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
