"""Model Context Protocol bindings for mcpgate.

Provides the request dispatcher and two transports:

1. **stdio** - one local client over stdin/stdout (desktop agent hosts)
2. **HTTP** - stateless Streamable HTTP behind bearer-token auth

Example - stdio:
    >>> from mcpgate.ext.mcp import run_stdio
    >>> run_stdio(registry, settings)

Example - HTTP app for embedding or testing:
    >>> from mcpgate.ext.mcp import create_http_app
    >>> app = create_http_app(registry, settings)  # Starlette app
"""

from __future__ import annotations

__all__ = [
    "Dispatcher", "create_mcp_server", "serialize_result", "error_result",
    "serve_stdio", "run_stdio",
    "BearerAuthMiddleware", "StatelessMCPEndpoint", "create_http_app", "serve_http", "rpc_error",
]


def __getattr__(name: str):
    """Lazy imports: the HTTP stack is only loaded when asked for."""
    if name in ("Dispatcher", "create_mcp_server", "serialize_result", "error_result"):
        from . import server
        return getattr(server, name)
    if name in ("serve_stdio", "run_stdio"):
        from . import stdio
        return getattr(stdio, name)
    if name in ("BearerAuthMiddleware", "StatelessMCPEndpoint", "create_http_app", "serve_http", "rpc_error"):
        from . import http
        return getattr(http, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
