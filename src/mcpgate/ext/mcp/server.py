"""Request dispatcher: the protocol's list and call primitives over a ToolRegistry.

`Dispatcher.list_tools` answers straight from the registry. `call_tool` looks
the wire name up, imports the collaborator module fresh, runs its contract,
and releases the module again. Tool failures come back as a successful
protocol exchange carrying ``isError=True``; only an unknown name becomes a
JSON-RPC error.

Example:
    >>> dispatcher = Dispatcher(ToolRegistry.build(SERVERS))
    >>> [t.name for t in dispatcher.list_tools()]
    ['example__greet']
    >>> result = await dispatcher.call_tool("example__greet", {"name": "Ada"})
    >>> result.structuredContent["greeting"]
    'Hello, Ada!'
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import orjson
from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from pydantic import BaseModel

from mcpgate.foundation.errors import OperationError, UnknownToolError
from mcpgate.foundation.registry import ModuleLoader, ToolRegistry
from mcpgate.runtime.observability.logging import get_logger

log = get_logger("mcpgate.dispatcher")

DEFAULT_SERVER_NAME = "mcpgate"
DEFAULT_SERVER_VERSION = "1.0.0"


def serialize_result(result: object) -> tuple[str, dict[str, Any] | None]:
    """Render a validated output as pretty JSON text plus a structured copy."""
    payload = result.model_dump(mode="json") if isinstance(result, BaseModel) else result
    text = orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()
    return text, payload if isinstance(payload, dict) else None


def error_result(name: str, exc: BaseException) -> types.CallToolResult:
    """Tool-level failure payload; the exchange itself still succeeds."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=f"Error executing {name}: {exc}")],
        isError=True,
    )


class Dispatcher:
    """Binds the list/call protocol operations to a registry.

    Holds no per-call state; any number of `call_tool` coroutines may run
    concurrently against one instance.
    """

    __slots__ = ("_registry", "_loader")

    def __init__(self, registry: ToolRegistry, *, loader: ModuleLoader | None = None) -> None:
        self._registry = registry
        self._loader = loader or ModuleLoader()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def list_tools(self) -> list[types.Tool]:
        """Catalog in registry order, verbatim."""
        tools = [
            types.Tool(name=e.wire_name, description=e.description, inputSchema=e.input_schema)
            for e in self._registry
        ]
        log.debug("listed tools", count=len(tools))
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Invoke one operation.

        Raises:
            UnknownToolError: name is not in the registry (routing error)
        """
        arguments = arguments or {}
        _log = log.bind_tool(name)
        _log.info("tool call received", args_keys=sorted(arguments))

        if (entry := self._registry.get(name)) is None:
            _log.warning("unknown tool requested")
            raise UnknownToolError(name)

        start = time.perf_counter()
        try:
            if (limiter := self._registry.limiter(name)) is not None:
                async with limiter:
                    result = await self._invoke(entry.spec, arguments, _log)
            else:
                result = await self._invoke(entry.spec, arguments, _log)
        except OperationError as e:
            _log.error("tool execution failed", error=e.message, code=e.code, retryable=e.retryable,
                       severity=e.error.severity,
                       duration_ms=round((time.perf_counter() - start) * 1000, 2))
            return error_result(name, e)
        except (asyncio.CancelledError, KeyboardInterrupt):
            raise
        except BaseException as e:
            _log.exception("tool execution failed", error=str(e), error_type=type(e).__name__,
                           duration_ms=round((time.perf_counter() - start) * 1000, 2))
            return error_result(name, e)

        text, structured = serialize_result(result)
        _log.info("tool execution completed", duration_ms=round((time.perf_counter() - start) * 1000, 2),
                  result_keys=sorted(structured or {}))
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=text)],
            structuredContent=structured,
        )

    async def _invoke(self, spec, arguments: dict[str, Any], _log) -> object:
        _log.debug("lazy loading tool implementation", module=spec.module)
        with self._loader.loaded(spec) as tool:
            return await tool.call(arguments)

    # ─────────────────────────────────────────────────────────────────
    # Protocol binding
    # ─────────────────────────────────────────────────────────────────

    async def _handle_list(self, req: types.ListToolsRequest) -> types.ServerResult:
        return types.ServerResult(types.ListToolsResult(tools=self.list_tools()))

    async def _handle_call(self, req: types.CallToolRequest) -> types.ServerResult:
        try:
            result = await self.call_tool(req.params.name, req.params.arguments)
        except UnknownToolError as e:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
        return types.ServerResult(result)

    def create_server(self, name: str = DEFAULT_SERVER_NAME, version: str = DEFAULT_SERVER_VERSION) -> Server:
        """Low-level protocol server with this dispatcher's handlers installed.

        Raw handlers keep the wire format under our control: no schema
        re-validation by the SDK, and routing errors stay JSON-RPC errors.
        """
        server: Server = Server(name, version=version)
        server.request_handlers[types.ListToolsRequest] = self._handle_list
        server.request_handlers[types.CallToolRequest] = self._handle_call
        return server


def create_mcp_server(
    registry: ToolRegistry,
    *,
    name: str = DEFAULT_SERVER_NAME,
    version: str = DEFAULT_SERVER_VERSION,
) -> Server:
    """Fresh dispatcher plus protocol server over a shared registry."""
    return Dispatcher(registry).create_server(name, version)
