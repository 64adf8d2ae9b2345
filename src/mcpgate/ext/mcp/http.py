"""Stateless HTTP transport with bearer-token authentication.

Endpoints:
    GET    /health  → {"status": "ok", "tools": <catalog size>} (no auth, for probes)
    POST   /mcp     → JSON-RPC over Streamable HTTP, fresh server per request
    GET    /mcp     → 405, no SSE stream in stateless mode
    DELETE /mcp     → 405, no sessions to terminate

Every path under /mcp sits behind `BearerAuthMiddleware`. The app refuses to
start without a configured token.

Example:
    >>> app = create_http_app(registry, get_settings())
    >>> uvicorn.run(app, host="0.0.0.0", port=3000)
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from mcpgate.foundation.config import Settings
from mcpgate.foundation.registry import ToolRegistry
from mcpgate.runtime.observability.logging import get_logger, log_context

from .server import create_mcp_server

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

log = get_logger("mcpgate.http")

MCP_PATH = "/mcp"

# JSON-RPC error codes used by the HTTP surface
AUTH_MISSING = -32001
AUTH_INVALID = -32002
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


def rpc_error(status_code: int, code: int, message: str) -> JSONResponse:
    """JSON-RPC shaped error body for failures outside any request id."""
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": None},
        status_code=status_code,
    )


class BearerAuthMiddleware:
    """Pure ASGI middleware checking ``Authorization: Bearer <token>`` on protected paths.

    Missing or malformed header → 401; wrong token → 403; otherwise pass through.
    """

    __slots__ = ("app", "_token", "_prefix")

    def __init__(self, app: ASGIApp, *, token: str, prefix: str = MCP_PATH) -> None:
        if not token:
            raise ValueError("BearerAuthMiddleware requires a non-empty token")
        self.app = app
        self._token = token.encode()
        self._prefix = prefix.rstrip("/")

    def _protects(self, path: str) -> bool:
        return path == self._prefix or path.startswith(f"{self._prefix}/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._protects(scope["path"]):
            await self.app(scope, receive, send)
            return

        header = Headers(scope=scope).get("authorization")
        if not header or not header.startswith("Bearer "):
            log.warning("rejected request without bearer token", path=scope["path"], method=scope["method"])
            response = rpc_error(401, AUTH_MISSING, "Missing or invalid Authorization header. Expected: Bearer <token>")
        elif not secrets.compare_digest(header[7:].encode(), self._token):
            log.warning("rejected request with invalid API key", path=scope["path"], method=scope["method"])
            response = rpc_error(403, AUTH_INVALID, "Invalid API key")
        else:
            await self.app(scope, receive, send)
            return
        await response(scope, receive, send)


class StatelessMCPEndpoint:
    """ASGI endpoint building a fresh dispatcher and protocol server for each request."""

    __slots__ = ("_registry", "_settings")

    def __init__(self, registry: ToolRegistry, settings: Settings) -> None:
        self._registry = registry
        self._settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        started = False

        async def tracked_send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        server = create_mcp_server(
            self._registry, name=self._settings.server.name, version=self._settings.server.version,
        )
        manager = StreamableHTTPSessionManager(
            app=server,
            event_store=None,
            json_response=self._settings.server.json_response,
            stateless=True,
        )
        with log_context(transport="http", client=scope["client"][0] if scope.get("client") else None):
            try:
                async with manager.run():
                    await manager.handle_request(scope, receive, tracked_send)
            except Exception as e:
                log.exception("HTTP request failed", error=str(e))
                if not started:
                    await rpc_error(500, INTERNAL_ERROR, "Internal server error")(scope, receive, send)


def create_http_app(registry: ToolRegistry, settings: Settings) -> Starlette:
    """Create the ASGI application without running it.

    Raises:
        ConfigurationError: no MCP_API_KEY configured
    """
    token = settings.require_api_key()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "tools": len(registry)})

    async def sse_not_supported(request: Request) -> JSONResponse:
        return rpc_error(405, METHOD_NOT_FOUND, "SSE not supported in stateless mode")

    async def session_termination_not_supported(request: Request) -> JSONResponse:
        return rpc_error(405, METHOD_NOT_FOUND, "Session termination not supported in stateless mode")

    routes = [
        Route("/health", health, methods=["GET"]),
        Route(MCP_PATH, StatelessMCPEndpoint(registry, settings), methods=["POST"]),
        Route(MCP_PATH, sse_not_supported, methods=["GET"]),
        Route(MCP_PATH, session_termination_not_supported, methods=["DELETE"]),
    ]
    return Starlette(routes=routes, middleware=[Middleware(BearerAuthMiddleware, token=token, prefix=MCP_PATH)])


def serve_http(registry: ToolRegistry, settings: Settings) -> None:
    """Run the HTTP transport with uvicorn (blocking; uvicorn owns signal handling)."""
    import uvicorn

    app = create_http_app(registry, settings)
    log.info("MCP server ready on HTTP", host=settings.server.host, port=settings.server.port,
             tools=len(registry))
    uvicorn.run(app, host=settings.server.host, port=settings.server.port,
                log_level=settings.logging.level.lower())
    log.info("MCP server stopped")
