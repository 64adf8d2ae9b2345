"""Local duplex-stream transport: one protocol server bound to stdin/stdout.

Single client, lives as long as the process. SIGINT/SIGTERM cancel the
serving task, which closes the streams and lets the process exit.
"""

from __future__ import annotations

import asyncio
import signal
from contextlib import suppress

from mcp.server.stdio import stdio_server

from mcpgate.foundation.config import Settings
from mcpgate.foundation.registry import ToolRegistry
from mcpgate.runtime.observability.logging import get_logger, log_context

from .server import Dispatcher

log = get_logger("mcpgate.stdio")


async def serve_stdio(registry: ToolRegistry, settings: Settings) -> None:
    """Serve the registry over the process's standard streams until EOF."""
    server = Dispatcher(registry).create_server(settings.server.name, settings.server.version)
    with log_context(transport="stdio"):
        async with stdio_server() as (read_stream, write_stream):
            log.info("MCP server ready on stdio", tools=len(registry))
            await server.run(read_stream, write_stream, server.create_initialization_options())


async def _serve_until_signalled(registry: ToolRegistry, settings: Settings) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Unavailable on Windows loops and off the main thread; KeyboardInterrupt still applies
        with suppress(NotImplementedError, RuntimeError, ValueError):
            loop.add_signal_handler(sig, task.cancel)
            installed.append(sig)
    try:
        await serve_stdio(registry, settings)
    except asyncio.CancelledError:
        log.info("MCP server stopped")
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


def run_stdio(registry: ToolRegistry, settings: Settings) -> None:
    """Blocking entry point for the stdio transport."""
    with suppress(KeyboardInterrupt):
        asyncio.run(_serve_until_signalled(registry, settings))
