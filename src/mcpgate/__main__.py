"""Command-line entry point: ``python -m mcpgate`` / ``mcpgate``."""

from __future__ import annotations

import argparse
import sys

from mcpgate.foundation.config import get_settings
from mcpgate.foundation.errors import ConfigurationError, RegistryError
from mcpgate.foundation.registry import ToolRegistry
from mcpgate.runtime.observability.logging import configure_logging, get_logger


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mcpgate", description="Serve the tool catalog over MCP.")
    parser.add_argument("--transport", choices=("stdio", "http"), help="override MCP_TRANSPORT")
    parser.add_argument("--host", help="override MCP_HOST (http only)")
    parser.add_argument("--port", type=int, help="override MCP_PORT (http only)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
    if overrides:
        settings = settings.model_copy(update={"server": settings.server.model_copy(update=overrides)})
    transport = args.transport or settings.transport

    configure_logging(format=settings.logging.format, level=settings.logging.level)
    log = get_logger("mcpgate", transport=transport)
    log.info("starting MCP server", auth_enabled=settings.auth_enabled)

    if transport == "http":
        try:
            settings.require_api_key()
        except ConfigurationError as e:
            log.critical(str(e))
            return 1

    from mcpgate.servers import get_all_servers

    try:
        registry = ToolRegistry.build(get_all_servers())
    except RegistryError as e:
        log.critical("failed to build tool registry", error=str(e))
        return 1

    if transport == "http":
        from mcpgate.ext.mcp.http import serve_http
        serve_http(registry, settings)
    else:
        from mcpgate.ext.mcp.stdio import run_stdio
        run_stdio(registry, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
