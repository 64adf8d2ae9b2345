"""Tests for the stdio transport, driven over in-memory streams."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

import anyio
import pytest
from mcp import ClientSession

from mcpgate.ext.mcp import stdio
from mcpgate.foundation.config import ServerSettings, Settings
from mcpgate.foundation.registry import ToolRegistry
from mcpgate.runtime.observability.logging import CaptureRenderer, set_renderer


@pytest.fixture
def settings() -> Settings:
    return Settings(server=ServerSettings(api_key=None))


@pytest.fixture
def streams(monkeypatch: pytest.MonkeyPatch):
    """Replace the process streams with a connected pair of memory streams.

    Returns the client ends as (read, write).
    """
    to_server_send, to_server_recv = anyio.create_memory_object_stream(16)
    to_client_send, to_client_recv = anyio.create_memory_object_stream(16)

    @asynccontextmanager
    async def memory_stdio():
        yield to_server_recv, to_client_send

    monkeypatch.setattr(stdio, "stdio_server", memory_stdio)
    return to_client_recv, to_server_send


@pytest.mark.asyncio
async def test_list_and_call(registry: ToolRegistry, settings: Settings, streams) -> None:
    read, write = streams
    async with anyio.create_task_group() as tg:
        tg.start_soon(stdio.serve_stdio, registry, settings)
        async with ClientSession(read, write) as session:
            init = await session.initialize()
            listed = await session.list_tools()
            result = await session.call_tool("alpha__do_thing", {"x": 4})
            failed = await session.call_tool("alpha__do_thing", {})
        tg.cancel_scope.cancel()

    assert init.serverInfo.name == "mcpgate"
    assert init.capabilities.tools is not None
    assert [t.name for t in listed.tools] == ["alpha__do_thing", "beta__get_value"]
    assert not result.isError
    assert result.structuredContent == {"result": 8.0}
    assert failed.isError is True


@pytest.mark.asyncio
async def test_cancel_stops_cleanly(registry: ToolRegistry, settings: Settings, streams) -> None:
    set_renderer(capture := CaptureRenderer())
    task = asyncio.create_task(stdio._serve_until_signalled(registry, settings))
    for _ in range(200):
        if "MCP server ready on stdio" in capture.events():
            break
        await asyncio.sleep(0.005)
    assert "MCP server ready on stdio" in capture.events()

    task.cancel()
    await task
    assert not task.cancelled()
    assert "MCP server stopped" in capture.events("info")
    ready = next(e for e in capture.entries if e.event == "MCP server ready on stdio")
    assert ready.context["transport"] == "stdio"
