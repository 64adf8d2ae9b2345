"""Tests for the example group served from the built-in catalog."""

from __future__ import annotations

from datetime import datetime

import orjson
import pytest

from mcpgate.ext.mcp import Dispatcher
from mcpgate.foundation.errors import OperationError
from mcpgate.foundation.registry import ToolRegistry
from mcpgate.servers import SERVERS, get_all_servers
from mcpgate.servers.example.greet import GreetOutput, greet


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher(ToolRegistry.build(get_all_servers()))


def test_catalog_lookup() -> None:
    assert get_all_servers() is SERVERS
    [example] = get_all_servers()
    assert example.name == "example"
    assert [t.operation for t in example.tools] == ["greet"]


def test_catalog_listing(dispatcher: Dispatcher) -> None:
    [tool] = dispatcher.list_tools()
    assert tool.name == "example__greet"
    assert tool.description == "Greet a person by name in English, Polish or Spanish"
    assert tool.inputSchema["required"] == ["name"]
    assert tool.inputSchema["properties"]["language"]["enum"] == ["en", "pl", "es"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("language", "expected"),
    [("en", "Hello, Ada!"), ("pl", "Cześć, Ada!"), ("es", "¡Hola, Ada!")],
)
async def test_greet_languages(language: str, expected: str) -> None:
    result = await greet.call({"name": "Ada", "language": language})
    assert result.greeting == expected
    assert datetime.fromisoformat(result.timestamp).tzinfo is not None


@pytest.mark.asyncio
async def test_greet_defaults_to_english() -> None:
    assert (await greet.call({"name": "Ada"})).greeting == "Hello, Ada!"


@pytest.mark.asyncio
async def test_greet_rejects_unknown_language() -> None:
    with pytest.raises(OperationError, match="language"):
        await greet.call({"name": "Ada", "language": "de"})


@pytest.mark.asyncio
async def test_greet_through_dispatcher(dispatcher: Dispatcher) -> None:
    result = await dispatcher.call_tool("example__greet", {"name": "Ada", "language": "es"})
    assert not result.isError
    payload = GreetOutput.model_validate(orjson.loads(result.content[0].text))
    assert payload.greeting == "¡Hola, Ada!"
    assert result.structuredContent == payload.model_dump()


@pytest.mark.asyncio
async def test_greet_missing_name(dispatcher: Dispatcher) -> None:
    result = await dispatcher.call_tool("example__greet", {})
    assert result.isError is True
    assert "name" in result.content[0].text
