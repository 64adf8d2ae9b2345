"""Shared fixtures: catalog groups over the collaborator fixture modules."""

from __future__ import annotations

import pytest

from mcpgate.foundation.config import clear_settings_cache
from mcpgate.foundation.registry import ServerGroup, ToolRegistry, ToolSpec
from mcpgate.runtime.observability.logging import CaptureRenderer, configure_logging, set_renderer

from .fixtures import PACKAGE, state

FIXTURES = PACKAGE


@pytest.fixture(autouse=True)
def captured_logs() -> CaptureRenderer:
    """Route log output to memory for the duration of a test."""
    configure_logging(format="none", level="DEBUG")
    renderer = CaptureRenderer()
    set_renderer(renderer)
    yield renderer
    configure_logging(format="none", level="INFO")
    set_renderer(None)


@pytest.fixture(autouse=True)
def _reset_state() -> None:
    state.reset()
    clear_settings_cache()


@pytest.fixture
def alpha() -> ServerGroup:
    return ServerGroup(
        name="alpha",
        description="Alpha group",
        tools=(ToolSpec(operation="doThing", module=f"{FIXTURES}.alpha"),),
    )


@pytest.fixture
def beta() -> ServerGroup:
    return ServerGroup(
        name="beta",
        tools=(ToolSpec(operation="getValue", module=f"{FIXTURES}.beta"),),
    )


@pytest.fixture
def faulty() -> ServerGroup:
    return ServerGroup(
        name="faulty",
        tools=(
            ToolSpec(operation="badOutput", module=f"{FIXTURES}.faulty"),
            ToolSpec(operation="explode", module=f"{FIXTURES}.faulty"),
            ToolSpec(operation="flaky", module=f"{FIXTURES}.faulty"),
            ToolSpec(operation="slow", module=f"{FIXTURES}.faulty", max_concurrent=2),
        ),
    )


@pytest.fixture
def registry(alpha: ServerGroup, beta: ServerGroup) -> ToolRegistry:
    return ToolRegistry.build([alpha, beta])
