"""Contracts that misbehave in every way the dispatcher must absorb."""

import asyncio
import sys

from pydantic import BaseModel

from mcpgate.foundation.core import create_tool
from mcpgate.foundation.errors import ErrorCode, OperationError

from . import state


class Empty(BaseModel):
    pass


class Value(BaseModel):
    value: int


async def _bad_output(params: Empty) -> dict:
    return {"value": "not a number"}


async def _explode(params: Empty) -> Value:
    raise RuntimeError("boom")


async def _flaky(params: Empty) -> Value:
    raise OperationError.create("faulty__flaky", "upstream timed out", ErrorCode.TIMEOUT, retryable=True)


async def _quit(params: Empty) -> Value:
    sys.exit(3)


async def _slow(params: Empty) -> Value:
    state.in_flight += 1
    state.peak = max(state.peak, state.in_flight)
    try:
        await asyncio.sleep(0.01)
    finally:
        state.in_flight -= 1
    return Value(value=state.peak)


bad_output = create_tool(name="faulty__bad_output", input=Empty, output=Value, execute=_bad_output)
explode = create_tool(name="faulty__explode", input=Empty, output=Value, execute=_explode)
flaky = create_tool(name="faulty__flaky", input=Empty, output=Value, execute=_flaky)
quit = create_tool(name="faulty__quit", input=Empty, output=Value, execute=_quit)
slow = create_tool(name="faulty__slow", input=Empty, output=Value, execute=_slow)
