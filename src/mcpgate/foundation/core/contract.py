"""Tool contract factory: validated, uniformly-failing operation wrappers.

Every collaborator module exports one `Tool` built with `create_tool`. The
dispatcher only relies on what a `Tool` exposes: a name, an input model, an
output model, and an async `call(raw)` entry point.

Example:
    >>> class EchoInput(BaseModel):
    ...     value: str = Field(..., description="Text to echo")
    ...
    >>> class EchoOutput(BaseModel):
    ...     result: str
    ...
    >>> async def _echo(params: EchoInput) -> EchoOutput:
    ...     return EchoOutput(result=params.value.upper())
    ...
    >>> echo = create_tool(name="demo__echo", input=EchoInput, output=EchoOutput, execute=_echo)
    >>> await echo.call({"value": "hello"})
    EchoOutput(result='HELLO')
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from mcpgate.foundation.errors import ErrorCode, OperationError, format_validation_error
from mcpgate.runtime.observability.logging import get_logger

TIn = TypeVar("TIn", bound=BaseModel)
TOut = TypeVar("TOut", bound=BaseModel)

Execute = Callable[[TIn], Awaitable[TOut | dict[str, object]] | TOut | dict[str, object]]

log = get_logger("mcpgate.contract")


@runtime_checkable
class ToolContract(Protocol):
    """Shape the dispatcher requires from a collaborator export."""

    name: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]

    async def call(self, raw_input: object) -> BaseModel: ...


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


@dataclass(frozen=True, slots=True)
class Tool(Generic[TIn, TOut]):
    """A unit of business logic wrapped with input/output validation.

    Stateless: concurrent `call`s share nothing but the immutable models.
    """

    name: str
    input_model: type[TIn]
    output_model: type[TOut]
    execute: Execute
    description: str | None = None

    async def call(self, raw_input: object) -> TOut:
        """Validate, execute, validate the result.

        Raises:
            OperationError: on invalid input, invalid output, or any execution failure
        """
        _log = log.bind_tool(self.name)
        start = time.perf_counter()

        try:
            params = self.input_model.model_validate(raw_input)
        except ValidationError as e:
            message = f"Validation failed: {format_validation_error(e)}"
            _log.error("tool validation failed", error=message, duration_ms=_elapsed_ms(start))
            raise OperationError.create(self.name, message, ErrorCode.INVALID_PARAMS, cause=e) from e

        _log.debug("tool execution started", input=params.model_dump(mode="json"))

        try:
            result = self.execute(params)
            if inspect.isawaitable(result):
                result = await result
        except OperationError as e:
            _log.error("tool execution failed", error=e.message, code=e.code, retryable=e.retryable,
                       duration_ms=_elapsed_ms(start))
            raise
        except (asyncio.CancelledError, KeyboardInterrupt):
            raise
        except BaseException as e:
            _log.error("tool execution failed with unexpected error", error=str(e),
                       error_type=type(e).__name__, duration_ms=_elapsed_ms(start))
            raise OperationError.from_exception(self.name, e) from e

        try:
            output = self.output_model.model_validate(result)
        except ValidationError as e:
            message = f"Output validation failed: {format_validation_error(e)}"
            _log.error("tool validation failed", error=message, duration_ms=_elapsed_ms(start))
            raise OperationError.create(self.name, message, ErrorCode.INVALID_OUTPUT, cause=e) from e

        _log.info("tool execution completed", duration_ms=_elapsed_ms(start))
        return output


def create_tool(
    *,
    name: str,
    input: type[TIn],  # noqa: A002 - mirrors the contract field name
    output: type[TOut],
    execute: Execute,
    description: str | None = None,
) -> Tool[TIn, TOut]:
    """Build a dispatchable tool contract.

    Args:
        name: Operation name used in errors and logs (usually the wire name)
        input: Pydantic model validating raw arguments
        output: Pydantic model validating the execute result
        execute: Business logic, receives the validated input model
        description: Catalog description shown by protocol clients
    """
    if not callable(execute):
        raise TypeError(f"Tool {name} does not have an execute function")
    return Tool(
        name=name,
        input_model=input,
        output_model=output,
        execute=execute,
        description=description,
    )
