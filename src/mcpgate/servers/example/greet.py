"""Greeting operation: the smallest complete collaborator."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from mcpgate.foundation.core import create_tool

_GREETINGS = {
    "en": "Hello, {name}!",
    "pl": "Cześć, {name}!",
    "es": "¡Hola, {name}!",
}


class GreetInput(BaseModel):
    name: str = Field(..., description="Name of the person to greet")
    language: Literal["en", "pl", "es"] = Field(default="en", description="Language for the greeting")


class GreetOutput(BaseModel):
    greeting: str = Field(..., description="The formatted greeting message")
    timestamp: str = Field(..., description="ISO timestamp of when the greeting was generated")


async def _greet(params: GreetInput) -> GreetOutput:
    return GreetOutput(
        greeting=_GREETINGS[params.language].format(name=params.name),
        timestamp=datetime.now(UTC).isoformat(),
    )


greet = create_tool(
    name="example__greet",
    description="Greet a person by name in English, Polish or Spanish",
    input=GreetInput,
    output=GreetOutput,
    execute=_greet,
)
