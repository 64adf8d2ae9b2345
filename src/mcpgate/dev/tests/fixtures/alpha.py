from pydantic import BaseModel, Field

from mcpgate.foundation.core import create_tool


class DoThingInput(BaseModel):
    x: float = Field(..., description="Value to double")


class DoThingOutput(BaseModel):
    result: float


async def _do_thing(params: DoThingInput) -> DoThingOutput:
    return DoThingOutput(result=params.x * 2)


do_thing = create_tool(
    name="alpha__do_thing",
    description="Double a number",
    input=DoThingInput,
    output=DoThingOutput,
    execute=_do_thing,
)
