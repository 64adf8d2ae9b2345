from enum import Enum

from pydantic import BaseModel, Field

from mcpgate.foundation.core import create_tool


class Color(str, Enum):
    RED = "red"
    BLUE = "blue"


class Window(BaseModel):
    start: str = Field(..., description="ISO start date")
    end: str | None = None


class SearchInput(BaseModel):
    title: str = Field(..., description="A property literally named title")
    window: Window = Field(..., description="Date window")
    color: Color = Color.RED
    tags: list[Window] = Field(default_factory=list)


class SearchOutput(BaseModel):
    hits: int


search = create_tool(
    name="nested__search",
    description="Search with nested input",
    input=SearchInput,
    output=SearchOutput,
    execute=lambda params: SearchOutput(hits=len(params.tags)),
)
