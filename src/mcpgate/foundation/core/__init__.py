"""Core abstractions: wire naming, schema translation and the tool contract."""

from .contract import Tool, ToolContract, create_tool
from .naming import SEPARATOR, ToolRef, camel_to_snake, normalize_group, wire_name
from .schema import JsonSchema, has_refs, to_wire_schema

__all__ = [
    "Tool", "ToolContract", "create_tool",
    "SEPARATOR", "ToolRef", "camel_to_snake", "normalize_group", "wire_name",
    "JsonSchema", "has_refs", "to_wire_schema",
]
