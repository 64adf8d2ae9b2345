"""Static catalog declarations and on-demand collaborator loading.

The catalog is a lookup table written down ahead of time: every operation
names the module that implements it. Nothing here builds import paths from
request data; a call can only reach modules the catalog declares.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from types import ModuleType
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from mcpgate.foundation.core import JsonSchema, Tool, ToolContract, ToolRef, camel_to_snake, to_wire_schema
from mcpgate.foundation.errors import RegistryError

_MODULE_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$"
DEFAULT_EXPORT = "tool"


class ToolSpec(BaseModel):
    """One catalog operation and the module that implements it.

    Attributes:
        operation: Internal identifier, usually camelCase (``getLatestVideos``)
        module: Dotted path of the implementing module
        attr: Exported contract name; defaults to the snake_case operation, then ``tool``
        max_concurrent: Optional cap on in-flight calls for this operation
    """

    model_config = ConfigDict(frozen=True)

    operation: Annotated[str, Field(min_length=1, pattern=r"^[A-Za-z][A-Za-z0-9]*$")]
    module: Annotated[str, Field(pattern=_MODULE_PATTERN)]
    attr: str | None = None
    max_concurrent: PositiveInt | None = None

    @property
    def export_names(self) -> tuple[str, ...]:
        return (self.attr,) if self.attr else (camel_to_snake(self.operation), DEFAULT_EXPORT)


class ServerGroup(BaseModel):
    """A collaborator group: related operations sharing a wire-name prefix."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(min_length=1, pattern=r"^[a-z][a-z0-9-]*$")]
    description: str = ""
    version: str = "1.0.0"
    tools: tuple[ToolSpec, ...] = ()

    def refs(self) -> Iterator[tuple[ToolRef, ToolSpec]]:
        for spec in self.tools:
            yield ToolRef(self.name, spec.operation), spec


class ToolMetadata(BaseModel):
    """What registration keeps from a collaborator: never its execute function."""

    model_config = ConfigDict(frozen=True)

    contract_name: str
    description: str | None = None
    input_schema: JsonSchema


class ModuleLoader:
    """Imports collaborator modules fresh and evicts them once the caller is done.

    Imports run synchronously on the calling thread so that eviction can never
    interleave with a half-finished import of the same module.
    """

    __slots__ = ("_evict",)

    def __init__(self, *, evict: bool = True) -> None:
        self._evict = evict

    def import_fresh(self, module: str) -> ModuleType:
        if self._evict:
            self._forget(module)
        return importlib.import_module(module)

    def release(self, module: str) -> None:
        if self._evict:
            self._forget(module)

    @staticmethod
    def _forget(module: str) -> None:
        sys.modules.pop(module, None)
        parent, _, child = module.rpartition(".")
        if parent and (pkg := sys.modules.get(parent)) is not None:
            if isinstance(getattr(pkg, child, None), ModuleType):
                delattr(pkg, child)

    @contextmanager
    def loaded(self, spec: ToolSpec) -> Iterator[ToolContract]:
        """Yield the spec's contract; the module is released on exit."""
        module = self.import_fresh(spec.module)
        try:
            yield resolve_contract(module, spec)
        finally:
            del module
            self.release(spec.module)

    def load_metadata(self, spec: ToolSpec) -> ToolMetadata:
        """Probe a collaborator for its catalog metadata only."""
        with self.loaded(spec) as tool:
            return ToolMetadata(
                contract_name=tool.name,
                description=getattr(tool, "description", None),
                input_schema=to_wire_schema(tool.input_model),
            )


def resolve_contract(module: ModuleType, spec: ToolSpec) -> ToolContract:
    """Find the exported contract in an imported collaborator module."""
    for name in spec.export_names:
        candidate = getattr(module, name, None)
        if candidate is None:
            continue
        if isinstance(candidate, (Tool, ToolContract)):
            return candidate
        raise RegistryError(f"Tool {spec.operation} in {module.__name__} does not have a call function")
    raise RegistryError(f"Tool {spec.operation} not found in {module.__name__}")
