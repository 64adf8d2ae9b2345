"""Tool registry: the immutable catalog snapshot served to protocol clients.

The registry provides:
- One construction path, `ToolRegistry.build`, run once at startup
- Per-entry fault isolation: a collaborator that fails to load is logged and skipped
- Fatal rejection of two operations normalizing to the same wire name
- Read-only lookup by wire name, iteration in catalog order
- Optional per-operation concurrency leases (``ToolSpec.max_concurrent``)

Metadata only: registration probes each collaborator for its description and
input schema, and keeps neither the module nor the execute function.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from mcpgate.foundation.core import JsonSchema, ToolRef
from mcpgate.foundation.errors import DuplicateToolError
from mcpgate.runtime.observability.logging import get_logger

from .catalog import ModuleLoader, ServerGroup, ToolSpec

log = get_logger("mcpgate.registry")


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """Immutable metadata record for one operation."""

    ref: ToolRef
    spec: ToolSpec
    wire_name: str
    description: str
    input_schema: JsonSchema

    @property
    def group(self) -> str:
        return self.ref.group

    @property
    def operation(self) -> str:
        return self.ref.operation


def describe(ref: ToolRef, contract_name: str | None, description: str | None) -> str:
    """Catalog description with fallbacks: own description, contract name, identifier."""
    if description:
        return description
    if contract_name:
        return f"{contract_name} tool"
    return f"{ref.group} {ref.operation} tool"


class ToolRegistry:
    """Read-only catalog of dispatchable operations keyed by wire name.

    Example:
        >>> registry = ToolRegistry.build(SERVERS)
        >>> [e.wire_name for e in registry]
        ['example__greet']
        >>> registry.get("example__greet").description
        'Greet a person by name in English, Polish or Spanish'
    """

    __slots__ = ("_entries", "_limiters")

    def __init__(self, entries: Iterable[RegistryEntry] = ()) -> None:
        table: dict[str, RegistryEntry] = {}
        for entry in entries:
            if (prior := table.get(entry.wire_name)) is not None:
                raise DuplicateToolError(entry.wire_name, str(prior.ref), str(entry.ref))
            table[entry.wire_name] = entry
        self._entries: Mapping[str, RegistryEntry] = MappingProxyType(table)
        self._limiters: Mapping[str, asyncio.Semaphore] = MappingProxyType({
            name: asyncio.Semaphore(e.spec.max_concurrent)
            for name, e in table.items() if e.spec.max_concurrent is not None
        })

    @classmethod
    def build(cls, groups: Iterable[ServerGroup], *, loader: ModuleLoader | None = None) -> ToolRegistry:
        """Probe every catalog operation and snapshot the results.

        Raises:
            DuplicateToolError: two operations share a wire name
        """
        groups = tuple(groups)
        loader = loader or ModuleLoader()
        log.info("initializing tool registry", server_count=len(groups))

        entries: list[RegistryEntry] = []
        seen: dict[str, ToolRef] = {}
        for group in groups:
            for ref, spec in group.refs():
                name = ref.wire_name
                # Checked before probing so a duplicate fails even if one side cannot load
                if (prior := seen.get(name)) is not None:
                    log.critical("duplicate wire name", tool=name, first=str(prior), second=str(ref))
                    raise DuplicateToolError(name, str(prior), str(ref))
                seen[name] = ref
                try:
                    meta = loader.load_metadata(spec)
                except Exception as e:
                    log.error("failed to load tool metadata", server=group.name, tool=spec.operation,
                              module=spec.module, error=str(e), error_type=type(e).__name__)
                    continue
                entries.append(RegistryEntry(
                    ref=ref,
                    spec=spec,
                    wire_name=name,
                    description=describe(ref, meta.contract_name, meta.description),
                    input_schema=meta.input_schema,
                ))
                log.debug("registered tool metadata", tool=name,
                          has_description=bool(meta.description),
                          properties=list(meta.input_schema.get("properties", {})))

        registry = cls(entries)
        log.info("tool registry initialized", tool_count=len(registry))
        return registry

    # ─────────────────────────────────────────────────────────────────
    # Read-only accessors
    # ─────────────────────────────────────────────────────────────────

    def get(self, name: str) -> RegistryEntry | None:
        """Get entry by wire name."""
        return self._entries.get(name)

    def __getitem__(self, name: str) -> RegistryEntry:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._entries.values())

    def names(self) -> list[str]:
        """Wire names in catalog order."""
        return list(self._entries)

    def entries(self) -> Mapping[str, RegistryEntry]:
        """Read-only view of the whole table."""
        return self._entries

    def limiter(self, name: str) -> asyncio.Semaphore | None:
        """In-flight lease for operations declared with ``max_concurrent``."""
        return self._limiters.get(name)
