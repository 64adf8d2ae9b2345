"""Catalog declarations, collaborator loading and the immutable tool registry."""

from .catalog import DEFAULT_EXPORT, ModuleLoader, ServerGroup, ToolMetadata, ToolSpec, resolve_contract
from .registry import RegistryEntry, ToolRegistry, describe

__all__ = [
    "DEFAULT_EXPORT", "ModuleLoader", "ServerGroup", "ToolMetadata", "ToolSpec", "resolve_contract",
    "RegistryEntry", "ToolRegistry", "describe",
]
