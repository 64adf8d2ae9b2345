"""Input-model to wire JSON Schema translation.

Pydantic emits nested models and enums as ``$ref`` pointers into ``$defs``.
Several protocol clients never resolve those pointers and render such tools
with an empty argument list, so every reference is inlined and the result is
one self-contained object with ``type``, ``properties`` and ``required``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from mcpgate.foundation.errors import SchemaError

JsonSchema = dict[str, Any]

_DEF_KEYS = ("$defs", "definitions")
_DEF_PREFIXES = ("#/$defs/", "#/definitions/")
_DROP_KEYS = frozenset({"$defs", "definitions", "$schema", "title"})
# Keywords whose value maps arbitrary names (not keywords) to subschemas
_NAME_MAPS = frozenset({"properties", "patternProperties", "dependentSchemas"})
# Keywords whose value is instance data, copied verbatim
_LITERAL_KEYS = frozenset({"default", "examples", "const", "enum"})


def to_wire_schema(model: type[BaseModel]) -> JsonSchema:
    """Translate an input model into a flattened wire schema.

    Raises:
        SchemaError: model is not a pydantic model, or is self-referencing
    """
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise SchemaError(f"Input validator must be a pydantic model, got {model!r}")
    try:
        raw = model.model_json_schema()
    except Exception as e:
        raise SchemaError(f"Cannot generate JSON schema for {model.__name__}: {e}") from e

    defs: JsonSchema = {}
    for key in _DEF_KEYS:
        defs.update(raw.get(key, {}))

    schema = _inline(raw, defs, frozenset())
    if schema.get("type") != "object":
        raise SchemaError(f"Input schema for {model.__name__} is not an object schema")
    schema.setdefault("properties", {})
    schema.setdefault("required", [])
    return schema


def has_refs(schema: object) -> bool:
    """True if any reference or definitions map survives in the document.

    Catches ``$ref`` keys and pointer strings such as discriminator mappings;
    literal keywords (``default``, ``enum`` ...) are instance data and skipped.
    """
    match schema:
        case dict():
            for key, value in schema.items():
                if key == "$ref" or key in _DEF_KEYS:
                    return True
                if key in _LITERAL_KEYS:
                    continue
                children = value.values() if key in _NAME_MAPS and isinstance(value, dict) else (value,)
                if any(has_refs(child) for child in children):
                    return True
            return False
        case list():
            return any(has_refs(v) for v in schema)
        case str():
            return schema.startswith(_DEF_PREFIXES)
        case _:
            return False


def _ref_key(ref: str) -> str:
    for prefix in _DEF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    raise SchemaError(f"Unsupported schema reference: {ref}")


def _inline(node: Any, defs: JsonSchema, resolving: frozenset[str]) -> Any:
    """Recursively copy a schema node, replacing references with their targets."""
    if isinstance(node, list):
        return [_inline(item, defs, resolving) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        key = _ref_key(node["$ref"])
        if key in resolving:
            raise SchemaError(f"Recursive model '{key}' cannot be flattened")
        if key not in defs:
            raise SchemaError(f"Unresolved schema reference: {node['$ref']}")
        target = _inline(defs[key], defs, resolving | {key})
        # Keywords next to $ref (description, default) override the target's
        return {**target, **_members(node, defs, resolving, skip="$ref")}
    return _members(node, defs, resolving)


def _members(node: JsonSchema, defs: JsonSchema, resolving: frozenset[str], skip: str | None = None) -> JsonSchema:
    out: JsonSchema = {}
    for key, value in node.items():
        if key == skip or key in _DROP_KEYS:
            continue
        if key in _LITERAL_KEYS:
            out[key] = value
        elif key in _NAME_MAPS and isinstance(value, dict):
            out[key] = {name: _inline(sub, defs, resolving) for name, sub in value.items()}
        elif key == "discriminator" and isinstance(value, dict):
            # Mapping values point into the dropped $defs; the tag property alone still selects the branch
            out[key] = {k: v for k, v in value.items() if k != "mapping"}
        else:
            out[key] = _inline(value, defs, resolving)
    return out
