"""Wire-name normalization.

Internal identifiers are (group, operation) pairs such as ``("qdrant-rag",
"listCollections")``; protocol clients see ``qdrant_rag__list_collections``.
Both registry construction and call routing go through `ToolRef.wire_name`.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_UPPER = re.compile(r"[A-Z]")

SEPARATOR = "__"


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case: ``getLatestVideos`` -> ``get_latest_videos``.

    Every uppercase letter becomes ``_`` plus its lowercase form, so a leading
    capital yields a leading underscore.
    """
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", name)


def normalize_group(name: str) -> str:
    """Rewrite kebab-case group names for the prefix: ``qdrant-rag`` -> ``qdrant_rag``."""
    return name.replace("-", "_")


def wire_name(group: str, operation: str) -> str:
    """Externally visible identifier for one operation."""
    return f"{normalize_group(group)}{SEPARATOR}{camel_to_snake(operation)}"


class ToolRef(NamedTuple):
    """Typed identifier of one catalog operation."""

    group: str
    operation: str

    @property
    def wire_name(self) -> str:
        return wire_name(self.group, self.operation)

    def __str__(self) -> str:
        return f"{self.group}/{self.operation}"
