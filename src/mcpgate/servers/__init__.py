"""Server catalog.

Central list of every collaborator group and the operations it exposes.
Registration reads this table once at startup; nothing else decides which
modules a call may load.

To add a new group:
1. Create a package under ``mcpgate/servers/<group>/``
2. Implement each operation as its own module exporting a `create_tool` contract
3. Declare the group and its operations here
"""

from __future__ import annotations

from mcpgate.foundation.registry import ServerGroup, ToolSpec

SERVERS: tuple[ServerGroup, ...] = (
    ServerGroup(
        name="example",
        description="Example tool server demonstrating the MCP architecture",
        version="1.0.0",
        tools=(
            ToolSpec(operation="greet", module="mcpgate.servers.example.greet"),
        ),
    ),
)


def get_all_servers() -> tuple[ServerGroup, ...]:
    """Metadata for all registered groups."""
    return SERVERS
