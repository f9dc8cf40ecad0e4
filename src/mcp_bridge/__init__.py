"""HTTP connection-and-dispatch bridge to MCP execution backends."""

from mcp_bridge.connection import ConnectionConfig, McpConnection
from mcp_bridge.registry import ConnectionRegistry, UnknownToolError

__version__ = "0.1.0"

__all__ = [
    "ConnectionConfig",
    "ConnectionRegistry",
    "McpConnection",
    "UnknownToolError",
    "__version__",
]
