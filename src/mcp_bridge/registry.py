"""Registry of the preconfigured backend connections."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx

from mcp_bridge.config import Settings
from mcp_bridge.connection import McpConnection

SIMULATION_PROGRAMS: tuple[str, ...] = ("python", "matlab", "octave", "manim")


class UnknownToolError(KeyError):
    """Raised when no connection is registered under a name."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConnectionRegistry:
    """Named connections built once at startup and shared by reference."""

    def __init__(self, connections: dict[str, McpConnection] | None = None) -> None:
        self._connections: dict[str, McpConnection] = dict(connections or {})

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ConnectionRegistry:
        return cls(
            {
                name: McpConnection(
                    name,
                    config,
                    transport=transport,
                    probe_timeout_seconds=settings.timeouts.probe_seconds,
                    execute_timeout_seconds=settings.timeouts.execute_seconds,
                )
                for name, config in settings.endpoints.items()
            },
        )

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._connections

    def __iter__(self) -> Iterator[McpConnection]:
        return iter(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)

    def names(self) -> list[str]:
        return list(self._connections)

    def get(self, tool_name: str) -> McpConnection:
        try:
            return self._connections[tool_name]
        except KeyError:
            raise UnknownToolError(f"Unknown tool: {tool_name}") from None

    def for_program(self, program_id: str) -> McpConnection:
        """Resolve the runner connection for a simulation program."""

        if program_id not in SIMULATION_PROGRAMS or program_id not in self._connections:
            raise UnknownToolError(f"No MCP connection configured for {program_id}")
        return self._connections[program_id]

    async def status_report(self, tool_name: str) -> dict[str, Any]:
        """Connect on demand and summarize one tool's connection state."""

        if tool_name not in self._connections:
            return {"connected": False, "tool": tool_name, "error": "Unknown tool"}
        connection = self._connections[tool_name]
        if not connection.connected:
            await connection.connect()
        status = connection.get_status()
        return {
            "connected": status["connected"],
            "tool": tool_name,
            "message": "MCP connected" if status["connected"] else "MCP disconnected",
        }
