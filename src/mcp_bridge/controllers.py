"""Controllers for mcp-bridge CLI commands."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from mcp_bridge.config import Settings
from mcp_bridge.registry import ConnectionRegistry


@dataclass(slots=True)
class StatusCommand:
    """CLI input for connection status."""

    tool: str | None


@dataclass(slots=True)
class ConnectCommand:
    """CLI input for connecting one tool."""

    tool: str


@dataclass(slots=True)
class ExecCommand:
    """CLI input for forwarding one command to a backend."""

    tool: str
    command: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class BridgeResult:
    """Report to render in CLI."""

    lines: list[str]
    success: bool


def _registry_from_env() -> ConnectionRegistry:
    settings = Settings.from_env()
    settings.validate()
    return ConnectionRegistry.from_settings(settings)


class BridgeCliController:
    """Coordinates status, connect and exec CLI operations."""

    def __init__(
        self,
        registry_factory: Callable[[], ConnectionRegistry] = _registry_from_env,
    ) -> None:
        self._registry_factory = registry_factory

    def status(self, command: StatusCommand) -> BridgeResult:
        registry = self._registry_factory()
        if command.tool is not None:
            report = asyncio.run(registry.status_report(command.tool))
            return BridgeResult(lines=[_dump(report)], success="error" not in report)
        return BridgeResult(
            lines=[_dump(connection.get_status()) for connection in registry],
            success=True,
        )

    def connect(self, command: ConnectCommand) -> BridgeResult:
        connection = self._registry_factory().get(command.tool)
        result = asyncio.run(connection.connect())
        return BridgeResult(
            lines=[_dump(result), _dump(connection.get_status())],
            success=bool(result.get("success")),
        )

    def execute(self, command: ExecCommand) -> BridgeResult:
        connection = self._registry_factory().get(command.tool)
        result = asyncio.run(connection.execute_command(command.command, command.params))
        failed = isinstance(result, dict) and result.get("success") is False
        return BridgeResult(lines=[_dump(result)], success=not failed)


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)
