from __future__ import annotations

import asyncio

import allure
import pytest

from mcp_bridge.config import Settings, TimeoutSettings
from mcp_bridge.connection import ConnectionConfig, McpConnection
from mcp_bridge.registry import ConnectionRegistry, UnknownToolError

pytestmark = [
    allure.epic("MCP Bridge"),
    allure.feature("Connection Registry"),
]


def _registry(fake_backend) -> ConnectionRegistry:
    settings = Settings(
        endpoints={
            "simulation": ConnectionConfig("http://localhost:8001"),
            "python": ConnectionConfig("https://python.example.test"),
            "manim": ConnectionConfig(None),
        },
        timeouts=TimeoutSettings(probe_seconds=2.0, execute_seconds=30.0),
    )
    return ConnectionRegistry.from_settings(settings, transport=fake_backend.transport)


def test_from_settings_builds_one_connection_per_service(fake_backend) -> None:
    registry = _registry(fake_backend)

    assert registry.names() == ["simulation", "python", "manim"]
    assert len(registry) == 3
    assert "python" in registry
    assert all(isinstance(connection, McpConnection) for connection in registry)
    assert registry.get("python").config.endpoint == "https://python.example.test"


def test_get_returns_same_instance(fake_backend) -> None:
    registry = _registry(fake_backend)

    assert registry.get("python") is registry.get("python")


def test_registries_are_isolated(fake_backend) -> None:
    first = _registry(fake_backend)
    second = _registry(fake_backend)

    asyncio.run(first.get("simulation").connect())

    assert first.get("simulation").connected is True
    assert second.get("simulation").connected is False


def test_from_settings_applies_timeouts(fake_backend) -> None:
    registry = _registry(fake_backend)

    asyncio.run(registry.get("python").execute_command("run"))

    timeouts = [request.extensions["timeout"]["read"] for request in fake_backend.requests]
    assert timeouts == [2.0, 30.0]


def test_get_unknown_tool_raises() -> None:
    registry = ConnectionRegistry()

    with pytest.raises(UnknownToolError, match="Unknown tool: blender"):
        registry.get("blender")


def test_for_program_resolves_simulation_runners(fake_backend) -> None:
    registry = _registry(fake_backend)

    assert registry.for_program("python") is registry.get("python")
    with pytest.raises(UnknownToolError, match="No MCP connection configured for simulation"):
        registry.for_program("simulation")
    with pytest.raises(UnknownToolError, match="No MCP connection configured for matlab"):
        registry.for_program("matlab")


def test_status_report_connects_on_demand(fake_backend) -> None:
    registry = _registry(fake_backend)

    report = asyncio.run(registry.status_report("simulation"))

    assert report == {"connected": True, "tool": "simulation", "message": "MCP connected"}
    assert registry.get("simulation").connected is True
    assert fake_backend.requests == []


def test_status_report_unknown_tool() -> None:
    report = asyncio.run(ConnectionRegistry().status_report("blender"))

    assert report == {"connected": False, "tool": "blender", "error": "Unknown tool"}
