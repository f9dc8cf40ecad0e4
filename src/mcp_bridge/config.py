"""Runtime configuration for MCP backend connections."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

from mcp_bridge.connection import (
    DEFAULT_EXECUTE_TIMEOUT_SECONDS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DEFAULT_PROTOCOL,
    ConnectionConfig,
)


@dataclass(frozen=True, slots=True)
class ServiceSpec:
    """Where one backend service reads its endpoint from."""

    name: str
    env_var: str
    default_port: int

    @property
    def default_endpoint(self) -> str:
        return f"http://localhost:{self.default_port}"


# Tool servers first, then the program runners used by simulations.
SERVICES: tuple[ServiceSpec, ...] = (
    ServiceSpec("simulation", "MCP_SIMULATION_ENDPOINT", 8001),
    ServiceSpec("script", "MCP_SCRIPT_ENDPOINT", 8002),
    ServiceSpec("video", "MCP_VIDEO_ENDPOINT", 8003),
    ServiceSpec("python", "PYTHON_MCP_ENDPOINT", 8001),
    ServiceSpec("matlab", "MATLAB_MCP_ENDPOINT", 8002),
    ServiceSpec("manim", "MANIM_MCP_ENDPOINT", 8004),
    ServiceSpec("octave", "OCTAVE_MCP_ENDPOINT", 8002),
)


@dataclass(slots=True)
class TimeoutSettings:
    """Per-request timeouts for backend calls."""

    probe_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    execute_seconds: float = DEFAULT_EXECUTE_TIMEOUT_SECONDS


@dataclass(slots=True)
class Settings:
    """Endpoints of every backend service plus request timeouts."""

    endpoints: dict[str, ConnectionConfig] = field(default_factory=dict)
    timeouts: TimeoutSettings = field(default_factory=TimeoutSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with local defaults for development."""

        return cls(
            endpoints={
                service.name: ConnectionConfig(
                    endpoint=_env_endpoint(service),
                    protocol=DEFAULT_PROTOCOL,
                )
                for service in SERVICES
            },
            timeouts=TimeoutSettings(
                probe_seconds=float(
                    os.getenv(
                        "MCP_BRIDGE_PROBE_TIMEOUT_SECONDS",
                        str(DEFAULT_PROBE_TIMEOUT_SECONDS),
                    ),
                ),
                execute_seconds=float(
                    os.getenv(
                        "MCP_BRIDGE_EXECUTE_TIMEOUT_SECONDS",
                        str(DEFAULT_EXECUTE_TIMEOUT_SECONDS),
                    ),
                ),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error if timeouts or endpoints are invalid."""

        if self.timeouts.probe_seconds <= 0:
            raise ValueError("MCP_BRIDGE_PROBE_TIMEOUT_SECONDS must be > 0.")
        if self.timeouts.execute_seconds <= 0:
            raise ValueError("MCP_BRIDGE_EXECUTE_TIMEOUT_SECONDS must be > 0.")
        for name, config in self.endpoints.items():
            if config.endpoint is not None:
                _validate_endpoint(name, config.endpoint)


def _env_endpoint(service: ServiceSpec) -> str | None:
    value = os.getenv(service.env_var)
    if value is None:
        return service.default_endpoint
    # An explicitly empty variable disables the service.
    return value.strip().rstrip("/") or None


def _validate_endpoint(name: str, value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            f"Invalid MCP endpoint for {name!r}: "
            f"{value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )
