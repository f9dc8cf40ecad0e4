"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from mcp_bridge.config import SERVICES

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class FakeBackend:
    """Records requests and answers them with canned responses."""

    health: Handler | None = None
    execute: Handler | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/health"):
            handler = self.health or (lambda _: httpx.Response(200, json={"status": "ok"}))
        else:
            handler = self.execute or (lambda _: httpx.Response(200, json={"success": True}))
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]

    def execute_bodies(self) -> list[dict]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.url.path.endswith("/execute")
        ]


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def clean_mcp_env(monkeypatch):
    """Remove every MCP endpoint/timeout variable so defaults apply."""
    for service in SERVICES:
        monkeypatch.delenv(service.env_var, raising=False)
    monkeypatch.delenv("MCP_BRIDGE_PROBE_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("MCP_BRIDGE_EXECUTE_TIMEOUT_SECONDS", raising=False)
