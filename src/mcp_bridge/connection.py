"""Named HTTP link to one MCP backend service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL = "mcp"
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0
DEFAULT_EXECUTE_TIMEOUT_SECONDS = 300.0
ENDPOINT_NOT_CONFIGURED_ERROR = (
    "MCP endpoint not configured. Set endpoint in environment variable."
)
_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "0.0.0.0"})
# Malformed endpoints surface as InvalidURL/ValueError, unserializable params as TypeError.
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError)


@dataclass(frozen=True, slots=True)
class ConnectionConfig:
    """Immutable options recognized by a connection."""

    endpoint: str | None = None
    protocol: str = DEFAULT_PROTOCOL

    def as_dict(self) -> dict[str, Any]:
        return {"endpoint": self.endpoint, "protocol": self.protocol}


def is_local_endpoint(endpoint: str) -> bool:
    """Return True for loopback endpoints that are never health-probed."""

    if "localhost" in endpoint:
        return True
    host = urlparse(endpoint).hostname or ""
    return host in _LOCAL_HOSTS


class McpConnection:
    """Connection proxy forwarding named commands to a backend's ``/execute``.

    Connecting is optimistic: the health probe is advisory and ``connect()``
    reports success whatever the probe outcome. No socket is held between
    calls, every request opens a short-lived client.
    """

    def __init__(
        self,
        tool_name: str,
        config: ConnectionConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        execute_timeout_seconds: float = DEFAULT_EXECUTE_TIMEOUT_SECONDS,
    ) -> None:
        self.tool_name = tool_name
        self.config = config or ConnectionConfig()
        self.connected = False
        self.connection: object | None = None
        self._transport = transport
        self._probe_timeout = httpx.Timeout(probe_timeout_seconds)
        self._execute_timeout = httpx.Timeout(execute_timeout_seconds)

    def __repr__(self) -> str:
        return (
            f"McpConnection(tool_name={self.tool_name!r}, "
            f"endpoint={self.config.endpoint!r}, connected={self.connected})"
        )

    @property
    def endpoint(self) -> str | None:
        return self.config.endpoint

    async def connect(self) -> dict[str, Any]:
        """Mark the connection usable, probing ``/health`` on remote endpoints."""

        message = f"MCP connected for {self.tool_name}"
        endpoint = self.endpoint
        if endpoint:
            try:
                if not is_local_endpoint(endpoint):
                    async with self._client(self._probe_timeout) as client:
                        response = await client.get(f"{endpoint}/health")
                    if not response.is_success:
                        logger.debug(
                            "Health probe for %s returned HTTP %s",
                            self.tool_name,
                            response.status_code,
                        )
            except _REQUEST_ERRORS as exc:
                logger.debug("Health probe for %s failed: %s", self.tool_name, exc)
                message = f"{message} (internal)"
        self.connected = True
        return {"success": True, "message": message}

    async def disconnect(self) -> dict[str, Any]:
        self.connected = False
        self.connection = None
        return {"success": True}

    async def execute_command(
        self,
        command: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """POST ``command`` and ``params`` to ``{endpoint}/execute``.

        Returns the backend JSON unmodified on a 2xx response. Every other
        outcome becomes a ``{"success": False, "error": ...}`` envelope.
        A ``command`` key inside ``params`` overrides the ``command`` argument.
        """

        if not self.connected:
            await self.connect()

        endpoint = self.endpoint
        if not endpoint:
            return {"success": False, "error": ENDPOINT_NOT_CONFIGURED_ERROR}

        payload: dict[str, Any] = {"command": command}
        payload.update(params or {})
        try:
            async with self._client(self._execute_timeout) as client:
                response = await client.post(
                    f"{endpoint}/execute",
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
            if not response.is_success:
                raise httpx.HTTPStatusError(
                    f"MCP server returned {response.status_code}: {response.reason_phrase}",
                    request=response.request,
                    response=response,
                )
            return response.json()
        except _REQUEST_ERRORS as exc:
            logger.warning("MCP execution failed for %s at %s: %s", self.tool_name, endpoint, exc)
            return {
                "success": False,
                "error": f"MCP execution failed: {exc}",
                "endpoint": endpoint,
            }

    def get_status(self) -> dict[str, Any]:
        return {
            "toolName": self.tool_name,
            "connected": self.connected,
            "config": self.config.as_dict(),
        }

    def _client(self, timeout: httpx.Timeout) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)
