"""CLI entrypoint for mcp-bridge."""

import json
import logging
from typing import Any

import rich_click as click

from mcp_bridge import __version__
from mcp_bridge.controllers import (
    BridgeCliController,
    BridgeResult,
    ConnectCommand,
    ExecCommand,
    StatusCommand,
)
from mcp_bridge.registry import UnknownToolError

click.rich_click.USE_MARKDOWN = True
CONTROLLER = BridgeCliController()


@click.group()
@click.version_option(version=__version__, prog_name="mcp-bridge")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def mcp_bridge(verbose: bool) -> None:
    """Route commands to MCP execution backends over HTTP."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@mcp_bridge.command("status")
@click.argument("tool", required=False)
def status(tool: str | None) -> None:
    """Show connection status for one tool, or a snapshot of all of them.

    With a TOOL the connection is established first, like the application's
    status endpoint does.
    """

    _finish(CONTROLLER.status(StatusCommand(tool=tool)), "Unknown tool.")


@mcp_bridge.command("connect")
@click.argument("tool")
def connect(tool: str) -> None:
    """Connect to TOOL, probing its health endpoint when remote."""

    try:
        result = CONTROLLER.connect(ConnectCommand(tool=tool))
    except UnknownToolError as error:
        raise click.ClickException(str(error)) from error
    _finish(result, "Connect failed.")


@mcp_bridge.command("exec")
@click.argument("tool")
@click.argument("command")
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Command parameter as key=value. Values are parsed as JSON when possible. Repeatable.",
)
@click.option(
    "--params-json",
    default=None,
    help="JSON object merged into the request body before --param values.",
)
def exec_command(tool: str, command: str, params: tuple[str, ...], params_json: str | None) -> None:
    """Send COMMAND to TOOL's /execute endpoint and print the JSON result."""

    payload = _parse_params(params, params_json)
    try:
        result = CONTROLLER.execute(ExecCommand(tool=tool, command=command, params=payload))
    except UnknownToolError as error:
        raise click.ClickException(str(error)) from error
    _finish(result, "MCP execution failed.")


def _parse_params(params: tuple[str, ...], params_json: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if params_json:
        try:
            decoded = json.loads(params_json)
        except json.JSONDecodeError as error:
            raise click.BadParameter(str(error), param_hint="--params-json") from error
        if not isinstance(decoded, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--params-json")
        payload.update(decoded)
    for item in params:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--param")
        try:
            value: Any = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        payload[key.strip()] = value
    return payload


def _finish(result: BridgeResult, failure_message: str) -> None:
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException(failure_message)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    mcp_bridge()
