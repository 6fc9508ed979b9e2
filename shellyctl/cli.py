"""Typer CLI entrypoint."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from typing import Any

import typer

from shellyctl.api import Client
from shellyctl.core.config import apply_overrides, load_config, resolve_device
from shellyctl.core.errors import ShellyctlError

app = typer.Typer(help="Control Shelly Gen2 relays over HTTP RPC")
switch_app = typer.Typer(help="Relay commands. Without a subcommand, prints the relay configuration.")
app.add_typer(switch_app, name="switch")


@dataclasses.dataclass(frozen=True)
class _Options:
    ip: str | None
    relay: int
    transport: str | None
    timeout: float | None


def _build_client(options: _Options) -> Client:
    entry = apply_overrides(
        resolve_device(load_config(), options.ip),
        transport=options.transport,
        timeout_s=options.timeout,
    )
    return Client(entry.address, transport=entry.transport, timeout_s=entry.timeout_s)


def _run(ctx: typer.Context, action: Callable[[Client, int], Any]) -> None:
    options: _Options = ctx.obj
    try:
        record = action(_build_client(options), options.relay)
    except ShellyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(json.dumps(dataclasses.asdict(record), indent=2))


@app.callback()
def main(
    ctx: typer.Context,
    ip: str | None = typer.Option(None, "--ip", "-i", help="Device address or configured device name"),
    relay: int = typer.Option(0, "--relay", "-r", min=0, help="Relay index"),
    transport: str | None = typer.Option(None, "--transport", "-t", help="rpc (JSON-RPC) or http (GET query)"),
    timeout: float | None = typer.Option(None, "--timeout", min=0.1, help="Per-call timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP exchanges"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = _Options(ip=ip, relay=relay, transport=transport, timeout=timeout)


@switch_app.callback(invoke_without_command=True)
def switch(ctx: typer.Context) -> None:
    """Print the configuration of the selected relay."""
    if ctx.invoked_subcommand is None:
        _run(ctx, lambda client, relay: client.switch_get_config(relay))


@switch_app.command("on")
def switch_on(
    ctx: typer.Context,
    off_delay: int | None = typer.Option(
        None, "--off-delay", "-o", min=0, help="Switch off again after this many seconds"
    ),
) -> None:
    """Power on the relay."""
    if off_delay is None:
        _run(ctx, lambda client, relay: client.switch_on(relay))
    else:
        _run(ctx, lambda client, relay: client.switch_on_with_timer(relay, off_delay))


@switch_app.command("off")
def switch_off(ctx: typer.Context) -> None:
    """Power off the relay."""
    _run(ctx, lambda client, relay: client.switch_off(relay))


@switch_app.command("toggle")
def switch_toggle(ctx: typer.Context) -> None:
    """Toggle the relay."""
    _run(ctx, lambda client, relay: client.switch_toggle(relay))


@switch_app.command("status")
def switch_status(ctx: typer.Context) -> None:
    """Print power, energy and temperature readings of the relay."""
    _run(ctx, lambda client, relay: client.switch_get_status(relay))


@switch_app.command("reset")
def switch_reset(ctx: typer.Context) -> None:
    """Reset the relay's energy counters."""
    _run(ctx, lambda client, relay: client.switch_reset_counters(relay))


@app.command("info")
def device_info(ctx: typer.Context) -> None:
    """Print device identification and firmware details."""
    _run(ctx, lambda client, _relay: client.get_device_info())


def run() -> None:
    app()


if __name__ == "__main__":
    run()
