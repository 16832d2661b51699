from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, Optional
import typer
from .config import load_config, AppConfig, SCPI_RAW_PORT
from .logging import setup_logging
from .errors import LxiError, NetworkFailure
from .devices.lxi import LxiDevice

app = typer.Typer(add_completion=False, help="LXI client - send SCPI lines to instruments over raw TCP")

@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides log_level from the config"),
):
    cfg: AppConfig = load_config(config)
    setup_logging(log_level or cfg.log_level)
    ctx.obj = cfg

# ---------- helpers ----------
def _device(ctx: typer.Context, device: Optional[str], host: Optional[str], port: int) -> LxiDevice:
    cfg: AppConfig = ctx.obj
    if device and host:
        raise typer.BadParameter("Use either --device or --host, not both.")
    if device:
        if device not in cfg.devices:
            known = ", ".join(sorted(cfg.devices)) or "none configured"
            raise typer.BadParameter(f"Unknown device {device!r} ({known})")
        return LxiDevice(cfg.devices[device].address)
    if not host:
        raise typer.BadParameter("Specify --device NAME or --host HOST.")
    return LxiDevice((host, port))

@contextmanager
def _connected(dev: LxiDevice) -> Iterator[LxiDevice]:
    """Connect, yield, disconnect; library errors become exit code 1."""
    try:
        dev.connect()
        try:
            yield dev
        finally:
            if dev.is_connected():
                dev.disconnect()
    except LxiError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

DeviceOpt = typer.Option(None, "--device", "-d", help="Device name from the config")
HostOpt = typer.Option(None, "--host", help="Instrument host/IP")
PortOpt = typer.Option(SCPI_RAW_PORT, "--port", help="SCPI TCP port")

# ---------- commands ----------
@app.command()
def idn(ctx: typer.Context, device: Optional[str] = DeviceOpt, host: Optional[str] = HostOpt, port: int = PortOpt):
    """Query *IDN? and print the reply."""
    with _connected(_device(ctx, device, host, port)) as dev:
        typer.echo(dev.request("*IDN?"))

@app.command()
def write(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Command line to send, without terminator"),
    device: Optional[str] = DeviceOpt, host: Optional[str] = HostOpt, port: int = PortOpt,
):
    """Send one line without waiting for a reply."""
    with _connected(_device(ctx, device, host, port)) as dev:
        dev.send(text)

@app.command()
def read(ctx: typer.Context, device: Optional[str] = DeviceOpt, host: Optional[str] = HostOpt, port: int = PortOpt):
    """Block until one line arrives and print it."""
    with _connected(_device(ctx, device, host, port)) as dev:
        typer.echo(dev.receive())

@app.command()
def query(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Query line, e.g. *IDN?"),
    device: Optional[str] = DeviceOpt, host: Optional[str] = HostOpt, port: int = PortOpt,
):
    """Send one line and print the single-line reply."""
    with _connected(_device(ctx, device, host, port)) as dev:
        typer.echo(dev.request(text))

@app.command()
def shell(ctx: typer.Context, device: Optional[str] = DeviceOpt, host: Optional[str] = HostOpt, port: int = PortOpt):
    """
    Interactive session. Lines ending in '?' are requests, anything else is sent
    as a command. ':reconnect' reopens the socket, ':quit' (or EOF) leaves.
    """
    with _connected(_device(ctx, device, host, port)) as dev:
        typer.echo(f"Connected to {dev.address.host}:{dev.address.port}. ':quit' to leave.")
        while True:
            try:
                line = typer.prompt(">", prompt_suffix=" ")
            except typer.Abort:
                break
            if line == ":quit":
                break
            try:
                if line == ":reconnect":
                    # a failed reconnect leaves the device disconnected
                    if dev.is_connected():
                        dev.reconnect()
                    else:
                        dev.connect()
                    typer.echo("Reconnected.")
                elif line.rstrip().endswith("?"):
                    typer.echo(dev.request(line))
                else:
                    dev.send(line)
            except NetworkFailure as e:
                typer.echo(f"Error: {e} (':reconnect' to continue)", err=True)
            except LxiError as e:
                typer.echo(f"Error: {e}", err=True)
                if not dev.is_connected():
                    break
        if not dev.is_connected():
            typer.echo("Connection lost.", err=True)
            raise typer.Exit(code=1)

@app.command()
def emulate(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Listen address (config: emulator.host)"),
    port: Optional[int] = typer.Option(None, "--port", help="Listen port, 0 for any (config: emulator.port)"),
    idn: Optional[str] = typer.Option(None, "--idn", help="Reply to *IDN? (config: emulator.idn)"),
):
    """Run the reference line server until Ctrl-C."""
    from .emulator import Emulator
    cfg: AppConfig = ctx.obj
    address = (host or cfg.emulator.host, cfg.emulator.port if port is None else port)
    with Emulator(address, idn or cfg.emulator.idn) as emu:
        bound_host, bound_port = emu.address
        typer.echo(f"Emulator listening on {bound_host}:{bound_port}")
        try:
            emu.serve(connections=None)
        except KeyboardInterrupt:
            typer.echo("Emulator stopped.")

if __name__ == "__main__":
    app()
