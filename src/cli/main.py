"""FloorLink CLI: EDI generation and transmission from the terminal.

Usage:
    floorlink edi generate 850 order.json     Build an 850 from a JSON payload
    floorlink edi ack 0001                    Acknowledge an inbound set
    floorlink odoo edi 810 42                 Build an 810 from an Odoo order
    floorlink send asn.x12 --method API ...   Transmit an interchange
    floorlink serve                           Run the HTTP API
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from src.cli.config import FloorLinkConfig, get_config
from src.cli.output import console, format_segments_table, format_transmission_result, mask_secret
from src.edi.builders import generate_edi_810, generate_edi_850, generate_edi_856, generate_edi_997
from src.edi.x12 import X12Envelope, edi810_to_x12, edi850_to_x12, edi856_to_x12
from src.errors import DomainError, FloorLinkError, format_error
from src.odoo.client import OdooClient
from src.odoo.edi_adapter import (
    generate_edi_810_from_odoo,
    generate_edi_850_from_odoo,
    generate_edi_856_from_odoo,
    update_odoo_with_tracking_and_generate_edi_856,
)
from src.transmission.dispatcher import TransmissionDispatcher
from src.transmission.models import Recipient, RecipientCredentials
from src.transmission.transports import ApiTransport

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="floorlink",
    help="EDI 850/810/856/997 for the flooring storefront",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
edi_app = typer.Typer(help="Generate EDI documents from JSON payloads")
odoo_app = typer.Typer(help="Generate EDI documents from Odoo records")

app.add_typer(config_app, name="config")
app.add_typer(edi_app, name="edi")
app.add_typer(odoo_app, name="odoo")

# --- Global state ---
_config_path: str | None = None

DOCUMENT_TYPES = ("850", "810", "856")


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to floorlink.yaml config file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """FloorLink CLI: EDI for the flooring storefront."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load() -> FloorLinkConfig:
    """Resolve config or exit with a readable message."""
    try:
        return get_config(_config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Config file not found:[/red] {e}")
        raise typer.Exit(1)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Config validation failed:[/red] {e}")
        raise typer.Exit(1)


def _fail(error: FloorLinkError) -> None:
    console.print(f"[red]{format_error(error)}[/red]")
    raise typer.Exit(1)


def _emit(x12: str, output: Optional[Path], show_segments: bool) -> None:
    """Write the interchange to a file or stdout."""
    if show_segments:
        console.print(format_segments_table(x12))
    if output:
        output.write_text(x12)
        console.print(f"[green]Wrote {output}[/green]")
    else:
        typer.echo(x12)


def _envelope(cfg: FloorLinkConfig, stream: bool) -> X12Envelope:
    overrides = {"segment_separator": ""} if stream else {}
    return cfg.edi.control_numbers().next_envelope(**overrides)


# --- Version ---


@app.command()
def version():
    """Show FloorLink version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as pkg_version
    try:
        v = pkg_version("floorlink")
    except PackageNotFoundError:
        v = "unknown"
    console.print(f"[bold]FloorLink[/bold] v{v}")
    console.print("  X12 version: 004010")


# --- Config commands ---


@config_app.command("show")
def config_show():
    """Display resolved configuration (secrets masked)."""
    cfg = _load()

    console.print("[bold]Server:[/bold]")
    console.print(f"  host: {cfg.server.host}")
    console.print(f"  port: {cfg.server.port}")
    console.print(f"  log_level: {cfg.server.log_level}")

    console.print("\n[bold]Odoo:[/bold]")
    console.print(f"  url: {cfg.odoo.url}")
    console.print(f"  db: {cfg.odoo.db}")
    console.print(f"  username: {cfg.odoo.username}")
    console.print(f"  password: {mask_secret(cfg.odoo.password)}")

    console.print("\n[bold]EDI:[/bold]")
    console.print(f"  sender: {cfg.edi.sender_id}")
    console.print(f"  receiver: {cfg.edi.receiver_id}")
    console.print(f"  usage: {cfg.edi.usage_indicator}")
    console.print(f"  framing: {'stream' if cfg.edi.stream else 'one segment per line'}")
    console.print(f"  control numbers: {cfg.edi.control_number_file or 'in memory'}")
    console.print(f"  strict totals: {cfg.edi.strict_totals}")
    console.print(f"  seller: {cfg.edi.seller.name}")

    recipient = cfg.transmission.default_recipient
    if recipient:
        console.print("\n[bold]Default recipient:[/bold]")
        console.print(f"  {recipient.method} {recipient.endpoint}")


# --- EDI commands ---


@edi_app.command("generate")
def edi_generate(
    transaction_set: str = typer.Argument(..., help="850, 810 or 856"),
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON payload"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write X12 to this file"),
    stream: bool = typer.Option(False, "--stream", help="No line breaks between segments"),
    show_segments: bool = typer.Option(False, "--segments", help="Print a segment table"),
):
    """Build one EDI document from a storefront JSON payload."""
    if transaction_set not in DOCUMENT_TYPES:
        _fail(
            FloorLinkError.from_code(
                "E-2003", transaction_set=transaction_set, supported=", ".join(DOCUMENT_TYPES)
            )
        )
    cfg = _load()
    try:
        payload = json.loads(input_file.read_text())
    except ValueError as e:
        console.print(f"[red]Invalid JSON in {input_file}:[/red] {e}")
        raise typer.Exit(1)

    stream = stream or cfg.edi.stream
    try:
        if transaction_set == "850":
            doc = generate_edi_850(payload, seller=cfg.edi.seller, strict=cfg.edi.strict_totals)
            x12 = edi850_to_x12(doc, _envelope(cfg, stream))
        elif transaction_set == "810":
            doc = generate_edi_810(payload, seller=cfg.edi.seller, strict=cfg.edi.strict_totals)
            x12 = edi810_to_x12(doc, _envelope(cfg, stream))
        else:
            doc = generate_edi_856(payload, seller=cfg.edi.seller)
            x12 = edi856_to_x12(doc, _envelope(cfg, stream))
    except FloorLinkError as e:
        _fail(e)
    _emit(x12, output, show_segments)


@edi_app.command("ack")
def edi_ack(
    transaction_set_id: str = typer.Argument(..., help="ST02 of the inbound set"),
    acknowledged: str = typer.Option("850", "--set", help="Inbound transaction set"),
    group: Optional[int] = typer.Option(None, "--group", min=1, help="GS06 of the inbound group"),
    rejected: bool = typer.Option(False, "--rejected", help="Acknowledge as rejected"),
    errors: Optional[list[str]] = typer.Option(None, "--error", help="Reason, repeatable"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write X12 to this file"),
):
    """Build a 997 Functional Acknowledgment."""
    if acknowledged not in DOCUMENT_TYPES:
        _fail(
            FloorLinkError.from_code(
                "E-2003", transaction_set=acknowledged, supported=", ".join(DOCUMENT_TYPES)
            )
        )
    cfg = _load()
    x12 = generate_edi_997(
        {
            "transaction_set_id": transaction_set_id,
            "acknowledged_transaction_set": acknowledged,
            "status": "rejected" if rejected else "accepted",
            "errors": errors or [],
            "group_control_number": group,
        },
        _envelope(cfg, cfg.edi.stream),
    )
    _emit(x12, output, show_segments=False)


# --- Odoo commands ---


def _run_odoo(cfg: FloorLinkConfig, action):
    """Run ``action(client)`` against a client that is closed afterwards."""

    async def _go():
        async with OdooClient(cfg.odoo) as client:
            return await action(client)

    try:
        return asyncio.run(_go())
    except FloorLinkError as e:
        _fail(e)
    except DomainError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@odoo_app.command("test-connection")
def odoo_test_connection():
    """Check that Odoo accepts the configured credentials."""
    cfg = _load()

    async def _check(client: OdooClient) -> bool:
        return await client.test_connection()

    if _run_odoo(cfg, _check):
        console.print(f"[green]Connected to {cfg.odoo.url} ({cfg.odoo.db})[/green]")
    else:
        console.print(f"[red]Could not log in to {cfg.odoo.url} ({cfg.odoo.db})[/red]")
        raise typer.Exit(1)


@odoo_app.command("edi")
def odoo_edi(
    transaction_set: str = typer.Argument(..., help="850 or 810"),
    order_id: int = typer.Argument(..., help="Odoo sale.order id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write X12 to this file"),
):
    """Build an 850 or 810 from an Odoo sale order."""
    if transaction_set not in ("850", "810"):
        _fail(FloorLinkError.from_code("E-2003", transaction_set=transaction_set, supported="850, 810"))
    cfg = _load()
    generate = generate_edi_850_from_odoo if transaction_set == "850" else generate_edi_810_from_odoo

    async def _build(client: OdooClient) -> str:
        return await generate(
            order_id,
            client,
            cfg.edi.control_numbers(),
            seller=cfg.edi.seller,
            strict=cfg.edi.strict_totals,
        )

    _emit(_run_odoo(cfg, _build), output, show_segments=False)


@odoo_app.command("edi-856")
def odoo_edi_856(
    picking_id: int = typer.Argument(..., help="Odoo stock.picking id"),
    tracking: str = typer.Option(..., "--tracking", help="Carrier tracking number"),
    carrier: str = typer.Option("UPS", "--carrier", help="UPS, FEDEX, USPS or DHL"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write X12 to this file"),
):
    """Build an 856 from an Odoo delivery."""
    cfg = _load()

    async def _build(client: OdooClient) -> str:
        return await generate_edi_856_from_odoo(
            picking_id, tracking, carrier, client, cfg.edi.control_numbers(), seller=cfg.edi.seller
        )

    _emit(_run_odoo(cfg, _build), output, show_segments=False)


@odoo_app.command("tracking")
def odoo_tracking(
    order_id: int = typer.Argument(..., help="Odoo sale.order id"),
    tracking: str = typer.Option(..., "--tracking", help="Carrier tracking number"),
    carrier: str = typer.Option("UPS", "--carrier", help="UPS, FEDEX, USPS or DHL"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write X12 to this file"),
):
    """Store tracking on an order's delivery, then build its 856."""
    cfg = _load()

    async def _build(client: OdooClient) -> str:
        return await update_odoo_with_tracking_and_generate_edi_856(
            order_id, tracking, carrier, client, cfg.edi.control_numbers(), seller=cfg.edi.seller
        )

    _emit(_run_odoo(cfg, _build), output, show_segments=False)


# --- Transmission ---


@app.command()
def send(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="X12 interchange"),
    method: Optional[str] = typer.Option(None, "--method", "-m", help="VAN, AS2, SFTP or API"),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Partner endpoint"),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", envvar="FLOORLINK_PARTNER_API_KEY", help="Bearer token for API"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Transmit an interchange to a trading partner.

    Without --method and --endpoint the configured default recipient is used.
    """
    cfg = _load()
    if method and endpoint:
        recipient = Recipient(
            method=method,
            endpoint=endpoint,
            credentials=RecipientCredentials(api_key=api_key) if api_key else None,
        )
    elif cfg.transmission.default_recipient:
        recipient = cfg.transmission.default_recipient
    else:
        console.print("[red]Give --method and --endpoint, or configure transmission.default_recipient[/red]")
        raise typer.Exit(1)

    dispatcher = TransmissionDispatcher()
    dispatcher.register(ApiTransport(timeout=cfg.transmission.api_timeout))
    try:
        result = asyncio.run(dispatcher.send(file.read_text(), recipient))
    except FloorLinkError as e:
        _fail(e)

    if as_json:
        typer.echo(format_transmission_result(result, as_json=True))
    else:
        console.print(format_transmission_result(result))
    if not result.success:
        raise typer.Exit(1)


# --- Server ---


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Run the FloorLink HTTP API with uvicorn."""
    import os

    import uvicorn

    cfg = _load()
    final_host = host or cfg.server.host
    final_port = port or cfg.server.port

    # The API process loads the same config as the CLI.
    if _config_path:
        os.environ["FLOORLINK_CONFIG_PATH"] = str(_config_path)
    os.environ["FLOORLINK_SERVER_LOG_LEVEL"] = cfg.server.log_level

    console.print(f"[bold]Starting FloorLink API on {final_host}:{final_port}[/bold]")
    uvicorn.run(
        "src.api.main:app",
        host=final_host,
        port=final_port,
        workers=1,
        log_level=cfg.server.log_level,
        lifespan="on",
    )


if __name__ == "__main__":
    app()
