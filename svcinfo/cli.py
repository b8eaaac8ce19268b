"""Command-line interface for encoding and inspecting service descriptors."""

from __future__ import annotations

import json
import logging
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from svcinfo import document, notation
from svcinfo.log import setup_logging
from svcinfo.proto.messages import ServicePortType
from svcinfo.proto.serialization import SerializationError
from svcinfo.service_info import ServiceInfo, pack_service_list, unpack_service_list

logger = logging.getLogger(__name__)


@click.group(context_settings={"auto_envvar_prefix": "SVCINFO"})
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Service descriptor encoder and inspector."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Input descriptor file",
)
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--format",
    "-f",
    "input_format",
    type=click.Choice(["notation", "json"]),
    default="notation",
    show_default=True,
    help="Input format",
)
def encode(input_file: str, output_file: str, input_format: str) -> None:
    """Pack descriptors into a binary service list."""
    with open(input_file, encoding="utf-8") as f:
        text = f.read()

    try:
        infos = _read_json(text) if input_format == "json" else _read_notation(text)
        payload = pack_service_list(infos)
    except (ValueError, SerializationError) as e:
        _fail(e)

    with open(output_file, "wb") as f:
        f.write(payload)
    logger.info("Wrote %d service(s), %d bytes to %s", len(infos), len(payload), output_file)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Packed service list",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def decode(input_file: str, output_json: bool) -> None:
    """Display descriptors from a binary service list."""
    with open(input_file, "rb") as f:
        data = f.read()
    logger.info("Read %d bytes from %s", len(data), input_file)

    try:
        infos = unpack_service_list(data)
    except SerializationError as e:
        _fail(e)

    if output_json:
        print(document.list_to_json(infos, indent=2))
    else:
        _output_table(infos)


def _fail(error: Exception) -> NoReturn:
    print(f"Error: {error}")
    sys.exit(1)


def _read_notation(text: str) -> list[ServiceInfo]:
    """One descriptor per line; blank lines and # comments are skipped."""
    infos = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            infos.append(notation.parse(line))
    return infos


def _read_json(text: str) -> list[ServiceInfo]:
    """Either a single descriptor document or a {"services": [...]} list."""
    loaded = json.loads(text)
    if not isinstance(loaded, dict):
        raise ValueError("expected a JSON object")
    if "services" in loaded:
        return document.list_from_json(text)
    return [document.from_json(text)]


def _format_port(port: int | None) -> str:
    return "" if port is None else str(port)


def _output_table(infos: list[ServiceInfo]) -> None:
    """Output descriptors using rich text formatting."""
    console = Console()

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Node Type", style="cyan")
    table.add_column("Hostname", style="white")
    for port_type in ServicePortType:
        table.add_column(port_type.name, style="yellow", justify="right")

    for info in infos:
        ports = [_format_port(info.find_port(port_type)) for port_type in ServicePortType]
        table.add_row(info.node_type.name, info.hostname, *ports)

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
