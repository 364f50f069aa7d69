"""Command-line interface for iplocation."""

import csv
import io
import json
import logging
import sys

import click
from tqdm import tqdm

from . import __version__
from .config import DEFAULT_DATABASE, DEFAULT_LANGUAGE
from .exceptions import DatabaseError, IPLocationError
from .reader import Reader

db_option = click.option(
    "--db",
    "database",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_DATABASE),
    envvar="IPLOCATION_DB",
    show_default=True,
    help="IP database file",
)
language_option = click.option(
    "--language",
    "-l",
    default=DEFAULT_LANGUAGE,
    envvar="IPLOCATION_LANGUAGE",
    show_default=True,
    help="Language of the returned fields",
)


def _open_reader(database):
    try:
        return Reader(database)
    except DatabaseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Offline IP-to-location lookup against an IP database file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _lookup_row(reader, ip, language):
    result = reader.find_map(ip, language)
    row = {"ip": ip}
    if result is None:
        row.update({name: None for name in reader.fields})
    else:
        row.update(result)
    return row


@cli.command(name="find")
@click.argument("ips", nargs=-1, required=True)
@language_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format",
)
@db_option
def find_cmd(ips, language, output_format, database):
    """Look up location fields for IP addresses."""
    with _open_reader(database) as reader:
        results = []
        failed = False
        for ip in ips:
            try:
                results.append(_lookup_row(reader, ip, language))
            except IPLocationError as e:
                click.echo(f"Error looking up {ip}: {e}", err=True)
                failed = True

        _output_results(results, output_format)

    if failed:
        sys.exit(1)


@cli.command()
@click.argument("input_file", type=click.File("r"))
@language_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "csv"]),
    default="csv",
    help="Output format",
)
@db_option
def batch(input_file, language, output_format, database):
    """Look up every address in a file, one per line."""
    ips = []
    for line in input_file:
        line = line.strip()
        if line and not line.startswith("#"):
            ips.append(line)

    with _open_reader(database) as reader:
        results = []
        for ip in tqdm(ips, desc="Looking up", unit="ip", file=sys.stderr):
            try:
                results.append(_lookup_row(reader, ip, language))
            except IPLocationError as e:
                click.echo(f"Skipping {ip}: {e}", err=True)

    _output_results(results, output_format)


@cli.command()
@db_option
def info(database):
    """Show metadata of an IP database file."""
    with _open_reader(database) as reader:
        families = [
            name
            for name, supported in (
                ("IPv4", reader.support_v4()),
                ("IPv6", reader.support_v6()),
            )
            if supported
        ]
        build_time = reader.build_time

        click.echo("IP Database")
        click.echo("=" * 50)
        click.echo(f"File: {reader.database}")
        click.echo(f"Size: {reader.file_size:,} bytes")
        click.echo(f"Build: {build_time.isoformat() if build_time else 'Unknown'}")
        click.echo(f"Nodes: {reader.node_count:,}")
        click.echo(f"Address families: {', '.join(families) or 'none'}")
        click.echo(f"Languages: {', '.join(sorted(reader.languages))}")
        click.echo(f"Fields: {', '.join(reader.fields)}")


def _output_results(results, output_format):
    """Output results in the specified format."""
    if output_format == "json":
        click.echo(json.dumps(results, indent=2, ensure_ascii=False))
    elif output_format == "csv":
        _output_csv(results)
    else:
        _output_table(results)


def _output_csv(results):
    """Output results in CSV format."""
    if results:
        headers = list(results[0].keys())
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(headers)
        for result in results:
            writer.writerow([_cell(result.get(h)) for h in headers])
        click.echo(buffer.getvalue(), nl=False)


def _cell(value):
    return "" if value is None else str(value)


def _output_table(results):
    """Output results in table format."""
    if not results:
        click.echo("No results found.")
        return

    headers = list(results[0].keys())
    col_widths = []
    for h in headers:
        max_val_len = max(len(_cell(result.get(h))) for result in results)
        col_widths.append(max(len(h), max_val_len))

    header_line = " | ".join(h.ljust(w) for h, w in zip(headers, col_widths))
    separator = "-+-".join("-" * w for w in col_widths)

    click.echo(header_line)
    click.echo(separator)

    for result in results:
        row_line = " | ".join(
            _cell(result.get(h)).ljust(w) for h, w in zip(headers, col_widths)
        )
        click.echo(row_line)


if __name__ == "__main__":
    cli()
