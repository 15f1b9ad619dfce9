"""Command-line interface for mmdbridge."""

import json
import sys
from pathlib import Path

import click

from . import __version__, config
from .errors import MMDBridgeError
from .fetcher import DatabaseFetcher
from .lookup import open_database

database_option = click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar=config.DATABASE_ENV,
    default=config.DEFAULT_DATABASE,
    show_default=True,
    help="Path to the .mmdb database",
)
mode_option = click.option(
    "--mode",
    type=click.Choice(sorted(config.MODES)),
    default="memory",
    show_default=True,
    help="How the database file is loaded",
)
data_dir_option = click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=config.DATA_DIR_ENV,
    help="Custom data directory",
)


@click.group()
@click.version_option(version=__version__)
def cli():
    """Query MaxMind DB files by IP address."""


@cli.command(name="lookup")
@click.argument("ips", nargs=-1, required=True)
@database_option
@mode_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="json",
    help="Output format",
)
@click.option("--prefix-len", is_flag=True, help="Include the matched prefix length")
def lookup_cmd(ips, database, mode, output_format, prefix_len):
    """Look up records for IP addresses."""
    try:
        with open_database(database, config.MODES[mode]) as reader:
            results = []
            for ip in ips:
                record, network_len = reader.get_with_prefix_len(ip)
                result = {"ip": ip, "record": record}
                if prefix_len:
                    result["prefix_len"] = network_len
                results.append(result)
    except (MMDBridgeError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _output_results(results, output_format)


def _output_results(results, output_format):
    """Output results in the specified format."""
    if output_format == "json":
        click.echo(json.dumps(results, indent=2, ensure_ascii=False))
    else:
        _output_table(results)


def _output_table(results):
    """Output results as one line per address with a compact JSON record."""
    headers = list(results[0].keys())
    rows = [
        [
            json.dumps(value, ensure_ascii=False) if key == "record" else str(value)
            for key, value in result.items()
        ]
        for result in results
    ]
    col_widths = [
        max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(headers)
    ]

    click.echo(" | ".join(h.ljust(w) for h, w in zip(headers, col_widths)))
    click.echo("-+-".join("-" * w for w in col_widths))
    for row in rows:
        click.echo(" | ".join(v.ljust(w) for v, w in zip(row, col_widths)))


@cli.command()
@database_option
@mode_option
def metadata(database, mode):
    """Show metadata of the database."""
    try:
        with open_database(database, config.MODES[mode]) as reader:
            meta = reader.metadata()
    except (MMDBridgeError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(meta, indent=2, ensure_ascii=False))


@cli.command()
@click.argument("url")
@click.option("--sha256", help="Expected SHA256 of the downloaded file")
@click.option("--force", is_flag=True, help="Replace an existing database")
@data_dir_option
def fetch(url, sha256, force, data_dir):
    """Download a database and install it in the data directory."""
    try:
        fetcher = DatabaseFetcher(data_dir)
        fetcher.fetch(url, sha256=sha256, force=force)
    except (MMDBridgeError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@data_dir_option
def status(data_dir):
    """Show status of the local database."""
    try:
        fetcher = DatabaseFetcher(data_dir)

        click.echo("mmdbridge status")
        click.echo("=" * 50)
        click.echo(f"Data directory: {fetcher.data_dir}")

        if fetcher.is_data_available():
            size = fetcher.database_path.stat().st_size
            click.echo(f"[OK] {fetcher.database_path.name}: {size:,} bytes")
        else:
            click.echo(f"[MISSING] {fetcher.database_path.name}: missing")

        meta = fetcher.get_metadata()
        if meta:
            click.echo(f"\nSource: {meta.get('url', 'Unknown')}")
            click.echo(f"Last update: {meta.get('download_timestamp', 'Unknown')}")
        else:
            click.echo("\nNo metadata found.")

        click.echo("\nRun 'mmdbridge fetch URL' to download a database")

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
