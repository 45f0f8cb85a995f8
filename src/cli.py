#!/usr/bin/env python3
"""
Activity Import CLI

Command-line interface built with Click for converting broker CSV exports
into portfolio tracker import files.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/cli.py --help
    python src/cli.py detect export.csv
    python src/cli.py convert export.csv --format t212 --account-id 1234
"""

import asyncio
import logging
import sys
from collections import Counter

import click
from tabulate import tabulate

# Local application imports
import constants as const
import util
from brokers import registry
from converter import Converter
from exceptions import ConversionError
from format_detector import BrokerId, FormatDetector


# Initialize logging for CLI application
util.setup_logger(name=None, level=None, console=True, log_file=const.CONVERTER_LOG_FILE)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), help="Console log level")
@click.pass_context
def cli(ctx, log_level):
    """
    Activity Import Command Line Interface

    Convert broker exports into portfolio tracker import files.
    """
    ctx.ensure_object(dict)
    if log_level:
        util.set_log_level(log_level)


def print_summary(document, stats: dict[str, int]) -> None:
    counts = Counter(activity.type.value for activity in document.activities)
    rows = [[activity_type, count] for activity_type, count in sorted(counts.items())]
    rows.append(["TOTAL", len(document.activities)])
    click.echo(tabulate(rows, headers=["Type", "Activities"], stralign="right"))
    click.echo()
    click.echo(f"Rows read:          {stats.get('rows', 0)}")
    click.echo(f"Ignored:            {stats.get('ignored', 0)}")
    click.echo(f"Unsupported:        {stats.get('unsupported', 0)}")
    click.echo(f"Manual entry:       {stats.get('unresolved', 0)}")
    click.echo(f"Lookups:            {stats.get('remote_queries', 0)} "
               f"({stats.get('cache_hits', 0)} served from cache)")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "broker", help="Broker format or alias (auto-detects if not specified)")
@click.option("--account-id", help="Tracker account id (default: TRACKER_ACCOUNT_ID)")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory for the JSON output")
@click.option("--split/--no-split", default=None, help="Write chunks of 25 activities per file")
@click.pass_context
def convert(ctx, input_file, broker, account_id, output_dir, split):
    """Convert a broker CSV export into a tracker import file"""
    try:
        converter = Converter(account_id=account_id)

        if broker is None:
            click.echo("🔍 Auto-detecting broker format...")

        document = asyncio.run(converter.convert_file(input_file, broker))
        click.secho(f"✓ Converted {input_file} as {converter.broker.value}", fg="green")
        click.echo()

        paths = converter.write_output(document, converter.broker, output_dir=output_dir, split=split)

        click.echo("=" * 60)
        click.secho("CONVERSION RESULTS", bold=True)
        click.echo("=" * 60)
        print_summary(document, converter.stats)
        click.echo("=" * 60)
        for path in paths:
            click.echo(f"📄 {path}")

        if converter.stats.get("unresolved"):
            click.secho(f"\n⚠ {converter.stats['unresolved']} rows need manual entry, see {const.CONVERTER_LOG_FILE}",
                        fg="yellow")
        click.echo()

    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        click.secho(f"\n✗ Conversion failed [{e.code}]: {e}\n", fg="red", err=True)
        ctx.exit(1)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def detect(ctx, input_file):
    """Detect the broker format of a CSV export"""
    detector = FormatDetector()
    broker, confidence = detector.identify(input_file)

    if broker == BrokerId.UNKNOWN:
        logger.error(f"Unable to detect format for {input_file} (confidence: {confidence:.1%})")
        click.secho(f"✗ Unable to detect broker format (confidence: {confidence:.1%})", fg="red")
        click.echo("\nPlease specify the format using --format when converting")
        ctx.exit(1)

    click.secho(f"✓ Detected format: {broker.value} ({confidence:.1%} confidence)", fg="green")


@cli.command()
def formats():
    """List supported broker formats and their aliases"""
    aliases: dict[str, list[str]] = {}
    for alias, broker in registry.ALIASES.items():
        aliases.setdefault(broker.value, []).append(alias)

    rows = [[name, ", ".join(aliases.get(name, []))] for name in registry.formats_supported()]
    click.echo(tabulate(rows, headers=["Format", "Aliases"]))


@cli.command()
def version():
    """Show version information"""
    click.echo(f"Activity Import CLI v{const.VERSION}")
    click.echo(f"Export schema: {const.SCHEMA_VERSION}")


if __name__ == "__main__":
    try:
        cli()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        click.secho(f"\n✗ Fatal error: {e}\n", fg="red", err=True)
        sys.exit(1)
