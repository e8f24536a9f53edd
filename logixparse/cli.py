"""Command-line interface for logixparse."""

import json
import logging
import sys
from typing import Optional

import click

from . import __version__
from .config import load_config
from .errors import LogixParseError
from .export import build_export_data, export_result_to_json
from .loader import parse_file

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, level: str = "WARNING") -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING))


@click.group()
@click.version_option(__version__, prog_name="logixparse")
def cli():
    """Parse Logix L5K/L5X exports into a unified project model."""


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', 'output_file', help='Output JSON file (default: stdout)')
@click.option('--include', help='Comma-separated components (tags,modules,routines,rungs,tag_references,udts,aois,tasks)')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False), help='YAML export configuration')
@click.option('--compact', is_flag=True, help='Write JSON without indentation')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def parse(input_file: str, output_file: Optional[str], include: Optional[str],
          config_file: Optional[str], compact: bool, verbose: bool):
    """Parse an export file and write the selected components as JSON."""
    config = load_config(config_file)
    _configure_logging(verbose, config.log_level)

    components = [c.strip() for c in include.split(',') if c.strip()] if include else config.include
    pretty_print = config.pretty_print and not compact

    try:
        result = parse_file(input_file)
        if output_file:
            export_result_to_json(result, output_file, include=components, pretty_print=pretty_print)
            summary = result.summary()
            click.echo(f"✅ Parsed {input_file} ({summary['source_format']}) to {output_file}")
        else:
            export_data = build_export_data(result, components)
            click.echo(json.dumps(export_data, indent=2 if pretty_print else None, default=str))
    except (LogixParseError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def summary(input_file: str, verbose: bool):
    """Print project metadata and per-collection counts."""
    _configure_logging(verbose)

    try:
        result = parse_file(input_file)
    except (LogixParseError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    metadata = result.metadata
    counts = result.summary()
    click.echo(f"📖 {input_file} ({counts['source_format']})")
    click.echo(f"  - Project: {metadata.project_name or '-'}")
    click.echo(f"  - Processor: {metadata.processor_type or '-'}")
    click.echo(f"  - Software revision: {metadata.software_revision or '-'}")
    if metadata.export_date:
        click.echo(f"  - Exported: {metadata.export_date}")

    click.echo("📊 Summary:")
    for key, value in counts.items():
        if key.endswith('_count'):
            label = key[:-len('_count')].replace('_', ' ')
            click.echo(f"  - {label}: {value}")


def main():
    """Main entry point for the logixparse command."""
    cli()


if __name__ == "__main__":
    main()
