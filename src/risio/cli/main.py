"""Command-line interface for risio.

Provides CLI commands for converting between RIS files and JSONL records.
"""

import contextlib
import importlib.metadata
import sys
from pathlib import Path

import click

from risio.audit import AuditLogger, get_environment_info
from risio.config import ConversionConfig
from risio.models import CANONICAL_ORDER, lookup
from risio.parse.ris import PARSER_VERSION

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("risio")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def _open_audit(log_file: str | None, parameters: dict) -> contextlib.AbstractContextManager:
    """Open an audit logger for ``log_file``, or a no-op context."""
    if log_file is None:
        return contextlib.nullcontext()
    logger = AuditLogger(Path(log_file))
    logger.run_started(command=sys.argv, parameters={**parameters, **get_environment_info()})
    return logger


def _stage(audit: AuditLogger | None, name: str) -> contextlib.AbstractContextManager:
    return audit.stage(name) if audit else contextlib.nullcontext({})


@click.group()
@click.version_option(version=__version__, prog_name="risio")
def cli() -> None:
    """Convert between RIS bibliographic files and structured records.

    Use 'risio COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on the first malformed line instead of skipping it",
)
@click.option(
    "--encoding",
    type=str,
    default=None,
    help="Input encoding (default: detected)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Append structured JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def parse(
    input_path: str,
    output: str,
    strict: bool,
    encoding: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Parse a RIS file into JSONL records.

    Each output line is one record keyed by field name.

    Examples
    --------
        risio parse references.ris -o records.jsonl
        risio parse export.ris -o records.jsonl --strict --log-file events.jsonl
    """
    from risio.api import iter_records, read_lines, write_jsonl

    try:
        config = ConversionConfig(strict=strict, encoding=encoding)
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    parameters = {**config.to_dict(), "parser_version": PARSER_VERSION}
    with _open_audit(log_file, parameters) as audit:
        try:
            if verbose:
                click.echo(f"Parsing file: {input_path}", err=True)

            diagnostics: list = []
            with _stage(audit, "parse") as counters:
                lines = read_lines(input_path, encoding=config.encoding)
                records = iter_records(lines, strict=config.strict, diagnostics=diagnostics)
                count = write_jsonl(records, output)
                counters.update(lines_in=len(lines), records_out=count, problems=len(diagnostics))

            if audit:
                audit.diagnostics(diagnostics)
                audit.artifact_written(Path(output), record_count=count)
                audit.run_finished("partial" if diagnostics else "success", count)

            if verbose:
                for diagnostic in diagnostics:
                    click.echo(f"  skipped: {diagnostic}", err=True)

            click.secho(f"✓ Successfully wrote {count} records to {output}", fg="green")
            if diagnostics:
                click.secho(f"  {len(diagnostics)} problem(s) skipped", fg="yellow", err=True)

        except Exception as e:
            if audit:
                audit.error(e)
                audit.run_finished("failed")
            click.secho(f"✗ Error: {e}", fg="red", err=True)
            sys.exit(1)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output RIS file path",
)
@click.option(
    "--order",
    type=str,
    default=None,
    help="Comma-separated tags emitted first, e.g. TI,AU,PY",
)
@click.option(
    "--crlf",
    is_flag=True,
    help="Write CRLF line endings",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Append structured JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def build(
    input_path: str,
    output: str,
    order: str | None,
    crlf: bool,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Build a RIS file from JSONL records.

    INPUT_PATH is a JSONL file as written by 'risio parse'.

    Examples
    --------
        risio build records.jsonl -o references.ris
        risio build records.jsonl -o references.ris --order TI,AU --crlf
    """
    from risio.api import export, read_jsonl

    try:
        config = ConversionConfig.from_order_string(order, line_ending="\r\n" if crlf else "\n")
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    with _open_audit(log_file, config.to_dict()) as audit:
        try:
            with _stage(audit, "build") as counters:
                records = read_jsonl(input_path)
                if verbose:
                    click.echo(f"Read {len(records)} records from {input_path}", err=True)
                    click.echo(f"Writing to: {output}", err=True)

                line_count = export(records, output, sort=config.sort, line_ending=config.line_ending)
                counters.update(records_in=len(records), lines_out=line_count)

            if audit:
                audit.artifact_written(Path(output), record_count=len(records))
                audit.run_finished("success", len(records))

            click.secho(f"✓ Successfully wrote {len(records)} records to {output}", fg="green")

        except Exception as e:
            if audit:
                audit.error(e)
                audit.run_finished("failed")
            click.secho(f"✗ Error: {e}", fg="red", err=True)
            sys.exit(1)


@cli.command()
def tags() -> None:
    """List the supported RIS tags in canonical order."""
    for tag in CANONICAL_ORDER:
        binding = lookup(tag)
        field = binding.field or "-"
        click.echo(f"{tag}  {field:<40} {binding.cardinality.value:<7} {binding.role.value}")


if __name__ == "__main__":
    cli()
