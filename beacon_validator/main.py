from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import List, NoReturn, Optional

import click
import typer
from rich.console import Console
from rich.table import Table
from typer.core import TyperCommand

from beacon_validator.core.config import settings
from beacon_validator.models.messages import ValidationErrorType, ValidationMessage
from beacon_validator.services.endpoints.validator import EndpointValidator
from beacon_validator.services.metadata.model import MetadataModel
from beacon_validator.services.observer import ConsoleValidationObserver
from beacon_validator.services.report import write_report
from beacon_validator.services.schemas.registry import SchemaRegistry
from beacon_validator.workers.fetcher import close_http_client

logger = logging.getLogger(__name__)

_EPILOG = (
    "examples:\n\n"
    "  beacon-validator -f https://beacons.bsc.es/beacon/v2.0.0/\n\n"
    "  beacon-validator -f https://beacons.bsc.es/beacon/v2.0.0/ -o report.json"
)

_FRAMEWORK_FLAGS = ("-f", "--framework")

app = typer.Typer(
    add_completion=False,
    # values trailing a location count as further locations
    context_settings={"help_option_names": ["-h", "--help"], "allow_extra_args": True},
)

_console = Console()


def _configure_logging() -> None:
    """Configure the ``beacon_validator`` logger namespace.

    Configuring the package namespace directly (instead of the root logger)
    keeps third-party libraries such as ``httpx`` at their own levels.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
    )
    app_log = logging.getLogger("beacon_validator")
    app_log.setLevel(level)
    if not app_log.handlers:
        app_log.addHandler(handler)
    app_log.propagate = False


def validate_beacon(framework: str) -> list[ValidationMessage]:
    """Validate the metadata and the endpoints of the Beacon at *framework*."""
    errors: list[ValidationMessage] = []
    observer = ConsoleValidationObserver(errors)
    registry = SchemaRegistry()
    try:
        model = MetadataModel.load(framework, observer, registry=registry)
        EndpointValidator(model, registry).validate(framework, observer)
    finally:
        close_http_client()
    return errors


def _print_summary(errors: list[ValidationMessage]) -> None:
    if not errors:
        _console.print("[green]no errors found[/green]")
        return

    counts = Counter(error.type for error in errors)
    table = Table(title="Beacon validation")
    table.add_column("Error type", style="cyan", no_wrap=True)
    table.add_column("Count", style="red", justify="right")
    for error_type in ValidationErrorType:
        if counts[error_type]:
            table.add_row(error_type.value, str(counts[error_type]))
    _console.print(table)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


class _ValidateCommand(TyperCommand):
    """Usage errors exit with status 1 like the other argument checks."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            if getattr(exc, "option_name", None) in _FRAMEWORK_FLAGS:
                _fail("no beacon location specified")
            _fail(exc.format_message())


@app.command(cls=_ValidateCommand, epilog=_EPILOG)
def validate(
    ctx: typer.Context,
    framework_short: Optional[List[str]] = typer.Option(
        None, "-f", metavar="URL", help="Location of the beacon."
    ),
    framework_long: Optional[List[str]] = typer.Option(
        None, "--framework", metavar="URL", help="Location of the beacon."
    ),
    output_short: Optional[Path] = typer.Option(
        None, "-o", metavar="FILE", help="Report output file."
    ),
    output_long: Optional[Path] = typer.Option(
        None, "--output", metavar="FILE", help="Report output file."
    ),
) -> None:
    """Validate a GA4GH Beacon v2 API against the Beacon framework schemas."""
    if not (framework_short or framework_long or output_short or output_long or ctx.args):
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if framework_short and framework_long:
        _fail("only one of the forms may be used - either '-f' or '--framework'")
    frameworks = list(framework_short or framework_long or [])
    if not frameworks:
        _fail("no beacon location specified")
    frameworks.extend(ctx.args)
    if len(frameworks) > 1:
        _fail("more than one locations specified")

    _configure_logging()
    errors = validate_beacon(frameworks[0])
    _print_summary(errors)

    output = output_short or output_long
    if output is not None:
        try:
            write_report(errors, output)
        except OSError as exc:
            logger.error("Unable to write report %s: %s", output, exc)
            _fail(f"unable to write report {output}: {exc}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
