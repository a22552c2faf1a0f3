"""Command-line entry point for exporting SonarQube generic coverage.

Examples
--------
Convert a Cobertura report and an lcov report into ``SonarQube.xml``::

    sonar-export coverage.xml lcov.info

Workflow inputs are read from ``INPUT_*`` environment variables::

    INPUT_OUTPUT=reports/sonar.xml INPUT_COLLATE=false sonar-export coverage.xml
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from .config import coerce_bool
from .errors import (
    InputError,
    InvalidArgumentError,
    OutputUnavailableError,
    ReportDataError,
)
from .inputs import InputFormat, load_coverage
from .plugin import SonarQubeExport

app = typer.Typer(add_completion=False)

INPUTS_ARG = typer.Argument(
    ...,
    help="Cobertura XML or lcov reports to merge; each counts as one run.",
)
OUTPUT_OPT = typer.Option(
    None,
    "--output",
    "-o",
    envvar="INPUT_OUTPUT",
    help="Report file to write (default: SonarQube.xml).",
)
FORMAT_OPT = typer.Option(
    None,
    "--format",
    envvar="INPUT_FORMAT",
    help="Input format; detected from each file suffix when omitted.",
)
ENCODING_OPT = typer.Option(
    None, "--encoding", envvar="INPUT_ENCODING", help="Report text encoding."
)
COLLATE_OPT = typer.Option(
    "true",
    "--collate",
    envvar="INPUT_COLLATE",
    help="Merge files whose paths resolve to the same file on disk.",
)
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


@app.command()
def main(
    inputs: list[Path] = INPUTS_ARG,
    output: str | None = OUTPUT_OPT,
    fmt: InputFormat | None = FORMAT_OPT,
    encoding: str | None = ENCODING_OPT,
    collate: str = COLLATE_OPT,
    verbose: bool = VERBOSE_OPT,  # noqa: FBT001
) -> None:
    """Merge coverage reports and write SonarQube generic coverage XML."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        collate_value = coerce_bool(collate, default=True, parameter="--collate")
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--collate") from exc

    plugin = SonarQubeExport(encoding=encoding, collate=collate_value)
    try:
        plugin.check_argument(output)
    except InvalidArgumentError as exc:
        raise typer.BadParameter(str(exc), param_hint="--output") from exc

    try:
        coverage = load_coverage(inputs, fmt)
        written = plugin.export(coverage, output)
    except (InputError, OutputUnavailableError, ReportDataError) as exc:
        typer.echo(f"::error title=SonarQube Export Failure::{exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"Wrote SonarQube coverage report to {written}")


if __name__ == "__main__":
    app()
