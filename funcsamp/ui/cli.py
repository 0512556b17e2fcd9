"""Typer-based command line interface for convergence studies."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import DEFAULT_HEADER_LINES, DEFAULT_SAMPLE_COUNT, DEFAULT_SEQUENCE_COUNT, LOG_LEVEL
from ..core.integrands import DEFAULT_CATALOG
from ..core.reference_validation import DEFAULT_TOLERANCE, validate_catalog
from ..core.validator import FuncSampError
from ..engine import ComparisonPlan, ConvergenceStudy, EstimationConfig, run_comparison
from ..models.results import ConvergenceResult
from ..reporting import ErrorReporter, ReportGenerator, SeriesRecorder
from ..reporting.report_generator import comparison_frame

app = typer.Typer(help="Measure Monte Carlo integration error of 2D sample sequences")
console = Console(stderr=True)

_HANDLER_NAME = "funcsamp-rich"


def _configure_logging(level: str) -> None:
    """Attach a single rich handler on stderr to the package logger."""
    if not isinstance(logging.getLevelName(level.upper()), int):
        raise typer.BadParameter(f"unknown logging level {level!r}", param_hint="'--log-level'")
    logger = logging.getLogger("funcsamp")
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.name = _HANDLER_NAME
        logger.addHandler(handler)
    logger.setLevel(level.upper())


def _fail(exc: Exception) -> NoReturn:
    console.print(str(exc), style="red", markup=False, highlight=False)
    raise typer.Exit(code=1)


@app.callback()
def main_callback(
    log_level: str = typer.Option(LOG_LEVEL, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    """Monte Carlo convergence of 2D sample sequences."""
    _configure_logging(log_level)


def _print_summary(result: ConvergenceResult) -> None:
    final = result.final_point()
    table = Table(title=f"{result.integrand} convergence", show_lines=False)
    for column in ("Integrand", "Reference", "Sequences", "Samples", "Final Mean Error", "Final Max Error"):
        table.add_column(column, justify="right")
    table.add_row(
        result.integrand,
        f"{result.reference:.8f}",
        str(result.sequence_count),
        str(result.sample_count),
        f"{final.mean_error:.6f}" if final else "N/A",
        f"{final.max_error:.6f}" if final else "N/A",
    )
    console.print(table)


@app.command()
def run(
    integrand: str = typer.Argument(..., help="Name of the test function (see 'list')"),
    sample_source: Path = typer.Argument(..., help="File holding the tables of sample points"),
    sample_count: int = typer.Argument(DEFAULT_SAMPLE_COUNT, min=1, help="Samples per sequence"),
    sequence_count: int = typer.Argument(DEFAULT_SEQUENCE_COUNT, min=1, help="Number of sequences (trials)"),
    include_max: bool = typer.Option(False, "--max", help="Append the maximum error as a third column."),
    header_lines: int = typer.Option(
        DEFAULT_HEADER_LINES, min=0, help="Descriptive lines preceding the first sequence marker."
    ),
    strict: bool = typer.Option(False, help="Reject truncated sample files while loading."),
    csv: Optional[Path] = typer.Option(None, help="Also export the series as CSV (with JSON metadata)."),
    summary: bool = typer.Option(False, help="Print a summary table on stderr when done."),
) -> None:
    """Print the mean error for sample counts 4, 8, 12, ... sample_count."""
    try:
        config = EstimationConfig(
            integrand=integrand,
            sample_count=sample_count,
            sequence_count=sequence_count,
            header_lines=header_lines,
            strict=strict,
        )
        study = ConvergenceStudy(config)
        table = study.load(sample_source)
        points = study.iter_errors(table)
    except FuncSampError as exc:
        _fail(exc)

    recorder = SeriesRecorder(points)
    reporter = ErrorReporter(sys.stdout, include_max=include_max)
    reporter.emit_all(recorder)

    result = study.to_result(recorder.recorded, str(sample_source))
    if csv is not None:
        generator = ReportGenerator(csv.parent)
        path = generator.export_series(result, filename=csv.name)
        console.print(f"Error series exported to: {path}")
    if summary:
        _print_summary(result)


@app.command("list")
def list_integrands() -> None:
    """List the known integrands and their reference values."""
    table = Table(title="Integrands", show_lines=False)
    for column in ("Name", "Dim", "Category", "Reference", "Description"):
        table.add_column(column, justify="left" if column in ("Name", "Description") else "right", no_wrap=column == "Name")
    for integrand in DEFAULT_CATALOG:
        dim = "2D" if integrand.projection is None else f"1D ({integrand.projection.value})"
        table.add_row(
            integrand.name,
            dim,
            integrand.category.value,
            f"{integrand.reference:.8f}",
            integrand.description,
        )
    Console().print(table)


@app.command()
def compare(
    plan_path: Path = typer.Argument(..., help="YAML file listing the integrand and labelled sample sources"),
    output_dir: Path = typer.Option(Path("output"), help="Directory for the comparison table"),
    name: str = typer.Option("comparison", help="Base filename of the exported table"),
) -> None:
    """Run one integrand against several sample sources and tabulate mean errors."""
    try:
        plan = ComparisonPlan.from_yaml(plan_path)
        results = run_comparison(plan)
    except (FuncSampError, ValueError) as exc:
        _fail(exc)

    generator = ReportGenerator(output_dir)
    path = generator.export_comparison(results, filename=name)

    frame = comparison_frame(results)
    table = Table(title=f"Mean error: {plan.config.integrand}", show_lines=False)
    table.add_column("Samples", justify="right")
    for label in results:
        table.add_column(label, justify="right")
    last = frame.tail(1)
    for _, row in last.iterrows():
        table.add_row(str(int(row["sample_count"])), *[f"{row[label]:.6f}" for label in results])
    console.print(table)
    console.print(f"Comparison exported to: {path}")


@app.command()
def verify(
    names: Optional[List[str]] = typer.Argument(None, help="Integrands to check (default: all)"),
    tolerance: float = typer.Option(DEFAULT_TOLERANCE, help="Maximum accepted |numeric - reference|"),
) -> None:
    """Cross-check reference values by numerical quadrature."""
    try:
        outcomes = validate_catalog(names or None, tolerance=tolerance)
    except FuncSampError as exc:
        _fail(exc)

    table = Table(title="Reference validation", show_lines=False)
    for column in ("Name", "Reference", "Quadrature", "Difference", "Status", "Notes"):
        table.add_column(column, justify="left" if column in ("Name", "Notes") else "right", no_wrap=column == "Name")
    for outcome in outcomes:
        colour = "green" if outcome.status == "PASS" else "yellow"
        table.add_row(
            outcome.name,
            f"{outcome.reference:.8f}",
            f"{outcome.numeric:.8f}",
            f"{outcome.difference:.2e}",
            f"[{colour}]{outcome.status}[/{colour}]",
            ", ".join(outcome.warnings),
        )
    Console().print(table)


def main() -> None:
    """Entry point for CLI execution."""
    app()


if __name__ == "__main__":
    main()
