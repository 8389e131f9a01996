"""CLI for mediscript: evaluate / compare commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.table import Table

from mediscript.core.config import AppSettings
from mediscript.core.startup_checks import validate_settings
from mediscript.exceptions import (
    ConfigurationError,
    MalformedResponse,
    PrescriptionValidationError,
    ProviderCallError,
)
from mediscript.factory import create_orchestrator
from mediscript.hooks import end_session, setup_logging, start_session
from mediscript.models import (
    FINDING_CATEGORIES,
    Analysis,
    ComparisonResult,
    EvaluationReport,
    Patient,
    Prescription,
)
from mediscript.normalizer import AnalysisNormalizer
from mediscript.providers.client import LLMClient
from mediscript.reconciler import Reconciler, fallback_comparison

app = typer.Typer(name="mediscript", help="Dual-reviewer prescription safety evaluation")
console = Console()

_M = TypeVar("_M", bound=BaseModel)

_STATUS_STYLE = {"approved": "green", "warning": "yellow", "rejected": "red"}


def _load_model(path: Path, model: type[_M]) -> _M:
    """Load and validate a JSON file into ``model``."""
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PrescriptionValidationError(f"Cannot read {path}: {exc}") from exc
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise PrescriptionValidationError(f"{path}: {exc}") from exc


def _load_analysis(path: Path) -> Analysis:
    try:
        return AnalysisNormalizer().normalize(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PrescriptionValidationError(f"Cannot read {path}: {exc}") from exc


def _print_analyses(names: list[str], analyses: list[Analysis]) -> None:
    table = Table(title="Reviewer verdicts")
    table.add_column("Reviewer")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    for category in FINDING_CATEGORIES:
        table.add_column(category.capitalize())
    table.add_column("Critical alerts")

    for name, analysis in zip(names, analyses):
        style = _STATUS_STYLE[analysis.status.value]
        flags = ["ok" if analysis.findings.flag(c) else "[red]issue[/red]" for c in FINDING_CATEGORIES]
        table.add_row(
            name,
            f"[{style}]{analysis.status.value}[/{style}]",
            str(analysis.overall_score),
            *flags,
            "\n".join(analysis.critical_alerts) or "-",
        )
    console.print(table)


def _print_comparison(comparison: ComparisonResult, degraded: bool = False) -> None:
    if comparison.needs_human_review:
        console.print("[bold red]HUMAN REVIEW REQUIRED[/bold red]")
    else:
        console.print("[bold green]No mandatory human review[/bold green]")
    console.print(
        f"Agreement: [bold]{comparison.agreement.value}[/bold]  "
        f"Score difference: {comparison.score_difference}"
    )
    if degraded:
        console.print("[yellow]Automatic comparison unavailable; rule-based result shown.[/yellow]")

    table = Table(title="Discrepancies")
    table.add_column("Category")
    table.add_column("Conflict")
    table.add_column("Differences")
    records = comparison.discrepancies
    for category in ("status", *FINDING_CATEGORIES):
        record = getattr(records, category)
        table.add_row(
            category,
            "[red]yes[/red]" if record.conflict else "no",
            "\n".join(record.differences) or "-",
        )
    console.print(table)
    console.print(f"\n[bold]Summary:[/bold] {comparison.comparison_summary}")
    console.print(f"[bold]Recommendation:[/bold] {comparison.final_recommendation}")


async def _reconcile(
    reconciler: Reconciler,
    first: Analysis,
    second: Analysis,
    prescription: Prescription,
) -> tuple[ComparisonResult, bool]:
    """Compare inside a session so a fallback is reported as degraded."""
    session = start_session()
    try:
        comparison = await reconciler.compare(first, second, prescription)
    finally:
        end_session()
    return comparison, session.degraded


def _configure_logging(settings: AppSettings, verbose: bool) -> None:
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)


@app.command()
def evaluate(
    prescription_file: Path = typer.Argument(..., help="JSON file with the prescription"),
    patient_file: Path = typer.Argument(..., help="JSON file with the patient record"),
    output: Optional[Path] = typer.Option(None, help="Write the full report JSON here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Review a prescription with both agents and reconcile the verdicts."""
    settings = AppSettings()
    _configure_logging(settings, verbose)

    try:
        validate_settings(settings)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    try:
        prescription = _load_model(prescription_file, Prescription)
        patient = _load_model(patient_file, Patient)
    except PrescriptionValidationError as exc:
        console.print(f"[red]Invalid input:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    orchestrator = create_orchestrator(settings)
    console.print(f"[bold]Evaluating prescription for {patient.name}...[/bold]")

    try:
        report: EvaluationReport = asyncio.run(orchestrator.evaluate(prescription, patient))
    except (ProviderCallError, MalformedResponse) as exc:
        console.print(f"[red]Evaluation failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _print_analyses(report.reviewers, [report.primary, report.secondary])
    _print_comparison(report.comparison, degraded=report.degraded)

    if output:
        output.write_text(report.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        console.print(f"[green]Report saved to {output}[/green]")

    if report.comparison.needs_human_review:
        raise typer.Exit(code=3)


@app.command()
def compare(
    first_file: Path = typer.Argument(..., help="First reviewer's analysis JSON"),
    second_file: Path = typer.Argument(..., help="Second reviewer's analysis JSON"),
    prescription_file: Path = typer.Argument(..., help="JSON file with the prescription"),
    offline: bool = typer.Option(False, "--offline", help="Skip the comparison agent"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Reconcile two stored analyses without re-running the reviewers."""
    settings = AppSettings()
    _configure_logging(settings, verbose)

    try:
        first = _load_analysis(first_file)
        second = _load_analysis(second_file)
        prescription = _load_model(prescription_file, Prescription)
    except (MalformedResponse, PrescriptionValidationError) as exc:
        console.print(f"[red]Invalid input:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    degraded = offline or not settings.reconciler.enabled
    if degraded:
        comparison = fallback_comparison(first, second)
    else:
        reconciler = Reconciler(
            LLMClient(settings.resolved_reconciler()),
            language=settings.language,
            labels=("first", "second"),
        )
        comparison, degraded = asyncio.run(_reconcile(reconciler, first, second, prescription))

    _print_analyses(["first", "second"], [first, second])
    _print_comparison(comparison, degraded=degraded)
    if comparison.needs_human_review:
        raise typer.Exit(code=3)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
