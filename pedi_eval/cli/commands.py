"""CLI commands for PediEval."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pedi_eval.config import get_settings

app = typer.Typer(
    name="pedi-eval",
    help="Pediatric physiotherapy assessment scoring and classification",
    add_completion=False,
)
console = Console()

_SEVERITY_STYLES = {"info": "cyan", "warning": "yellow", "critical": "red"}


def _fmt(value: Optional[float], suffix: str = "") -> str:
    if value is None:
        return "—"
    return f"{value:.1f}{suffix}" if isinstance(value, float) else f"{value}{suffix}"


def _load_snapshot(path: Path):
    from pedi_eval.models.snapshot import EvaluationSnapshot

    if not path.exists():
        console.print(f"[red]Snapshot file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return EvaluationSnapshot.model_validate_json(path.read_text())
    except ValidationError as e:
        console.print(f"[red]Invalid snapshot file {path}:[/red]\n{escape(str(e))}")
        raise typer.Exit(1)


def _print_assessment(assessment) -> None:
    gonio = assessment.goniometry
    table = Table(title="Goniometry")
    table.add_column("Axis")
    table.add_column("Right", justify="right")
    table.add_column("Left", justify="right")
    table.add_column("Asymmetry", justify="right")
    table.add_column("Restricted")
    table.add_column("% of norm", justify="right")
    table.add_column("Class")
    for name, axis in (("Rotation", gonio.rotation), ("Inclination", gonio.inclination)):
        table.add_row(
            name,
            _fmt(axis.passive_right, "°"),
            _fmt(axis.passive_left, "°"),
            _fmt(axis.passive_asymmetry, "°"),
            axis.restricted_side or "—",
            _fmt(axis.percent_of_norm, "%"),
            axis.classification.label if axis.classification else "—",
        )
    console.print(table)

    cranial = assessment.cranial
    console.print(
        f"[bold]Craniometry:[/bold] CVA {_fmt(cranial.cva_mm, ' mm')}  "
        f"CVAI {_fmt(cranial.cvai_percent, '%')}  CI {_fmt(cranial.ci_percent, '%')}  "
        f"shape {cranial.cranial_shape.value if cranial.cranial_shape else '—'}"
    )

    tort = assessment.torticollis
    if tort.is_classified:
        console.print(
            Panel.fit(
                f"Grade {tort.grade} - {tort.title}\n"
                f"{tort.criteria.age_bracket}, deficit {tort.criteria.deficit_degrees:g}°, "
                f"nodule {'yes' if tort.criteria.nodule else 'no'}\n"
                f"Prognosis: {tort.prognosis.min_months:g}-{tort.prognosis.max_months:g} months. "
                f"{tort.prognosis.message}",
                title="Torticollis",
            )
        )
    else:
        console.print(f"[yellow]Torticollis: insufficient data ({tort.reason})[/yellow]")

    if assessment.aims is not None:
        aims = assessment.aims
        pct = aims.percentile
        tier = f"P{pct.percentile} ({pct.classification})" if pct else "no age"
        console.print(f"[bold]AIMS:[/bold] {aims.total_score}/{aims.max_score} {tier}")
    if assessment.fsos2 is not None:
        console.print(
            f"[bold]FSOS-2:[/bold] {assessment.fsos2.total_score}/{assessment.fsos2.max_score} "
            f"({assessment.fsos2.percent}%)"
        )
    if assessment.mfs.status is not None:
        console.print(
            f"[bold]MFS:[/bold] R{assessment.mfs.right}/L{assessment.mfs.left} "
            f"{assessment.mfs.status}, average {assessment.mfs.average:g}"
        )

    for warning in assessment.consistency_warnings:
        style = _SEVERITY_STYLES[warning.severity.value]
        console.print(f"[{style}]{warning.severity.value.upper()}: {warning.message}[/{style}]")
    if assessment.low_confidence:
        console.print("[yellow]Low confidence: reference lookups were extrapolated[/yellow]")


@app.command()
def assess(
    snapshot_file: Path = typer.Argument(..., help="JSON file with the evaluation snapshot"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    diagnosis: bool = typer.Option(False, "--diagnosis", "-d", help="Compose the diagnosis narrative"),
):
    """Score an evaluation snapshot."""
    from pedi_eval import assess as run_assessment
    from pedi_eval import compose_diagnosis

    snapshot = _load_snapshot(snapshot_file)
    assessment = run_assessment(snapshot)
    report = compose_diagnosis(snapshot, assessment) if diagnosis else None

    if output_json:
        result = {"assessment": assessment.model_dump(mode="json")}
        if report is not None:
            result["diagnosis"] = report.model_dump(mode="json")
        console.print_json(data=result)
        return

    _print_assessment(assessment)
    if report is not None:
        console.print(Panel(report.narrative or "(no findings)", title="Diagnosis"))
        if report.tags:
            console.print(f"Tags: {', '.join(report.tags)}")


@app.command()
def tables():
    """Show the reference tables in use."""
    from pedi_eval.reference.tables import BAND_TABLES, CERVICAL_ROM_NORMS, REFERENCE_TABLES_VERSION

    console.print(f"[bold]Reference tables v{REFERENCE_TABLES_VERSION}[/bold]\n")

    norms = Table(title="Cervical ROM norms")
    norms.add_column("Age (months)", justify="right")
    norms.add_column("Rotation", justify="right")
    norms.add_column("Inclination", justify="right")
    for row in CERVICAL_ROM_NORMS:
        norms.add_row(f"{row.age_months:g}", f"{row.rotation_mean}°", f"{row.inclination_mean}°")
    console.print(norms)

    for name, band_table in BAND_TABLES.items():
        table = Table(title=f"{name} ({band_table.unit})")
        table.add_column("Level", justify="right")
        table.add_column("Label")
        table.add_column("Range")
        for band in band_table.bands:
            upper = "∞" if band.upper == float("inf") else f"{band.upper:g}"
            table.add_row(str(band.level), band.label, f"[{band.lower:g}, {upper})")
        console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"Starting PediEval API server on {host}:{port}")
    uvicorn.run(
        "pedi_eval.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version():
    """Show version information."""
    from pedi_eval import __version__
    from pedi_eval.reference.tables import REFERENCE_TABLES_VERSION

    console.print(f"PediEval v{__version__} (reference tables {REFERENCE_TABLES_VERSION})")
