"""Enhancement summary: building, writing and printing it."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from rich.panel import Panel
from rich.table import Table

from ..config import TemplateFamily
from ..rendering import TemplateRenderer
from ..utils import console
from .applier import ApplyOutcome
from .models import (
    AttemptedEnhancement,
    Enhancement,
    EnhancementSummary,
    FeatureVector,
    Priority,
    ProjectSnapshot,
)

REPORT_TEMPLATE = "report/AI_ENHANCEMENTS.md.j2"

_PRIORITY_STYLE = {Priority.HIGH: "red", Priority.MEDIUM: "yellow", Priority.LOW: "cyan"}
_STATUS_STYLE = {"applied": "green", "failed": "red", "not run": "dim"}


def build_summary(
    snapshot: ProjectSnapshot,
    features: FeatureVector,
    enhancements: Sequence[Enhancement],
    outcome: ApplyOutcome,
) -> EnhancementSummary:
    """Summarise a run; every synthesised enhancement is listed, applied or not."""
    applied_ids = {id(e) for e in outcome.applied}
    failed_id = id(outcome.failed) if outcome.failed is not None else None

    attempted = []
    for enhancement in enhancements:
        if id(enhancement) in applied_ids:
            status = "applied"
        elif id(enhancement) == failed_id:
            status = "failed"
        else:
            status = "not run"
        attempted.append(
            AttemptedEnhancement(
                description=enhancement.description,
                priority=enhancement.priority,
                category=enhancement.category,
                status=status,
            )
        )

    return EnhancementSummary(
        project_path=str(snapshot.root_path),
        template=snapshot.template_family,
        features=features,
        attempted=attempted,
        failure=outcome.failure,
        dependency_count=snapshot.dependency_count,
        dev_dependency_count=snapshot.dev_dependency_count,
        file_count=len(snapshot.files),
    )


def render_report(summary: EnhancementSummary, renderer: TemplateRenderer | None = None) -> str:
    """Render the markdown report for *summary*."""
    renderer = renderer or TemplateRenderer()
    grouped = summary.by_priority()
    groups = [
        {
            "label": priority.value.capitalize(),
            "items": [item.model_dump(mode="json") for item in grouped[priority]],
        }
        for priority in Priority
    ]
    install_command = (
        "pip install -r requirements.txt"
        if summary.template == TemplateFamily.PYTHON
        else "npm install"
    )
    return renderer.render(
        REPORT_TEMPLATE,
        {
            "groups": groups,
            "failure": summary.failure.model_dump() if summary.failure else None,
            "template": summary.template.value,
            "dependency_count": summary.dependency_count,
            "dev_dependency_count": summary.dev_dependency_count,
            "file_count": summary.file_count,
            "features": summary.features.labelled(),
            "install_command": install_command,
        },
    )


def write_report(
    summary: EnhancementSummary,
    path: Path,
    renderer: TemplateRenderer | None = None,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(summary, renderer), encoding="utf-8")
    return path


def print_report(summary: EnhancementSummary) -> None:
    """Pretty-print an enhancement summary to the console."""
    console.print(
        Panel(
            f"[bold]Enhancement Report[/bold]\n"
            f"Project: {summary.project_path}\n"
            f"Template: {summary.template.value}",
            border_style="blue",
        )
    )

    table = Table(title="Enhancements", show_lines=False)
    table.add_column("Priority", width=8)
    table.add_column("Enhancement")
    table.add_column("Category", width=10)
    table.add_column("Status", width=8)

    for priority, items in summary.by_priority().items():
        style = _PRIORITY_STYLE[priority]
        for item in items:
            status_style = _STATUS_STYLE.get(item.status, "white")
            table.add_row(
                f"[{style}]{priority.value}[/{style}]",
                item.description,
                item.category.value,
                f"[{status_style}]{item.status}[/{status_style}]",
            )

    console.print(table)

    present = [label for label, value in summary.features.labelled() if value]
    missing = [label for label, value in summary.features.labelled() if not value]
    console.print(f"[green]Present:[/green] {', '.join(present) or 'none'}")
    console.print(f"[yellow]Missing:[/yellow] {', '.join(missing) or 'none'}")
    if summary.failure:
        console.print(
            f"[red]Stopped at {summary.failure.description}: {summary.failure.error}[/red]"
        )
    if summary.report_path:
        console.print(f"[dim]Summary written to {summary.report_path}[/dim]")
