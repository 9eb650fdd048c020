"""Enhancement engine for StackStart.

Analyses a generated project, recommends improvements for its template family
and applies them:

1. scan the file tree and read ``package.json`` into a snapshot,
2. classify which cross-cutting concerns are already present,
3. synthesise prioritised enhancements from the rule tables,
4. apply them high -> medium -> low, stopping at the first failure,
5. write ``AI_ENHANCEMENTS.md`` describing everything that was attempted.

The engine never raises to its caller; failures are reported and recorded on
the returned :class:`EnhancementSummary`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.panel import Panel

from ..config import TemplateFamily
from ..rendering import TemplateRenderer
from ..utils import console, print_error, print_success, print_warning
from .actions import ManifestError
from .applier import ApplyOutcome, apply_all, order_by_priority
from .classifier import StructureClassifier
from .models import (
    Enhancement,
    EnhancementCategory,
    EnhancementFailure,
    EnhancementSummary,
    FeatureVector,
    Manifest,
    Priority,
    ProjectSnapshot,
)
from .report import build_summary, print_report, write_report
from .scanner import capture_snapshot, read_manifest, scan_files
from .synthesizer import synthesize

__all__ = [
    "EnhancementEngine",
    "enhance_project",
    "Enhancement",
    "EnhancementCategory",
    "EnhancementSummary",
    "FeatureVector",
    "Manifest",
    "ManifestError",
    "Priority",
    "ProjectSnapshot",
    "StructureClassifier",
    "apply_all",
    "capture_snapshot",
    "order_by_priority",
    "print_report",
    "read_manifest",
    "scan_files",
    "synthesize",
]

DEFAULT_SUMMARY_FILENAME = "AI_ENHANCEMENTS.md"


class EnhancementEngine:
    """Runs the scan -> classify -> synthesise -> apply pipeline on one project.

    Usage::

        engine = EnhancementEngine()
        summary = await engine.run("/path/to/project", "node")
        print_report(summary)
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        summary_filename: str = DEFAULT_SUMMARY_FILENAME,
    ) -> None:
        self._renderer = renderer or TemplateRenderer()
        self.summary_filename = summary_filename

    async def run(
        self,
        project_root: str | Path,
        template: TemplateFamily | str,
    ) -> EnhancementSummary:
        family = TemplateFamily(template)
        console.print(
            Panel(
                f"[bold]Enhancing project[/bold]\n"
                f"Project: {project_root}\n"
                f"Template: {family.value}",
                title="StackStart",
                border_style="blue",
            )
        )

        try:
            snapshot = await asyncio.to_thread(capture_snapshot, project_root, family)
        except OSError as exc:
            print_error(f"Enhancement analysis failed: {exc}")
            return EnhancementSummary(
                project_path=str(project_root),
                template=family,
                failure=EnhancementFailure(description="Project analysis", error=str(exc)),
            )

        features = await asyncio.to_thread(
            StructureClassifier(snapshot.root_path).classify_snapshot, snapshot
        )
        enhancements = synthesize(
            features, snapshot.manifest, family, snapshot.root_path, self._renderer
        )
        console.print(f"  [dim]{len(enhancements)} enhancements recommended[/dim]")

        outcome: ApplyOutcome = await apply_all(enhancements)
        summary = build_summary(snapshot, features, enhancements, outcome)

        report_path = snapshot.root_path / self.summary_filename
        try:
            await asyncio.to_thread(write_report, summary, report_path, self._renderer)
            summary.report_path = str(report_path)
        except OSError as exc:
            print_error(f"Could not write {self.summary_filename}: {exc}")

        if summary.succeeded:
            print_success(
                f"AI enhancements applied: {len(summary.applied)} improvements made"
            )
        else:
            print_error("AI enhancement failed")
            print_warning("Continuing without the remaining enhancements...")
        return summary


async def enhance_project(
    project_root: str | Path,
    template: TemplateFamily | str,
    summary_filename: str = DEFAULT_SUMMARY_FILENAME,
) -> EnhancementSummary:
    """Convenience wrapper running a fresh :class:`EnhancementEngine`."""
    engine = EnhancementEngine(summary_filename=summary_filename)
    return await engine.run(project_root, template)
