"""Priority-ordered, strictly sequential application of enhancements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..utils import console
from .models import Enhancement, EnhancementFailure


@dataclass
class ApplyOutcome:
    """Which enhancements ran, and the one that stopped the run (if any)."""

    applied: list[Enhancement] = field(default_factory=list)
    failure: EnhancementFailure | None = None
    failed: Enhancement | None = None


def order_by_priority(enhancements: Sequence[Enhancement]) -> list[Enhancement]:
    """All high before medium before low; synthesis order inside a tier."""
    return sorted(enhancements, key=lambda e: e.priority.rank)


async def apply_all(enhancements: Sequence[Enhancement]) -> ApplyOutcome:
    """Apply *enhancements* one at a time in priority order.

    The first exception ends the run.  It is recorded on the returned outcome
    and never re-raised; whatever was applied before it stays applied.
    """
    outcome = ApplyOutcome()
    for enhancement in order_by_priority(enhancements):
        console.print(f"  [dim]Applying {enhancement.description}...[/dim]")
        try:
            await enhancement.apply()
        except Exception as exc:
            console.print(f"  [red]{enhancement.description} failed: {exc}[/red]")
            outcome.failed = enhancement
            outcome.failure = EnhancementFailure(
                description=enhancement.description,
                error=f"{type(exc).__name__}: {exc}",
            )
            break
        outcome.applied.append(enhancement)
    return outcome
