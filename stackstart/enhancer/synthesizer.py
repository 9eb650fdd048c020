"""Improvement synthesis: turn a feature vector into enhancement actions."""

from __future__ import annotations

from pathlib import Path

from ..config import TemplateFamily
from ..rendering import TemplateRenderer
from .actions import ACTIONS, ActionContext, build_apply
from .models import Enhancement, FeatureVector, Manifest
from .rules import rules_for


def synthesize(
    features: FeatureVector,
    manifest: Manifest | None,
    template: TemplateFamily | str,
    project_root: str | Path,
    renderer: TemplateRenderer | None = None,
) -> list[Enhancement]:
    """Evaluate the rule tables for *template* in order.

    Generic rules come first, then the template-specific ones.  Nothing is
    de-duplicated and nothing is re-checked after evaluation; ordering by
    priority happens when the enhancements are applied.
    """
    family = TemplateFamily(template)
    root = Path(project_root)
    ctx = ActionContext(
        project_root=root,
        template=family,
        project_name=(manifest.name if manifest and manifest.name else root.name),
        renderer=renderer or TemplateRenderer(),
    )

    return [
        Enhancement(
            category=rule.category,
            description=rule.description,
            priority=rule.priority,
            apply=build_apply(ACTIONS[rule.action], ctx),
        )
        for rule in rules_for(family)
        if rule.condition(features, family)
    ]
