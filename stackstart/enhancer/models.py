"""Data model for the enhancement engine.

A run captures one :class:`ProjectSnapshot`, derives a :class:`FeatureVector`
from it, synthesises a list of :class:`Enhancement` actions and finally
produces an :class:`EnhancementSummary`.  Only the summary outlives the run
(as the ``AI_ENHANCEMENTS.md`` report).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import TemplateFamily


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Priority(str, Enum):
    """Application tier of an enhancement. Higher tiers run first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class EnhancementCategory(str, Enum):
    """Classification of an enhancement. Informational only."""

    FILE = "file"
    DEPENDENCY = "dependency"
    CONFIG = "config"
    CODE = "code"


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

class Manifest(BaseModel):
    """The parts of ``package.json`` the classifier looks at.

    Unknown keys are ignored here; manifest *writes* never go through this
    model, so nothing is lost on disk.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="")
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(
        default_factory=dict, alias="devDependencies"
    )
    scripts: dict[str, str] = Field(default_factory=dict)

    def has_package(self, name: str) -> bool:
        """True if *name* is a runtime or development dependency."""
        return name in self.dependencies or name in self.dev_dependencies


class ProjectSnapshot(BaseModel):
    """Immutable view of a project taken at the start of an enhancement run."""

    model_config = ConfigDict(frozen=True)

    root_path: Path
    template_family: TemplateFamily
    manifest: Optional[Manifest] = None
    files: tuple[str, ...] = ()

    @property
    def dependency_count(self) -> int:
        return len(self.manifest.dependencies) if self.manifest else 0

    @property
    def dev_dependency_count(self) -> int:
        return len(self.manifest.dev_dependencies) if self.manifest else 0


class FeatureVector(BaseModel):
    """Which cross-cutting concerns a project already has."""

    model_config = ConfigDict(frozen=True)

    has_tests: bool = False
    has_linting: bool = False
    has_formatting: bool = False
    has_type_binding: bool = False
    has_documentation: bool = False
    has_error_handling: bool = False
    has_environment_config: bool = False
    has_logging: bool = False
    has_validation: bool = False
    has_api_documentation: bool = False

    def labelled(self) -> list[tuple[str, bool]]:
        """Return ``(human label, present)`` pairs in declaration order."""
        return [(FEATURE_LABELS[name], value) for name, value in self]


FEATURE_LABELS: dict[str, str] = {
    "has_tests": "Tests",
    "has_linting": "Linting",
    "has_formatting": "Formatting",
    "has_type_binding": "Type checking",
    "has_documentation": "Documentation",
    "has_error_handling": "Error Handling",
    "has_environment_config": "Environment Config",
    "has_logging": "Logging",
    "has_validation": "Validation",
    "has_api_documentation": "API Documentation",
}


# ---------------------------------------------------------------------------
# Enhancement
# ---------------------------------------------------------------------------

ApplyFn = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Enhancement:
    """A recommended improvement with a deferred, idempotent ``apply``."""

    category: EnhancementCategory
    description: str
    priority: Priority
    apply: ApplyFn


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class AttemptedEnhancement(BaseModel):
    """Report entry for one synthesised enhancement."""

    description: str
    priority: Priority
    category: EnhancementCategory
    status: str = Field(
        default="pending",
        description="'applied', 'failed' or 'not run' once the run finishes",
    )


class EnhancementFailure(BaseModel):
    """The enhancement that stopped a run and the error it raised."""

    description: str
    error: str


class EnhancementSummary(BaseModel):
    """Outcome of one enhancement run."""

    project_path: str
    template: TemplateFamily
    features: FeatureVector = Field(default_factory=FeatureVector)
    attempted: list[AttemptedEnhancement] = Field(default_factory=list)
    failure: Optional[EnhancementFailure] = None
    dependency_count: int = 0
    dev_dependency_count: int = 0
    file_count: int = 0
    report_path: Optional[str] = None

    @property
    def applied(self) -> list[str]:
        return [a.description for a in self.attempted if a.status == "applied"]

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    def by_priority(self) -> dict[Priority, list[AttemptedEnhancement]]:
        grouped: dict[Priority, list[AttemptedEnhancement]] = {p: [] for p in Priority}
        for item in self.attempted:
            grouped[item.priority].append(item)
        return grouped

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
