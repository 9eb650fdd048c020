"""StackStart configuration.

Typed configuration for the scaffolder and the enhancement engine.  All
settings use Pydantic v2 models so they are validated at construction time and
can be serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateFamily(str, Enum):
    """Supported project archetypes."""

    NODE = "node"
    REACT = "react"
    PYTHON = "python"
    FULL_STACK = "full-stack"

    @property
    def is_node_like(self) -> bool:
        """True for families that ship an HTTP backend written for Node."""
        return self in (TemplateFamily.NODE, TemplateFamily.FULL_STACK)


class DeployTarget(str, Enum):
    """Hosting providers a deployment config can be written for."""

    VERCEL = "vercel"
    NETLIFY = "netlify"
    AWS = "aws"
    GCP = "gcp"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class ScaffoldOptions(BaseModel):
    """Per-invocation options for ``stackstart create``."""

    template: TemplateFamily = Field(default=TemplateFamily.NODE)
    deploy_target: DeployTarget = Field(default=DeployTarget.VERCEL)
    ai_enhanced: bool = Field(default=False, description="Run the enhancement engine")
    with_demo: bool = Field(default=False, description="Include a sample app")
    skip_install: bool = Field(default=False, description="Do not install dependencies")
    skip_git: bool = Field(default=False, description="Do not initialise a git repository")


class Config(BaseModel):
    """Global StackStart configuration.

    Created once by the CLI (usually via :meth:`from_env`) and passed to the
    scaffolder and the enhancement engine.
    """

    templates_dir: Path = Field(default=Path("./templates"))
    output_dir: Path = Field(default=Path("."))
    summary_filename: str = Field(default="AI_ENHANCEMENTS.md")
    install_timeout: int = Field(
        default=600, ge=10, description="Dependency installation timeout in seconds"
    )
    git_commit_message: str = Field(default="chore: initial commit via stackstart")

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def template_path(self, family: TemplateFamily | str) -> Path:
        """Directory holding the template for *family*."""
        return self.templates_dir / TemplateFamily(family).value

    def project_path(self, project_name: str) -> Path:
        """Absolute location a project named *project_name* is created at."""
        return (self.output_dir / project_name).resolve()

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKSTART_TEMPLATES_DIR, STACKSTART_OUTPUT_DIR,
            STACKSTART_INSTALL_TIMEOUT, STACKSTART_COMMIT_MESSAGE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSTART_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["STACKSTART_TEMPLATES_DIR"])
        if os.environ.get("STACKSTART_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STACKSTART_OUTPUT_DIR"])
        if os.environ.get("STACKSTART_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["STACKSTART_INSTALL_TIMEOUT"])
        if os.environ.get("STACKSTART_COMMIT_MESSAGE"):
            kwargs["git_commit_message"] = os.environ["STACKSTART_COMMIT_MESSAGE"]
        return cls(**kwargs)
