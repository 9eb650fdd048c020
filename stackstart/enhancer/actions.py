"""Side-effecting building blocks of enhancements.

Every enhancement is a sequence of *steps*.  A step is a small frozen value
describing one effect (add packages to the manifest, render a file, make sure
a line exists in a text file, ...) and :func:`run_step` is the single place
that knows how to carry each kind out.  Steps are written so that running them
twice leaves the project exactly as running them once did.

``package.json`` is shared by almost every enhancement, so each manifest step
is its own read-modify-write transaction (:func:`manifest_transaction`):
the whole document is read, only the keys the step owns are touched, and the
whole document is written back before the step returns.
"""

from __future__ import annotations

import asyncio
import json
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Union

from ..config import TemplateFamily
from ..rendering import TemplateRenderer
from ..utils import ensure_dir, save_json, write_text_file
from .models import ApplyFn
from .scanner import MANIFEST_FILENAME


class ManifestError(Exception):
    """Raised when ``package.json`` exists but cannot be read as a JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot update {path}: {reason}")


# ---------------------------------------------------------------------------
# Step variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AddPackages:
    """Set ``name -> version`` entries in dependencies or devDependencies."""

    packages: tuple[tuple[str, str], ...]
    dev: bool = False

    @property
    def section(self) -> str:
        return "devDependencies" if self.dev else "dependencies"


@dataclass(frozen=True)
class AddScripts:
    """Set ``name -> command`` entries in the manifest's scripts."""

    scripts: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class RenderFile:
    """Render a bundled template to *target* (relative to the project root)."""

    template: str
    target: str


@dataclass(frozen=True)
class EnsureDirectory:
    path: str


@dataclass(frozen=True)
class EnsureLine:
    """Append *line* to *target* unless one of its lines already names *marker*.

    A line names *marker* when, stripped, it is exactly *marker* or *marker*
    followed by a version specifier or a ``;``/``[`` suffix.  Comments,
    negations and longer names (``# .env``, ``!.env.example``, ``.envrc``,
    ``mypy-extensions``) do not count.  A missing file is created with *seed*
    (or just *line* when no seed is given).
    """

    target: str
    line: str
    marker: str
    seed: str | None = None


ActionStep = Union[AddPackages, AddScripts, RenderFile, EnsureDirectory, EnsureLine]


@dataclass(frozen=True)
class ActionContext:
    """What every step may depend on: where the project is and what it is."""

    project_root: Path
    template: TemplateFamily
    project_name: str
    renderer: TemplateRenderer

    def resolve(self, relative: str) -> Path:
        return self.project_root / relative

    @property
    def template_context(self) -> dict[str, Any]:
        return {"project_name": self.project_name, "template": self.template.value}


# ---------------------------------------------------------------------------
# Manifest transaction
# ---------------------------------------------------------------------------

@asynccontextmanager
async def manifest_transaction(project_root: Path) -> AsyncIterator[dict[str, Any]]:
    """Yield the full ``package.json`` document and write it back on exit.

    A missing manifest starts out as an empty document.  Nothing is written
    if the body of the ``async with`` block raises.
    """
    path = project_root / MANIFEST_FILENAME
    document = await asyncio.to_thread(_read_manifest_document, path)
    yield document
    await save_json(document, path)


def _read_manifest_document(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value is not an object")
    return data


def _section(document: dict[str, Any], key: str) -> dict[str, Any]:
    section = document.get(key)
    if not isinstance(section, dict):
        section = {}
        document[key] = section
    return section


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

async def run_step(step: ActionStep, ctx: ActionContext) -> None:
    """Carry out a single step against the project described by *ctx*."""
    if isinstance(step, AddPackages):
        async with manifest_transaction(ctx.project_root) as document:
            _section(document, step.section).update(step.packages)
    elif isinstance(step, AddScripts):
        async with manifest_transaction(ctx.project_root) as document:
            _section(document, "scripts").update(step.scripts)
    elif isinstance(step, RenderFile):
        await ctx.renderer.render_to_file(
            step.template, ctx.resolve(step.target), ctx.template_context
        )
    elif isinstance(step, EnsureDirectory):
        await asyncio.to_thread(ensure_dir, ctx.resolve(step.path))
    elif isinstance(step, EnsureLine):
        await asyncio.to_thread(_ensure_line, ctx.resolve(step.target), step)
    else:
        raise TypeError(f"Unknown action step: {step!r}")


def _ensure_line(path: Path, step: EnsureLine) -> None:
    if not path.exists():
        write_text_file(path, step.seed if step.seed is not None else step.line + "\n")
        return
    content = path.read_text(encoding="utf-8")
    if _names_marker(content, step.marker):
        return
    if content and not content.endswith("\n"):
        content += "\n"
    path.write_text(content + step.line + "\n", encoding="utf-8")


def _names_marker(content: str, marker: str) -> bool:
    pattern = re.compile(rf"{re.escape(marker)}(?:\s*[=<>!~;\[]|$)")
    return any(pattern.match(line.strip()) for line in content.splitlines())


def build_apply(steps: tuple[ActionStep, ...], ctx: ActionContext) -> ApplyFn:
    """Bind *steps* to *ctx*, returning the zero-argument ``apply`` coroutine."""

    async def apply() -> None:
        for step in steps:
            await run_step(step, ctx)

    return apply


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

ACTIONS: dict[str, tuple[ActionStep, ...]] = {
    "logging": (
        AddPackages((("winston", "^3.11.0"),)),
        EnsureDirectory("logs"),
        RenderFile("enhancements/common/logger.js.j2", "src/utils/logger.js"),
    ),
    "error_handling": (
        RenderFile("enhancements/common/errorHandler.js.j2", "src/utils/errorHandler.js"),
    ),
    "environment": (
        AddPackages((("dotenv", "^16.3.1"),)),
        RenderFile("enhancements/common/env.example.j2", ".env.example"),
        EnsureLine(".gitignore", ".env", marker=".env", seed=".env\nnode_modules/\nlogs/\n"),
    ),
    "validation": (
        AddPackages((("joi", "^17.11.0"),)),
        RenderFile("enhancements/node/validation.js.j2", "src/utils/validation.js"),
    ),
    "api_docs": (
        AddPackages((("swagger-ui-express", "^5.0.0"), ("swagger-jsdoc", "^6.2.8"))),
        RenderFile("enhancements/node/swagger.js.j2", "src/utils/swagger.js"),
    ),
    "testing": (
        AddScripts((("test:coverage", "jest --coverage"), ("test:watch", "jest --watch"))),
        AddPackages((("@types/jest", "^29.5.2"), ("supertest", "^6.3.3")), dev=True),
        RenderFile("enhancements/common/jest.config.js.j2", "jest.config.js"),
    ),
    "react_performance": (
        RenderFile("enhancements/react/performance.js.j2", "src/utils/performance.js"),
    ),
    "react_router": (
        AddPackages((("react-router-dom", "^6.8.0"),)),
    ),
    "react_hooks": (
        RenderFile("enhancements/react/useApi.js.j2", "src/hooks/useApi.js"),
    ),
    "database": (
        RenderFile("enhancements/node/database.js.j2", "src/utils/database.js"),
    ),
    "security": (
        AddPackages(
            (("helmet", "^7.1.0"), ("cors", "^2.8.5"), ("express-rate-limit", "^7.1.5"))
        ),
        RenderFile("enhancements/node/security.js.j2", "src/middleware/security.js"),
    ),
    "caching": (
        AddPackages((("node-cache", "^5.1.2"),)),
        RenderFile("enhancements/node/cache.js.j2", "src/utils/cache.js"),
    ),
    "python_logging": (
        RenderFile("enhancements/python/logger.py.j2", "src/utils/logger.py"),
    ),
    "python_web": (
        RenderFile("enhancements/python/web.py.j2", "src/utils/web.py"),
    ),
    "python_typing": (
        EnsureLine("requirements.txt", "mypy==1.7.1", marker="mypy"),
        RenderFile("enhancements/python/mypy.ini.j2", "mypy.ini"),
    ),
    "api_client": (
        RenderFile("enhancements/react/apiClient.js.j2", "client/src/utils/apiClient.js"),
    ),
}
