"""Structure classification: which cross-cutting concerns a project has.

Each feature of the :class:`FeatureVector` is computed by its own predicate
from the file list and the manifest.  Detection of logging and validation is
allow-list based; a bespoke solution that uses none of the listed packages is
reported as missing.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Sequence

from .models import FeatureVector, Manifest, ProjectSnapshot

TEST_RUNNERS = frozenset({"jest", "mocha", "vitest"})
LOGGING_LIBRARIES = frozenset({"winston", "bunyan", "pino", "morgan"})
VALIDATION_LIBRARIES = frozenset({"joi", "yup", "ajv", "express-validator", "zod"})

_CODE_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".py")
_TYPED_EXTENSIONS = (".ts", ".tsx")
_ERROR_HANDLING_KEYWORDS = re.compile(r"\b(?:try|catch|throw|except|raise)\b")


class StructureClassifier:
    """Derives a :class:`FeatureVector` from a project's files and manifest.

    The classifier only reads from disk (for the error-handling content scan)
    and never fails: unreadable files are skipped and a missing manifest is
    treated as one with no dependencies.
    """

    def __init__(self, project_root: str | Path) -> None:
        self.project_root = Path(project_root)

    def classify(self, files: Sequence[str], manifest: Manifest | None) -> FeatureVector:
        manifest = manifest or Manifest()
        return FeatureVector(
            has_tests=self._has_tests(files, manifest),
            has_linting=_declares_or_mentions(manifest, files, "eslint"),
            has_formatting=_declares_or_mentions(manifest, files, "prettier"),
            has_type_binding=self._has_type_binding(files, manifest),
            has_documentation=any("readme" in f.lower() for f in files),
            has_error_handling=self._has_error_handling(files),
            has_environment_config=any(".env" in f or "config" in f for f in files),
            has_logging=self._has_logging(files, manifest),
            has_validation=_declares_any(manifest, VALIDATION_LIBRARIES),
            has_api_documentation=any("swagger" in f or "openapi" in f for f in files),
        )

    def classify_snapshot(self, snapshot: ProjectSnapshot) -> FeatureVector:
        return self.classify(snapshot.files, snapshot.manifest)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @staticmethod
    def _has_tests(files: Sequence[str], manifest: Manifest) -> bool:
        if any("test" in f or "spec" in f for f in files):
            return True
        return any(runner in manifest.dev_dependencies for runner in TEST_RUNNERS)

    @staticmethod
    def _has_type_binding(files: Sequence[str], manifest: Manifest) -> bool:
        if any(f.endswith(_TYPED_EXTENSIONS) for f in files):
            return True
        return "typescript" in manifest.dev_dependencies

    @staticmethod
    def _has_logging(files: Sequence[str], manifest: Manifest) -> bool:
        return _declares_any(manifest, LOGGING_LIBRARIES) or any("log" in f for f in files)

    def _has_error_handling(self, files: Sequence[str]) -> bool:
        for rel_path in files:
            if not rel_path.endswith(_CODE_EXTENSIONS):
                continue
            content = self._read_source(rel_path)
            if content is not None and _ERROR_HANDLING_KEYWORDS.search(content):
                return True
        return False

    def _read_source(self, rel_path: str) -> str | None:
        """Return the file's text, or ``None`` if it cannot be read as UTF-8."""
        try:
            return (self.project_root / rel_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None


def _declares_any(manifest: Manifest, names: Iterable[str]) -> bool:
    return any(manifest.has_package(name) for name in names)


def _declares_or_mentions(manifest: Manifest, files: Sequence[str], tool: str) -> bool:
    """Tool is a dev dependency, or its conventional config file is present."""
    return tool in manifest.dev_dependencies or any(tool in f for f in files)


def classify(snapshot: ProjectSnapshot) -> FeatureVector:
    """Classify a captured snapshot."""
    return StructureClassifier(snapshot.root_path).classify_snapshot(snapshot)
