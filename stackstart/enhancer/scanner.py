"""File tree scanning and manifest loading for enhancement runs."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from ..config import TemplateFamily
from ..utils import load_json, print_warning
from .models import Manifest, ProjectSnapshot

MANIFEST_FILENAME = "package.json"

# Pruned during the walk, never descended into.
_SKIP_DIRS = frozenset({".git", "node_modules"})


def scan_files(root: str | Path) -> list[str]:
    """Return every file under *root* as a sorted relative POSIX path.

    Version-control and dependency-cache directories are removed from the
    walk before it descends, so their contents are never listed.
    """
    root_path = Path(root)
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = sorted(name for name in dirnames if name not in _SKIP_DIRS)
        current = Path(dirpath)
        for filename in filenames:
            files.append((current / filename).relative_to(root_path).as_posix())
    return sorted(files)


def read_manifest(root: str | Path) -> Manifest | None:
    """Load ``package.json`` from *root*.

    Returns ``None`` when the file is missing.  A malformed manifest is
    reported and treated as missing so classification can still proceed.
    """
    path = Path(root) / MANIFEST_FILENAME
    if not path.is_file():
        return None
    try:
        raw = load_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print_warning(f"Ignoring unreadable {MANIFEST_FILENAME}: {exc}")
        return None
    return Manifest.model_validate(
        {
            "name": str(raw.get("name", "")),
            "dependencies": _string_mapping(raw.get("dependencies")),
            "devDependencies": _string_mapping(raw.get("devDependencies")),
            "scripts": _string_mapping(raw.get("scripts")),
        }
    )


def capture_snapshot(root: str | Path, template: TemplateFamily | str) -> ProjectSnapshot:
    """Capture the immutable view a single enhancement run works from.

    Raises:
        FileNotFoundError: If *root* does not exist.
        NotADirectoryError: If *root* is not a directory.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")

    return ProjectSnapshot(
        root_path=root_path,
        template_family=TemplateFamily(template),
        manifest=read_manifest(root_path),
        files=tuple(scan_files(root_path)),
    )


def _string_mapping(value: Any) -> dict[str, str]:
    """Coerce a manifest section into ``{name: str}``; anything else is empty."""
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}
