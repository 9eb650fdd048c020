"""Shared pytest fixtures for the StackStart test suite.

Provides reusable fixtures for:
- Sample generated projects (node, react, python)
- A templates directory shaped like the one ``stackstart create`` copies from
- A real template renderer and a default configuration
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stackstart.config import Config
from stackstart.rendering import TemplateRenderer


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Sample projects
# ---------------------------------------------------------------------------

NODE_MANIFEST = {
    "name": "sample-api",
    "version": "1.0.0",
    "main": "src/index.js",
    "scripts": {"start": "node src/index.js", "test": "jest"},
    "dependencies": {"express": "^4.18.2"},
    "devDependencies": {"jest": "^29.7.0"},
    "engines": {"node": ">=18"},
}

NODE_INDEX = """const express = require('express');

const app = express();

app.get('/', (req, res) => {
  res.json({ status: 'ok' });
});

app.listen(3000);
"""


@pytest.fixture
def node_project(tmp_path: Path) -> Path:
    """Node project with jest, one source file without error handling and a README."""
    root = tmp_path / "sample-api"
    return write_files(
        root,
        {
            "package.json": json.dumps(NODE_MANIFEST, indent=2),
            "src/index.js": NODE_INDEX,
            "README.md": "# sample-api\n",
        },
    )


@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    root = tmp_path / "sample-ui"
    manifest = {
        "name": "sample-ui",
        "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
        "devDependencies": {"vitest": "^1.0.0", "eslint": "^8.0.0"},
    }
    return write_files(
        root,
        {
            "package.json": json.dumps(manifest, indent=2),
            "src/App.jsx": "export default function App() {\n  return <h1>Hi</h1>;\n}\n",
        },
    )


@pytest.fixture
def python_project(tmp_path: Path) -> Path:
    """Python project: no package.json at all."""
    root = tmp_path / "sample-py"
    return write_files(
        root,
        {
            "requirements.txt": "flask==3.0.0\n",
            "src/main.py": "print('hello')\n",
        },
    )


# ---------------------------------------------------------------------------
# Scaffolding inputs
# ---------------------------------------------------------------------------

@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Project templates for every family, as ``stackstart create`` expects them."""
    root = tmp_path / "templates"
    write_files(
        root,
        {
            "node/package.json": json.dumps({"name": "node-template"}, indent=2),
            "node/src/index.js": NODE_INDEX,
            "react/package.json": json.dumps({"name": "react-template"}, indent=2),
            "react/src/App.jsx": "export default function App() { return null; }\n",
            "python/requirements.txt": "flask==3.0.0\n",
            "python/src/main.py": "print('hello')\n",
            "full-stack/README.md": "# Full-stack project\n",
        },
    )
    return root


@pytest.fixture
def config(tmp_path: Path, templates_dir: Path) -> Config:
    """Configuration writing projects to ``tmp_path/out``."""
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    return Config(templates_dir=templates_dir, output_dir=output_dir)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def write_tree():
    """The :func:`write_files` helper, for tests that build their own trees."""
    return write_files
