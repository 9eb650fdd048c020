"""Deployment configuration for freshly scaffolded projects.

One file is written per target:

- ``vercel``  -> ``vercel.json``
- ``netlify`` -> ``netlify.toml`` (Jinja2 template)
- ``aws``     -> ``serverless.yml`` (JSON is a YAML subset, so it is emitted as JSON)
- ``gcp``     -> ``app.yaml`` (Jinja2 template)
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..config import DeployTarget, TemplateFamily
from ..rendering import TemplateRenderer
from ..utils import dump_json, write_text_file


def vercel_config(template: TemplateFamily) -> dict[str, Any]:
    """Return the ``vercel.json`` document for *template*."""
    if template == TemplateFamily.PYTHON:
        return {
            "version": 2,
            "functions": {"src/main.py": {"runtime": "python3.9"}},
            "routes": [{"src": "/(.*)", "dest": "/src/main.py"}],
        }
    if template == TemplateFamily.FULL_STACK:
        return {
            "version": 2,
            "builds": [
                {"src": "client/package.json", "use": "@vercel/static-build"},
                {"src": "server/package.json", "use": "@vercel/node"},
            ],
            "routes": [
                {"src": "/api/(.*)", "dest": "/server/$1"},
                {"src": "/(.*)", "dest": "/client/$1"},
            ],
        }
    return {
        "version": 2,
        "builds": [{"src": "package.json", "use": "@vercel/node"}],
    }


def serverless_config(project_name: str, template: TemplateFamily) -> dict[str, Any]:
    """Return the Serverless Framework document for an AWS deployment."""
    is_python = template == TemplateFamily.PYTHON
    return {
        "service": project_name,
        "provider": {
            "name": "aws",
            "runtime": "python3.9" if is_python else "nodejs18.x",
            "region": "us-east-1",
        },
        "functions": {
            "api": {
                "handler": "src/main.handler" if is_python else "src/index.handler",
                "events": [{"http": {"path": "/{proxy+}", "method": "ANY"}}],
            }
        },
    }


class DeploymentGenerator:
    """Writes the hosting-provider configuration for a project."""

    # Target -> output file name
    OUTPUT_FILES: dict[DeployTarget, str] = {
        DeployTarget.VERCEL: "vercel.json",
        DeployTarget.NETLIFY: "netlify.toml",
        DeployTarget.AWS: "serverless.yml",
        DeployTarget.GCP: "app.yaml",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate(
        self,
        project_root: Path,
        project_name: str,
        target: DeployTarget | str,
        template: TemplateFamily | str,
    ) -> Path:
        """Write the config for *target* into *project_root* and return its path."""
        target = DeployTarget(target)
        family = TemplateFamily(template)
        output_path = project_root / self.OUTPUT_FILES[target]

        if target == DeployTarget.VERCEL:
            content = dump_json(vercel_config(family))
        elif target == DeployTarget.AWS:
            content = dump_json(serverless_config(project_name, family))
        else:
            template_name = f"deploy/{self.OUTPUT_FILES[target]}.j2"
            return await self.renderer.render_to_file(
                template_name, output_path, {"template": family.value}
            )

        await asyncio.to_thread(write_text_file, output_path, content)
        return output_path
