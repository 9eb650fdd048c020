"""Main scaffolding orchestrator.

Copies a project template into a new directory, adds deployment
configuration and an optional demo, installs dependencies, initialises git and
optionally hands the result to the enhancement engine.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from jinja2 import TemplateError

from ..config import Config, ScaffoldOptions, TemplateFamily
from ..enhancer import EnhancementEngine
from ..rendering import TemplateRenderer
from ..utils import console, print_step_header, print_success, print_warning, run_command
from .demo_gen import DemoGenerator
from .deploy_gen import DeploymentGenerator


# Never copied out of a template directory
_COPY_IGNORE = shutil.ignore_patterns("node_modules", ".git")


class ScaffoldError(Exception):
    """Raised when a scaffolding step cannot complete."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(message)


def copy_tree(source: Path, destination: Path) -> None:
    """Recursively copy *source* into *destination*, preserving file modes."""
    shutil.copytree(
        source,
        destination,
        ignore=_COPY_IGNORE,
        copy_function=shutil.copy2,
        dirs_exist_ok=True,
    )


def install_commands(template: TemplateFamily) -> list[tuple[list[str], str]]:
    """Return ``(argv, relative cwd)`` pairs that install a project's dependencies."""
    if template == TemplateFamily.FULL_STACK:
        return [(["npm", "install"], "server"), (["npm", "install"], "client")]
    if template == TemplateFamily.PYTHON:
        return [(["pip", "install", "-r", "requirements.txt"], ".")]
    return [(["npm", "install"], ".")]


class ProjectGenerator:
    """Creates a project from the templates under ``config.templates_dir``.

    Usage::

        generator = ProjectGenerator(Config.from_env())
        root = await generator.generate("my-app", ScaffoldOptions(template="react"))
    """

    def __init__(self, config: Config, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.deploy_gen = DeploymentGenerator(self.renderer)
        self.demo_gen = DemoGenerator(self.renderer)

    # -- Public API --------------------------------------------------------

    async def generate(self, project_name: str, options: ScaffoldOptions) -> Path:
        """Scaffold *project_name* and return the absolute project root.

        Raises:
            ScaffoldError: If the target exists, a template is missing, template
                files or the deployment config cannot be written (the partial
                project is removed) or dependency installation fails.
        """
        project_root = self.config.project_path(project_name)
        if project_root.exists():
            raise ScaffoldError("prepare", f"Directory {project_name} already exists.")

        family = options.template

        # 1. Copy template files
        print_step_header("Generating project structure")
        try:
            await self._copy_templates(project_root, family)
        except OSError as exc:
            await self._discard(project_root)
            raise ScaffoldError("copy", f"Could not copy template files: {exc}") from exc
        print_success("Project files generated")

        # 2. Deployment configuration
        try:
            deploy_path = await self.deploy_gen.generate(
                project_root, project_name, options.deploy_target, family
            )
        except (OSError, TemplateError) as exc:
            await self._discard(project_root)
            raise ScaffoldError(
                "deploy", f"Could not write deployment configuration: {exc}"
            ) from exc
        console.print(f"  [dim]Deployment config written to {deploy_path.name}[/dim]")

        # 3. Demo application
        if options.with_demo:
            await self._add_demo(project_root, project_name, family)

        # 4. Dependencies
        if options.skip_install:
            console.print("  [dim]Skipping dependency installation[/dim]")
        else:
            print_step_header("Installing dependencies")
            await self._install_dependencies(project_root, family)

        # 5. Git
        if not options.skip_git:
            await self._init_git(project_root)

        # 6. Enhancements
        if options.ai_enhanced:
            print_step_header("Enhancing project", color="magenta")
            engine = EnhancementEngine(
                renderer=self.renderer,
                summary_filename=self.config.summary_filename,
            )
            await engine.run(project_root, family)

        return project_root

    # -- Steps -------------------------------------------------------------

    async def _copy_templates(self, project_root: Path, family: TemplateFamily) -> None:
        if family == TemplateFamily.FULL_STACK:
            server = self.config.template_path(TemplateFamily.NODE)
            client = self.config.template_path(TemplateFamily.REACT)
            skeleton = self.config.template_path(TemplateFamily.FULL_STACK)
            if not server.is_dir() or not client.is_dir():
                raise ScaffoldError(
                    "copy",
                    'Full-stack template requires both "node" and "react" templates.',
                )
            await asyncio.to_thread(project_root.mkdir, parents=True)
            if skeleton.is_dir():
                await asyncio.to_thread(copy_tree, skeleton, project_root)
            await asyncio.to_thread(copy_tree, server, project_root / "server")
            await asyncio.to_thread(copy_tree, client, project_root / "client")
            return

        source = self.config.template_path(family)
        if not source.is_dir():
            raise ScaffoldError(
                "copy", f"Template '{family.value}' not found at {source.resolve()}"
            )
        await asyncio.to_thread(project_root.mkdir, parents=True)
        await asyncio.to_thread(copy_tree, source, project_root)

    async def _discard(self, project_root: Path) -> None:
        """Remove a partially generated project so the command can be re-run."""
        await asyncio.to_thread(shutil.rmtree, project_root, ignore_errors=True)

    async def _add_demo(
        self, project_root: Path, project_name: str, family: TemplateFamily
    ) -> None:
        try:
            await self.demo_gen.generate(project_root, project_name, family)
        except (OSError, TemplateError) as exc:
            print_warning(f"Failed to add demo application: {exc}")
            print_warning("Continuing without demo application...")
            return
        print_success("Demo application added")

    async def _install_dependencies(self, project_root: Path, family: TemplateFamily) -> None:
        for argv, subdir in install_commands(family):
            cwd = project_root / subdir
            label = " ".join(argv)
            with console.status(f"[bold cyan]Running {label} in {subdir}..."):
                rc, _, stderr = await run_command(
                    argv, cwd=cwd, timeout=self.config.install_timeout
                )
            if rc != 0:
                raise ScaffoldError(
                    "install",
                    f"Dependency installation failed ({label} in {subdir}): {stderr}",
                )
            print_success(f"Dependencies installed ({subdir})")

    async def _init_git(self, project_root: Path) -> bool:
        """Initialise a repository with one commit; failure is only a warning."""
        steps = (
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", self.config.git_commit_message],
        )
        for argv in steps:
            rc, _, stderr = await run_command(argv, cwd=project_root, timeout=60)
            if rc != 0:
                print_warning(f"Git initialisation failed: {stderr or ' '.join(argv)}")
                return False
        print_success("Git repository initialised")
        return True
