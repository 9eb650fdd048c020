"""Command-line interface: ``stackstart create`` and ``stackstart enhance``."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from rich.panel import Panel

from . import __version__
from .config import Config, DeployTarget, ScaffoldOptions, TemplateFamily
from .enhancer import EnhancementEngine, print_report
from .scaffolder import ProjectGenerator, ScaffoldError
from .scaffolder.generator import install_commands
from .utils import console, format_duration, print_summary_table, save_json

TEMPLATE_CHOICES = [family.value for family in TemplateFamily]
DEPLOY_CHOICES = [target.value for target in DeployTarget]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackstart",
        description="Scaffold production-ready repositories in seconds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stackstart create my-api\n"
            "  stackstart create my-app -t full-stack -d netlify --ai-enhanced\n"
            "  stackstart enhance ./my-api -t node\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a new project from a template")
    create.add_argument("project_name", metavar="project-name", help="Name of the project")
    create.add_argument(
        "--template", "-t",
        choices=TEMPLATE_CHOICES,
        default=TemplateFamily.NODE.value,
        help="Project template (default: node)",
    )
    create.add_argument(
        "--deploy-target", "-d",
        choices=DEPLOY_CHOICES,
        default=DeployTarget.VERCEL.value,
        help="Deployment target (default: vercel)",
    )
    create.add_argument(
        "--ai-enhanced",
        action="store_true",
        help="Analyse the generated project and apply recommended enhancements",
    )
    create.add_argument(
        "--with-demo", action="store_true", help="Include a sample app with the scaffold"
    )
    create.add_argument(
        "--skip-install", action="store_true", help="Do not install dependencies"
    )
    create.add_argument(
        "--skip-git", action="store_true", help="Do not initialise a git repository"
    )
    create.add_argument(
        "--templates-dir",
        default=None,
        help="Directory holding the project templates (default: ./templates)",
    )
    create.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the project is created in (default: current directory)",
    )

    enhance = subparsers.add_parser(
        "enhance", help="Analyse an existing project and apply recommended enhancements"
    )
    enhance.add_argument("project_path", metavar="project-path", help="Project directory")
    enhance.add_argument(
        "--template", "-t",
        choices=TEMPLATE_CHOICES,
        default=TemplateFamily.NODE.value,
        help="Template family of the project (default: node)",
    )
    enhance.add_argument(
        "--json",
        dest="json_path",
        default=None,
        metavar="PATH",
        help="Also write the enhancement summary as JSON to PATH",
    )
    return parser


def _create(args: argparse.Namespace) -> int:
    config = Config.from_env()
    if args.templates_dir:
        config.templates_dir = Path(args.templates_dir)
    if args.output:
        config.output_dir = Path(args.output)

    options = ScaffoldOptions(
        template=args.template,
        deploy_target=args.deploy_target,
        ai_enhanced=args.ai_enhanced,
        with_demo=args.with_demo,
        skip_install=args.skip_install,
        skip_git=args.skip_git,
    )

    console.print(
        Panel(
            f"[bold]Creating project [cyan]{args.project_name}[/cyan][/bold]\n"
            f"Template: {options.template.value}\n"
            f"Deploy target: {options.deploy_target.value}",
            title="StackStart",
            border_style="blue",
        )
    )

    generator = ProjectGenerator(config)
    start = time.monotonic()
    try:
        project_root = asyncio.run(generator.generate(args.project_name, options))
    except ScaffoldError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        console.print("[bold red]Failed to create project.[/bold red]")
        return 1

    print_summary_table(
        {
            "Project": str(project_root),
            "Template": options.template.value,
            "Deploy target": options.deploy_target.value,
            "Duration": format_duration(time.monotonic() - start),
        },
        title="Project created",
    )
    console.print(f"[bold green]Project {args.project_name} created successfully![/bold green]")
    console.print()
    console.print("[bold]Next steps:[/bold]")
    for step in next_steps(project_root, options):
        console.print(f"  {step}")
    return 0


def next_steps(project_root: Path, options: ScaffoldOptions) -> list[str]:
    """Shell commands suggested after a successful ``create``."""
    steps = [f"cd {project_root}"]
    if options.skip_install:
        for argv, subdir in install_commands(options.template):
            command = " ".join(argv)
            steps.append(command if subdir == "." else f"(cd {subdir} && {command})")
    if options.skip_git:
        steps.append("git init")
    else:
        steps.append("git remote add origin <your-repo-url>")
        steps.append("git push -u origin main")
    return steps


def _enhance(args: argparse.Namespace) -> int:
    project_path = Path(args.project_path)
    if not project_path.is_dir():
        console.print(f"[bold red]Error:[/bold red] Project directory not found: {project_path}")
        return 1

    config = Config.from_env()
    engine = EnhancementEngine(summary_filename=config.summary_filename)
    summary = asyncio.run(engine.run(project_path, args.template))
    print_report(summary)
    if args.json_path:
        try:
            asyncio.run(save_json(summary.to_payload(), args.json_path))
        except OSError as exc:
            console.print(f"[bold red]Error:[/bold red] Could not write {args.json_path}: {exc}")
            return 1
        console.print(f"Summary written to {args.json_path}")
    return 0 if summary.succeeded else 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``stackstart`` console script."""
    args = build_parser().parse_args(argv)
    handlers = {"create": _create, "enhance": _enhance}
    code = handlers[args.command](args)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
