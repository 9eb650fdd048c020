"""Shared utility functions for StackStart.

Provides async command execution, JSON manifest I/O, file-system helpers and
Rich-based console reporting.  The scaffolder and the enhancement engine both
report progress exclusively through the module-level ``console``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    argv: list[str],
    cwd: str | Path | None = None,
    timeout: int = 600,
) -> tuple[int, str, str]:
    """Run an installer or git command in a freshly scaffolded project.

    The command is executed directly (never through a shell) with both
    output streams captured.  Returns ``(returncode, stdout, stderr)``.  A
    missing executable is reported as returncode ``127`` and a command still
    running after *timeout* seconds is killed and reported as ``-1``.
    """
    label = " ".join(argv)
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {argv[0]}")

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"{label} timed out after {timeout}s")

    return (
        process.returncode or 0,
        out.decode("utf-8", errors="replace").strip(),
        err.decode("utf-8", errors="replace").strip(),
    )


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* the way npm writes ``package.json`` (2-space indent)."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically and the write runs in a
    worker thread so the event loop is never blocked.
    """
    file_path = Path(path)
    content = dump_json(data)
    await asyncio.to_thread(write_text_file, file_path, content)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def write_text_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write UTF-8 content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step_header(name: str, color: str = "bright_cyan") -> None:
    """Print a full-width rule announcing a scaffolding step."""
    console.print()
    console.print(Rule(f"[bold {color}] {name} [/bold {color}]", style=color))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


_STATUS_MARKS = {"success": ("green", "✔"), "warning": ("yellow", "!"), "error": ("red", "✖")}


def _print_status(kind: str, message: str) -> None:
    colour, mark = _STATUS_MARKS[kind]
    console.print(f"[bold {colour}]{mark}[/bold {colour}] {message}")


def print_success(message: str) -> None:
    _print_status("success", message)


def print_warning(message: str) -> None:
    _print_status("warning", message)


def print_error(message: str) -> None:
    _print_status("error", message)
