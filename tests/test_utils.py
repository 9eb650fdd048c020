"""Unit tests for utility functions (stackstart.utils).

Tests cover:
- run_command (success, failure, timeout, cwd, missing executable)
- load_json / dump_json / save_json (use tmp_path)
- ensure_dir / write_text_file
- format_duration
- Rich output helpers
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from stackstart.utils import (
    dump_json,
    ensure_dir,
    format_duration,
    load_json,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    save_json,
    write_text_file,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_list(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert "hello" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, _ = await run_command([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert returncode == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_timeout(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_executable(self):
        returncode, _, stderr = await run_command(["nonexistent-binary-12345-xyz"])
        assert returncode == 127
        assert "Command not found" in stderr


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJsonIO:
    @pytest.mark.unit
    def test_load_json_dict(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"name": "x"}', encoding="utf-8")
        assert load_json(path) == {"name": "x"}

    @pytest.mark.unit
    def test_load_json_list_wraps_in_dict(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_json(path) == {"_root": [1, 2]}

    @pytest.mark.unit
    def test_load_json_invalid(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_json(path)

    @pytest.mark.unit
    def test_dump_json_matches_npm_layout(self):
        assert dump_json({"a": {"b": "ü"}}) == '{\n  "a": {\n    "b": "ü"\n  }\n}\n'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_json_creates_parents(self, tmp_path: Path):
        path = tmp_path / "a" / "b" / "package.json"
        await save_json({"name": "x"}, path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"name": "x"}
        assert path.read_text(encoding="utf-8").endswith("}\n")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


class TestFileSystem:
    @pytest.mark.unit
    def test_ensure_dir(self, tmp_path: Path):
        created = ensure_dir(tmp_path / "x" / "y")
        assert created.is_dir()
        assert ensure_dir(created) == created

    @pytest.mark.unit
    def test_write_text_file(self, tmp_path: Path):
        path = tmp_path / "deep" / "file.txt"
        write_text_file(path, "content")
        assert path.read_text(encoding="utf-8") == "content"


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0.0s"), (3.7, "3.7s"), (65.2, "1m 5s"), (600, "10m 0s"), (-1, "0.0s")],
    )
    def test_format(self, seconds: float, expected: str):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_helpers_print_through_console(self):
        with patch("stackstart.utils.console") as mock_console:
            print_success("ok")
            print_warning("careful")
            print_error("bad")
            print_step_header("Installing dependencies")
            print_summary_table({"Project": "x"})
        printed = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
        assert "[bold green]✔[/bold green] ok" in printed
        assert "[bold yellow]![/bold yellow] careful" in printed
        assert "[bold red]✖[/bold red] bad" in printed
