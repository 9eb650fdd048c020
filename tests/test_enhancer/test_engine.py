"""End-to-end tests for the enhancement engine and its summary report."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stackstart.enhancer import EnhancementEngine, enhance_project
from stackstart.enhancer.models import Priority


pytestmark = pytest.mark.unit


class TestNodeProject:
    @pytest.mark.asyncio
    async def test_applies_every_recommendation(self, node_project: Path):
        summary = await EnhancementEngine().run(node_project, "node")

        assert summary.succeeded
        assert len(summary.applied) == 9
        assert all(item.status == "applied" for item in summary.attempted)
        for rel_path in (
            "src/utils/logger.js",
            "src/utils/errorHandler.js",
            "src/utils/validation.js",
            "src/utils/swagger.js",
            "src/utils/database.js",
            "src/utils/cache.js",
            "src/middleware/security.js",
            "jest.config.js",
            ".env.example",
            ".gitignore",
        ):
            assert (node_project / rel_path).is_file(), rel_path
        assert (node_project / "logs").is_dir()

    @pytest.mark.asyncio
    async def test_manifest_is_extended_not_replaced(self, node_project: Path):
        await EnhancementEngine().run(node_project, "node")
        manifest = json.loads((node_project / "package.json").read_text(encoding="utf-8"))

        assert manifest["name"] == "sample-api"
        assert manifest["engines"] == {"node": ">=18"}
        assert manifest["dependencies"]["express"] == "^4.18.2"
        for package in ("winston", "dotenv", "joi", "helmet", "cors", "node-cache"):
            assert package in manifest["dependencies"]
        assert manifest["devDependencies"]["jest"] == "^29.7.0"
        assert "supertest" in manifest["devDependencies"]
        assert manifest["scripts"]["test:coverage"] == "jest --coverage"

    @pytest.mark.asyncio
    async def test_report_is_written(self, node_project: Path):
        summary = await EnhancementEngine().run(node_project, "node")
        report = (node_project / "AI_ENHANCEMENTS.md").read_text(encoding="utf-8")

        assert summary.report_path == str(node_project.resolve() / "AI_ENHANCEMENTS.md")
        assert report.startswith("# AI Enhancement Summary")
        assert report.index("### High priority") < report.index("### Medium priority")
        assert report.index("### Medium priority") < report.index("### Low priority")
        assert "- **Add security middleware (helmet, cors)** (dependency)" in report
        assert "- **Template**: node" in report
        assert "- Tests: Present" in report
        assert "- Logging: Missing" in report
        assert "## Failure" not in report
        assert "`npm install`" in report

    @pytest.mark.asyncio
    async def test_summary_records_pre_run_counts(self, node_project: Path):
        summary = await EnhancementEngine().run(node_project, "node")
        assert summary.dependency_count == 1
        assert summary.dev_dependency_count == 1
        assert summary.file_count == 3
        assert summary.features.has_tests is True

    @pytest.mark.asyncio
    async def test_second_run_reports_fewer_gaps(self, node_project: Path):
        await EnhancementEngine().run(node_project, "node")
        summary = await EnhancementEngine().run(node_project, "node")
        descriptions = [item.description for item in summary.attempted]
        assert "Add structured logging with Winston" not in descriptions
        assert "Add input validation with Joi" not in descriptions


class TestOtherFamilies:
    @pytest.mark.asyncio
    async def test_python_project(self, python_project: Path):
        summary = await enhance_project(python_project, "python")

        assert summary.succeeded
        assert (python_project / "src/utils/logger.py").is_file()
        assert (python_project / "mypy.ini").is_file()
        requirements = (python_project / "requirements.txt").read_text(encoding="utf-8")
        assert requirements == "flask==3.0.0\nmypy==1.7.1\n"
        report = (python_project / "AI_ENHANCEMENTS.md").read_text(encoding="utf-8")
        assert "pip install -r requirements.txt" in report

    @pytest.mark.asyncio
    async def test_react_low_priority_runs_last(self, react_project: Path):
        summary = await EnhancementEngine().run(react_project, "react")
        assert summary.succeeded
        grouped = summary.by_priority()
        assert [item.description for item in grouped[Priority.LOW]] == [
            "Add custom React hooks for common patterns"
        ]
        assert (react_project / "src/hooks/useApi.js").is_file()

    @pytest.mark.asyncio
    async def test_custom_summary_filename(self, react_project: Path):
        summary = await EnhancementEngine(summary_filename="ENHANCEMENTS.md").run(
            react_project, "react"
        )
        assert summary.report_path is not None
        assert (react_project / "ENHANCEMENTS.md").is_file()
        assert not (react_project / "AI_ENHANCEMENTS.md").exists()


class TestGracefulDegradation:
    @pytest.mark.asyncio
    async def test_missing_project_is_reported_not_raised(self, tmp_path: Path):
        summary = await EnhancementEngine().run(tmp_path / "missing", "node")
        assert not summary.succeeded
        assert summary.failure is not None
        assert summary.failure.description == "Project analysis"
        assert summary.attempted == []
        assert summary.report_path is None

    @pytest.mark.asyncio
    async def test_malformed_manifest_stops_the_run(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{ broken", encoding="utf-8")
        summary = await EnhancementEngine().run(tmp_path, "node")

        assert not summary.succeeded
        assert summary.failure is not None
        assert summary.failure.description == "Add structured logging with Winston"
        assert "ManifestError" in summary.failure.error
        assert summary.applied == []
        statuses = {item.description: item.status for item in summary.attempted}
        assert statuses["Add structured logging with Winston"] == "failed"
        assert statuses["Add comprehensive error handling"] == "not run"

        report = (tmp_path / "AI_ENHANCEMENTS.md").read_text(encoding="utf-8")
        assert "## Failure" in report
        assert " - not run" in report
        assert (tmp_path / "package.json").read_text(encoding="utf-8") == "{ broken"


class TestPartialFailure:
    """Third of five enhancements fails on disk; the first two stay applied."""

    @pytest.fixture
    def five_gap_project(self, tmp_path: Path, write_tree) -> Path:
        root = tmp_path / "dashboard"
        manifest = {
            "name": "dashboard",
            "dependencies": {"react": "^18.2.0", "pino": "^8.0.0", "zod": "^3.22.0"},
            "devDependencies": {
                "vitest": "^1.0.0",
                "eslint": "^8.0.0",
                "prettier": "^3.0.0",
                "typescript": "^5.0.0",
            },
        }
        write_tree(
            root,
            {
                "package.json": json.dumps(manifest, indent=2),
                "README.md": "# dashboard\n",
                "docs/openapi.yaml": "openapi: 3.0.0\n",
                "src/App.jsx": "try { render(); } catch (e) { report(e); }\n",
            },
        )
        # a directory where the performance utilities file should go
        (root / "src" / "utils" / "performance.js").mkdir(parents=True)
        return root

    @pytest.mark.asyncio
    async def test_mid_run_failure_is_contained(self, five_gap_project: Path):
        summary = await EnhancementEngine().run(five_gap_project, "react")

        assert [(item.description, item.status) for item in summary.attempted] == [
            ("Add environment configuration with dotenv", "applied"),
            ("Enhance testing configuration with coverage reporting", "applied"),
            ("Add React performance optimization utilities", "failed"),
            ("Add React Router for navigation", "not run"),
            ("Add custom React hooks for common patterns", "not run"),
        ]
        assert len(summary.attempted) == 5
        assert summary.failure is not None
        assert summary.failure.description == "Add React performance optimization utilities"

        assert (five_gap_project / ".env.example").is_file()
        assert (five_gap_project / "jest.config.js").is_file()
        manifest = json.loads((five_gap_project / "package.json").read_text(encoding="utf-8"))
        assert manifest["dependencies"]["dotenv"] == "^16.3.1"
        assert manifest["scripts"]["test:coverage"] == "jest --coverage"
        assert "react-router-dom" not in manifest["dependencies"]
        assert not (five_gap_project / "src/hooks/useApi.js").exists()

        report = (five_gap_project / "AI_ENHANCEMENTS.md").read_text(encoding="utf-8")
        assert "## Failure" in report
