"""Shared pytest fixtures for the Nextra test suite.

Provides reusable fixtures for:
- Temporary project directories
- A fake ``create-next-app`` output tree
- Option sets with every feature on / off
- Settings pointing at the packaged assets
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from nextra.config import Settings
from nextra.options import OptionalDependency, Options, PackageManagerKind


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    """A ``package.json`` as ``create-next-app`` writes it."""
    return {
        "name": "test-project",
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": {"next": "14.0.0", "react": "^18", "react-dom": "^18"},
    }


@pytest.fixture
def next_app_dir(tmp_project_dir: Path, sample_manifest: dict[str, Any]) -> Path:
    """A TypeScript, app-router, src-dir project without Tailwind."""
    (tmp_project_dir / "package.json").write_text(
        json.dumps(sample_manifest, indent=2) + "\n", encoding="utf-8"
    )
    (tmp_project_dir / "tsconfig.json").write_text("{}\n", encoding="utf-8")
    (tmp_project_dir / ".eslintrc.json").write_text(
        '{"extends": "next/core-web-vitals"}\n', encoding="utf-8"
    )
    (tmp_project_dir / ".gitignore").write_text("node_modules\n", encoding="utf-8")
    (tmp_project_dir / "src" / "app").mkdir(parents=True)
    yield tmp_project_dir


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@pytest.fixture
def optional_dependencies() -> tuple[OptionalDependency, ...]:
    return (
        OptionalDependency(
            module="zustand",
            github="https://github.com/pmndrs/zustand",
            description="Bear necessities for state management in React",
        ),
        OptionalDependency(
            module="@tanstack/react-query-devtools",
            save_dev=True,
            github="https://github.com/TanStack/query",
            description="Devtools for React Query",
        ),
    )


@pytest.fixture
def all_options(optional_dependencies: tuple[OptionalDependency, ...]) -> Options:
    """Every feature enabled, npm, with optional dependencies and env files."""
    return Options(
        package_manager=PackageManagerKind.NPM,
        typescript=True,
        eslint=True,
        prettier=True,
        jest=True,
        react_testing_library=True,
        lint_staged=True,
        husky=True,
        storybook=True,
        cypress=True,
        docker=True,
        image_optimisation=True,
        optional_dependencies=optional_dependencies,
        dot_env_files=(".env", ".env.local"),
    )


@pytest.fixture
def no_options() -> Options:
    """Every feature disabled."""
    return Options()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the packaged templates and markdown fragments."""
    return Settings()


# ---------------------------------------------------------------------------
# Subprocess Mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
