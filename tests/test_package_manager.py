"""Unit tests for the package-manager abstraction (nextra.package_manager).

Tests cover:
- install verb / dev flag / husky init command per kind
- install_command and run_script_command argv
- install_dependencies (no-op on empty, argv, cwd, failures)
- run (InstallError on non-zero exit or missing executable)
- merge_into_manifest (shallow merge, removal, order, formatting, errors)
- Concurrent merges do not lose updates
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from nextra.errors import InstallError, ManifestIOError
from nextra.options import PackageManagerKind
from nextra.package_manager import PackageManager


def _write_manifest(directory: Path, data: dict[str, Any]) -> Path:
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------


class TestCommandTable:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("kind", "verb", "flag"),
        [
            ("npm", "install", "--save-dev"),
            ("yarn", "add", "--dev"),
            ("pnpm", "add", "--save-dev"),
            ("bun", "add", "--dev"),
        ],
    )
    def test_verb_and_dev_flag(self, tmp_path: Path, kind: str, verb: str, flag: str):
        pm = PackageManager(kind, tmp_path)
        assert pm.kind is PackageManagerKind(kind)
        assert pm.install_verb == verb
        assert pm.dev_flag == flag

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("kind", "command"),
        [
            ("npm", "npx husky-init && npm install"),
            ("yarn", "yarn dlx husky-init --yarn2 && yarn"),
            ("pnpm", "pnpm dlx husky-init && pnpm install"),
            ("bun", "bunx husky-init && bun install"),
        ],
    )
    def test_husky_init_command(self, tmp_path: Path, kind: str, command: str):
        assert PackageManager(kind, tmp_path).husky_init_command == command

    @pytest.mark.unit
    def test_install_command(self, tmp_path: Path):
        pm = PackageManager(PackageManagerKind.YARN, tmp_path)
        assert pm.install_command(["jest", "ts-jest"]) == ["yarn", "add", "jest", "ts-jest"]
        assert pm.install_command(["jest"], dev=True) == ["yarn", "add", "jest", "--dev"]

    @pytest.mark.unit
    def test_run_script_command(self, tmp_path: Path):
        assert PackageManager("pnpm", tmp_path).run_script_command("format:write") == [
            "pnpm",
            "run",
            "format:write",
        ]

    @pytest.mark.unit
    def test_invalid_kind(self, tmp_path: Path):
        with pytest.raises(ValueError):
            PackageManager("deno", tmp_path)

    @pytest.mark.unit
    def test_manifest_path(self, tmp_path: Path):
        assert PackageManager("npm", tmp_path).manifest_path == tmp_path / "package.json"


# ---------------------------------------------------------------------------
# Subprocess operations
# ---------------------------------------------------------------------------


class TestInstallDependencies:
    async def test_empty_is_noop(self, tmp_path: Path):
        pm = PackageManager("npm", tmp_path)
        with patch("nextra.package_manager.run_command", new_callable=AsyncMock) as mock_run:
            await pm.install_dependencies([])
            await pm.install_dependencies([], dev=True)
        mock_run.assert_not_called()

    async def test_runs_in_project_dir(self, tmp_path: Path):
        pm = PackageManager("npm", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            return_value=(0, "added 2 packages", ""),
        ) as mock_run:
            await pm.install_dependencies(["prettier", "husky"], dev=True)

        mock_run.assert_awaited_once_with(
            ["npm", "install", "prettier", "husky", "--save-dev"], cwd=tmp_path
        )

    async def test_failure_raises_install_error(self, tmp_path: Path):
        pm = PackageManager("pnpm", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            return_value=(1, "", "ERR_PNPM_FETCH_404"),
        ):
            with pytest.raises(InstallError) as exc_info:
                await pm.install_dependencies(["no-such-package"])

        err = exc_info.value
        assert err.exit_code == 1
        assert err.stderr == "ERR_PNPM_FETCH_404"
        assert err.command == "pnpm add no-such-package"

    async def test_missing_executable(self, tmp_path: Path):
        pm = PackageManager("bun", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError("bun"),
        ):
            with pytest.raises(InstallError, match="Could not start"):
                await pm.install_dependencies(["swr"])


class TestRun:
    async def test_returns_stdout(self, tmp_path: Path):
        pm = PackageManager("npm", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            return_value=(0, "Initialized empty Git repository", ""),
        ):
            assert await pm.run(["git", "init"]) == "Initialized empty Git repository"

    async def test_run_script(self, tmp_path: Path):
        pm = PackageManager("yarn", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            return_value=(0, "", ""),
        ) as mock_run:
            await pm.run_script("format:write")
        mock_run.assert_awaited_once_with(["yarn", "run", "format:write"], cwd=tmp_path)

    async def test_shell_string_failure(self, tmp_path: Path):
        pm = PackageManager("npm", tmp_path)
        with patch(
            "nextra.package_manager.run_command",
            new_callable=AsyncMock,
            return_value=(127, "", "npx: not found"),
        ):
            with pytest.raises(InstallError) as exc_info:
                await pm.run(pm.husky_init_command)
        assert exc_info.value.command == "npx husky-init && npm install"
        assert exc_info.value.exit_code == 127


# ---------------------------------------------------------------------------
# Manifest merging
# ---------------------------------------------------------------------------


class TestMergeIntoManifest:
    async def test_shallow_merge_keeps_existing(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        manifest = await pm.merge_into_manifest("scripts", {"format:write": "prettier --write ."})

        assert manifest["scripts"]["dev"] == "next dev"
        assert manifest["scripts"]["format:write"] == "prettier --write ."
        on_disk = json.loads((next_app_dir / "package.json").read_text(encoding="utf-8"))
        assert on_disk == manifest

    async def test_overwrites_and_removes(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        manifest = await pm.merge_into_manifest(
            "scripts", {"build": "next build --debug"}, remove=("lint",)
        )
        assert manifest["scripts"]["build"] == "next build --debug"
        assert "lint" not in manifest["scripts"]

    async def test_key_order_preserved(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        manifest = await pm.merge_into_manifest("scripts", {"build": "x", "e2e": "cypress run"})

        assert list(manifest) == ["name", "version", "private", "scripts", "dependencies"]
        assert list(manifest["scripts"]) == ["dev", "build", "start", "lint", "e2e"]

    async def test_new_key_appended(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        manifest = await pm.merge_into_manifest("lint-staged", {"**/*.js?(x)": ["eslint ."]})
        assert list(manifest)[-1] == "lint-staged"

    async def test_non_object_value_replaced(self, tmp_path: Path):
        _write_manifest(tmp_path, {"name": "x", "scripts": "oops"})
        pm = PackageManager("npm", tmp_path)
        manifest = await pm.merge_into_manifest("scripts", {"test": "jest"})
        assert manifest["scripts"] == {"test": "jest"}

    async def test_written_with_two_space_indent_and_newline(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        await pm.merge_into_manifest("scripts", {"test": "jest"})
        text = (next_app_dir / "package.json").read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert '\n  "name": "test-project",' in text

    async def test_explicit_manifest_path(self, tmp_path: Path):
        other = tmp_path / "nested"
        other.mkdir()
        path = _write_manifest(other, {"name": "nested"})
        pm = PackageManager("npm", tmp_path)
        await pm.merge_into_manifest("scripts", {"a": "b"}, manifest_path=path)
        assert json.loads(path.read_text(encoding="utf-8"))["scripts"] == {"a": "b"}

    async def test_missing_manifest(self, tmp_path: Path):
        pm = PackageManager("npm", tmp_path)
        with pytest.raises(ManifestIOError, match="not found") as exc_info:
            await pm.merge_into_manifest("scripts", {"a": "b"})
        assert exc_info.value.path == str(tmp_path / "package.json")

    async def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
        pm = PackageManager("npm", tmp_path)
        with pytest.raises(ManifestIOError, match="not a valid JSON object"):
            await pm.merge_into_manifest("scripts", {"a": "b"})

    async def test_top_level_array(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("[]", encoding="utf-8")
        pm = PackageManager("npm", tmp_path)
        with pytest.raises(ManifestIOError):
            await pm.merge_into_manifest("scripts", {"a": "b"})

    async def test_concurrent_merges_keep_both(self, next_app_dir: Path):
        pm = PackageManager("npm", next_app_dir)
        await asyncio.gather(
            pm.merge_into_manifest("scripts", {"test": "jest"}),
            pm.merge_into_manifest("lint-staged", {"**/*.js?(x)": ["jest --ci"]}),
            pm.merge_into_manifest("scripts", {"e2e": "cypress run"}),
        )
        manifest = json.loads((next_app_dir / "package.json").read_text(encoding="utf-8"))
        assert manifest["scripts"]["test"] == "jest"
        assert manifest["scripts"]["e2e"] == "cypress run"
        assert manifest["lint-staged"] == {"**/*.js?(x)": ["jest --ci"]}
