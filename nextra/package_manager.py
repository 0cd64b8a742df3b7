"""Package-manager abstraction.

Normalises the differences between npm, yarn, pnpm and bun: the verb used to
add packages, the flag marking a devDependency, and the husky bootstrap
command.  Also owns the read-modify-write of ``package.json``; merges are
serialised through an ``asyncio.Lock`` so concurrent callers never lose
each other's updates.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from .errors import InstallError, ManifestIOError
from .options import PackageManagerKind
from .utils import dump_json, format_command, load_json, run_command, write_text

_HUSKY_INIT_COMMANDS: dict[PackageManagerKind, str] = {
    PackageManagerKind.NPM: "npx husky-init && npm install",
    PackageManagerKind.YARN: "yarn dlx husky-init --yarn2 && yarn",
    PackageManagerKind.PNPM: "pnpm dlx husky-init && pnpm install",
    PackageManagerKind.BUN: "bunx husky-init && bun install",
}


class PackageManager:
    """Wraps one package-manager kind operating on one project directory."""

    def __init__(self, kind: PackageManagerKind | str, cwd: str | Path) -> None:
        self._kind = PackageManagerKind(kind)
        self.cwd = Path(cwd)
        self._manifest_lock = asyncio.Lock()

    # -- Command table -----------------------------------------------------

    @property
    def kind(self) -> PackageManagerKind:
        return self._kind

    @property
    def install_verb(self) -> str:
        """``install`` for npm, ``add`` for everything else."""
        return "install" if self._kind is PackageManagerKind.NPM else "add"

    @property
    def dev_flag(self) -> str:
        """``--dev`` for yarn and bun, ``--save-dev`` for npm and pnpm."""
        if self._kind in (PackageManagerKind.YARN, PackageManagerKind.BUN):
            return "--dev"
        return "--save-dev"

    @property
    def husky_init_command(self) -> str:
        return _HUSKY_INIT_COMMANDS[self._kind]

    def install_command(self, names: Sequence[str], dev: bool = False) -> list[str]:
        """Build the argv used to install *names*."""
        cmd = [self._kind.value, self.install_verb, *names]
        if dev:
            cmd.append(self.dev_flag)
        return cmd

    def run_script_command(self, script: str) -> list[str]:
        return [self._kind.value, "run", script]

    # -- Subprocess operations ---------------------------------------------

    async def install_dependencies(self, names: Sequence[str], dev: bool = False) -> None:
        """Install *names* into the project; a no-op when *names* is empty.

        Raises:
            InstallError: If the package manager exits non-zero or cannot be
                started.
        """
        if not names:
            return
        await self.run(self.install_command(names, dev))

    async def run_script(self, script: str) -> None:
        """Run a ``package.json`` script, e.g. ``format:write``."""
        await self.run(self.run_script_command(script))

    async def run(self, cmd: str | list[str]) -> str:
        """Run *cmd* in the project directory and return its stdout.

        Raises:
            InstallError: On a non-zero exit status or a missing executable.
        """
        try:
            returncode, stdout, stderr = await run_command(cmd, cwd=self.cwd)
        except OSError as exc:
            raise InstallError(
                f"Could not start '{format_command(cmd)}': {exc}",
                command=format_command(cmd),
            ) from exc
        if returncode != 0:
            raise InstallError(
                f"'{format_command(cmd)}' exited with code {returncode}: {stderr}",
                command=format_command(cmd),
                exit_code=returncode,
                stderr=stderr,
            )
        return stdout

    # -- Manifest ----------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        return self.cwd / "package.json"

    async def merge_into_manifest(
        self,
        key: str,
        values: dict[str, Any],
        *,
        remove: Iterable[str] = (),
        manifest_path: Path | None = None,
    ) -> dict[str, Any]:
        """Shallow-merge *values* into the object stored under *key*.

        Existing entries are kept unless *values* overwrites them, and keys
        listed in *remove* are dropped first.  Key order of the original file
        is preserved; new keys are appended.  The file is rewritten with
        two-space indentation and a trailing newline.

        Returns:
            The full manifest as written.

        Raises:
            ManifestIOError: If the manifest is missing, not a JSON object,
                or cannot be written.
        """
        path = manifest_path or self.manifest_path
        async with self._manifest_lock:
            manifest = await asyncio.to_thread(_read_manifest, path)

            existing = manifest.get(key)
            merged: dict[str, Any] = dict(existing) if isinstance(existing, dict) else {}
            for name in remove:
                merged.pop(name, None)
            merged.update(values)
            manifest[key] = merged

            try:
                await asyncio.to_thread(write_text, path, dump_json(manifest))
            except OSError as exc:
                raise ManifestIOError(f"Cannot write manifest {path}: {exc}", path=str(path)) from exc
            return manifest


def _read_manifest(path: Path) -> dict[str, Any]:
    try:
        return load_json(path)
    except FileNotFoundError as exc:
        raise ManifestIOError(f"Manifest not found: {path}", path=str(path)) from exc
    except (json.JSONDecodeError, ValueError) as exc:
        raise ManifestIOError(f"Manifest is not a valid JSON object: {path}: {exc}", path=str(path)) from exc
    except OSError as exc:
        raise ManifestIOError(f"Cannot read manifest {path}: {exc}", path=str(path)) from exc
