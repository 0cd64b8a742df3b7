"""Nextra pipeline orchestrator.

Runs the scaffolding stages in order against a single project directory:

1. CREATE     -- run ``create-next-app`` and detect what it produced.
2. DERIVE     -- turn the final options into a ``ScaffoldConfig``.
3. TEMPLATES  -- copy template files/directories, create env files.
4. INSTALL    -- install dependencies, bootstrap git and husky.
5. MANIFEST   -- merge scripts and lint-staged rules into ``package.json``.
6. CONFIGS    -- write ESLint, Prettier and pre-commit files.
7. README     -- assemble ``README.md`` from markdown fragments.
8. CLEANUP    -- format the project when Prettier is enabled.

A stage either completes or raises; the first failure stops the run and
nothing already written is rolled back.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.panel import Panel

from .config import Settings
from .derive import ScaffoldConfig, derive_config
from .errors import InstallError, NextraError, StageError, TemplateCopyError
from .options import NextAppFacts, Options
from .package_manager import PackageManager
from .scaffolder.eslint_gen import make_eslintrc
from .scaffolder.husky_gen import make_husky_pre_commit
from .scaffolder.lint_staged_gen import make_lint_staged_config
from .scaffolder.prettier_gen import make_prettierignore, make_prettierrc
from .scaffolder.readme import ReadmeBuilder
from .scaffolder.templates import TemplateRenderer
from .utils import (
    console,
    create_progress,
    dump_json,
    format_duration,
    make_executable,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    run_command,
    write_text,
)

STAGE_NAMES: dict[str, str] = {
    "create": "Create Next.js app",
    "derive": "Derive configuration",
    "templates": "Copy templates",
    "install": "Install dependencies",
    "manifest": "Configure package.json",
    "configs": "Write config files",
    "readme": "Generate README",
    "cleanup": "Clean up",
}

# create-next-app's own ``lint`` script clashes with lint:check / lint:fix.
REMOVED_SCRIPTS: tuple[str, ...] = ("lint",)

ESLINT_SCRIPTS: dict[str, str] = {
    "lint:check": "eslint .",
    "lint:fix": "eslint --fix .",
}

GITIGNORE_ENV_BLOCK = "\n# env files\n.env\n.env.local\n"

# create-next-app asks its own questions on the inherited terminal.
INTERACTIVE_STAGES: frozenset[str] = frozenset({"create"})


# ---------------------------------------------------------------------------
# Next.js app detection
# ---------------------------------------------------------------------------


def detect_next_app_facts(root: Path) -> NextAppFacts:
    """Inspect a freshly created Next.js project."""
    root = Path(root)
    typescript = (root / "tsconfig.json").exists()
    tailwind_config = f"tailwind.config.{'ts' if typescript else 'js'}"
    return NextAppFacts(
        typescript=typescript,
        app_router=not (root / "src" / "pages").exists(),
        eslint=(root / ".eslintrc.json").exists(),
        tailwind=(root / tailwind_config).exists(),
        src_dir=(root / "src").exists(),
    )


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the scaffolding stages for one project.

    Attributes:
        settings: Where templates and fragments live, and output file names.
        options: The options in effect; replaced (never mutated) once the
            created app has been inspected.
        root: The project directory.
        config: The derived plan, available after the DERIVE stage.
        state: Per-run bookkeeping (completed stages, failure, timings).
    """

    def __init__(
        self,
        settings: Settings,
        options: Options,
        project_root: str | Path,
        *,
        skip_create: bool = False,
        package_manager: PackageManager | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.settings = settings
        self.options = options
        self.root = Path(project_root).resolve()
        self.skip_create = skip_create
        self.package_manager = package_manager or PackageManager(options.package_manager, self.root)
        self.renderer = renderer or TemplateRenderer(settings.templates_dir)
        self.readme = ReadmeBuilder(self.renderer, settings.markdown_dir)
        self.config: ScaffoldConfig | None = None
        self.facts: NextAppFacts | None = None
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "project_root": str(self.root),
            "stages_completed": [],
            "failed_stage": None,
            "error": None,
            "success": False,
        }

    # ------------------------------------------------------------------
    # Stage dispatch
    # ------------------------------------------------------------------

    _STAGE_METHODS: dict[str, str] = {
        "create": "create_next_app",
        "derive": "derive",
        "templates": "copy_templates",
        "install": "install_dependencies",
        "manifest": "configure_manifest",
        "configs": "write_config_files",
        "readme": "generate_readme",
        "cleanup": "clean_up",
    }

    async def run(self) -> dict[str, Any]:
        """Execute every stage in order, stopping at the first failure.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and, on failure, ``failed_stage`` and ``error``.
        """
        run_start = time.monotonic()
        console.print(
            Panel(
                f"[bold bright_cyan]Nextra[/bold bright_cyan]\n"
                f"Project         : {self.root}\n"
                f"Package manager : {self.options.package_manager.value}",
                title="[bold]Scaffold Start[/bold]",
                border_style="bright_cyan",
            )
        )

        for number, (stage, method_name) in enumerate(self._STAGE_METHODS.items(), start=1):
            name = STAGE_NAMES[stage]
            print_stage_header(number, name)
            stage_start = time.monotonic()
            try:
                if stage in INTERACTIVE_STAGES:
                    spinner = contextlib.nullcontext()
                else:
                    spinner = create_progress()
                with spinner as progress:
                    if progress is not None:
                        progress.add_task(name, total=None)
                    await getattr(self, method_name)()
            except NextraError as exc:
                error = exc if isinstance(exc, StageError) else StageError(stage, str(exc))
                self._record_failure(stage, error, stage_start)
                break
            except Exception as exc:
                self._record_failure(stage, StageError(stage, f"{type(exc).__name__}: {exc}"), stage_start)
                console.print(f"[dim]{traceback.format_exc()}[/dim]")
                break
            else:
                self.state["stages_completed"].append(stage)
                print_success(f"{name} completed in {format_duration(time.monotonic() - stage_start)}")

        total_elapsed = time.monotonic() - run_start
        self.state["success"] = self.state["failed_stage"] is None
        self.state["total_duration"] = format_duration(total_elapsed)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()

        self._print_final_summary(total_elapsed)
        return self.state

    def _record_failure(self, stage: str, error: StageError, stage_start: float) -> None:
        self.state["failed_stage"] = stage
        self.state["error"] = str(error)
        print_error(
            f"{STAGE_NAMES[stage]} FAILED after "
            f"{format_duration(time.monotonic() - stage_start)}: {error}"
        )

    # ------------------------------------------------------------------
    # 1. CREATE
    # ------------------------------------------------------------------

    async def create_next_app(self) -> NextAppFacts:
        """Run ``create-next-app`` and fold what it produced into the options."""
        if not self.skip_create:
            pm = self.package_manager.kind.value
            cmd = ["npx", self.settings.create_next_app, str(self.root), f"--use-{pm}"]
            console.print(f"  Running [bold]{' '.join(cmd)}[/bold]")
            try:
                returncode, _, stderr = await run_command(cmd, capture=False)
            except OSError as exc:
                raise InstallError(f"Could not start create-next-app: {exc}", command=" ".join(cmd)) from exc
            if returncode != 0:
                raise InstallError(
                    f"create-next-app exited with code {returncode}",
                    command=" ".join(cmd),
                    exit_code=returncode,
                    stderr=stderr,
                )
        elif not self.root.is_dir():
            raise StageError("create", f"Project directory does not exist: {self.root}")

        self.facts = await asyncio.to_thread(detect_next_app_facts, self.root)
        self.options = self.options.with_next_app_facts(self.facts)
        return self.facts

    # ------------------------------------------------------------------
    # 2. DERIVE
    # ------------------------------------------------------------------

    async def derive(self) -> ScaffoldConfig:
        self.config = derive_config(self.options)
        return self.config

    def _require_config(self) -> ScaffoldConfig:
        if self.config is None:
            raise StageError("derive", "Configuration has not been derived yet")
        return self.config

    # ------------------------------------------------------------------
    # 3. TEMPLATES
    # ------------------------------------------------------------------

    async def copy_templates(self) -> list[Path]:
        """Copy template files and directories, then create the env files."""
        config = self._require_config()
        files, directories = await asyncio.gather(
            self.renderer.copy_files(config.config_template_files, self.root),
            self.renderer.copy_directories(config.config_template_directories, self.root),
        )
        await self._create_env_files()
        return [*files, *directories]

    async def _create_env_files(self) -> None:
        names = self.options.dot_env_files
        if not names:
            return
        try:
            await asyncio.gather(*(asyncio.to_thread((self.root / name).touch) for name in names))
            gitignore = self.root / ".gitignore"
            if gitignore.exists():
                await asyncio.to_thread(_append_env_block, gitignore)
        except OSError as exc:
            raise TemplateCopyError(f"Cannot create env files: {exc}", destination=str(self.root)) from exc

    # ------------------------------------------------------------------
    # 4. INSTALL
    # ------------------------------------------------------------------

    async def install_dependencies(self) -> None:
        """Install both dependency lists, then bootstrap git and husky."""
        config = self._require_config()
        # One install at a time: both write the same lockfile.
        await self.package_manager.install_dependencies(config.package_dependencies)
        await self.package_manager.install_dependencies(config.package_dev_dependencies, dev=True)

        if self.options.husky:
            await self.package_manager.run(["git", "init"])
            await self.package_manager.run(self.package_manager.husky_init_command)

    # ------------------------------------------------------------------
    # 5. MANIFEST
    # ------------------------------------------------------------------

    async def configure_manifest(self) -> None:
        """Merge scripts and (if enabled) lint-staged rules into the manifest."""
        config = self._require_config()
        manifest_path = self.root / self.settings.manifest_name

        scripts = dict(config.package_scripts)
        if self.options.eslint:
            scripts.update(ESLINT_SCRIPTS)

        merges = [
            self.package_manager.merge_into_manifest(
                "scripts", scripts, remove=REMOVED_SCRIPTS, manifest_path=manifest_path
            )
        ]
        if self.options.lint_staged:
            merges.append(
                self.package_manager.merge_into_manifest(
                    "lint-staged", self.lint_staged_config(), manifest_path=manifest_path
                )
            )
        await asyncio.gather(*merges)

    def lint_staged_config(self) -> dict[str, list[str]]:
        return make_lint_staged_config(
            eslint=self.options.eslint,
            jest=self.options.jest,
            prettier=self.options.prettier,
            typescript=self.options.typescript,
        )

    # ------------------------------------------------------------------
    # 6. CONFIGS
    # ------------------------------------------------------------------

    async def write_config_files(self) -> list[Path]:
        """Write the generated ESLint, Prettier and pre-commit files."""
        opts = self.options
        writes: list[tuple[Path, str]] = []

        eslintrc = make_eslintrc(
            eslint=opts.eslint,
            react_testing_library=opts.react_testing_library,
            prettier=opts.prettier,
            storybook=opts.storybook,
            typescript=opts.typescript,
        )
        if eslintrc is not None:
            writes.append((self.root / self.settings.eslintrc_name, dump_json(eslintrc)))

        if opts.prettier:
            writes.append((self.root / self.settings.prettierrc_name, dump_json(make_prettierrc())))
            writes.append((self.root / self.settings.prettierignore_name, make_prettierignore() + "\n"))

        pre_commit: Path | None = None
        if opts.husky:
            pre_commit = self.root / self.settings.pre_commit_path
            script = make_husky_pre_commit(
                package_manager=opts.package_manager,
                eslint=opts.eslint,
                jest=opts.jest,
                lint_staged=opts.lint_staged,
                prettier=opts.prettier,
                typescript=opts.typescript,
            )
            writes.append((pre_commit, script + "\n"))

        try:
            await asyncio.gather(*(asyncio.to_thread(write_text, path, content) for path, content in writes))
            if pre_commit is not None:
                await asyncio.to_thread(make_executable, pre_commit)
        except OSError as exc:
            raise TemplateCopyError(f"Cannot write config file: {exc}", destination=str(self.root)) from exc

        return [path for path, _ in writes]

    # ------------------------------------------------------------------
    # 7. README
    # ------------------------------------------------------------------

    async def generate_readme(self) -> Path:
        config = self._require_config()
        return await self.readme.write(
            self.root / self.settings.readme_name,
            config.markdown,
            self.options.optional_dependencies,
        )

    # ------------------------------------------------------------------
    # 8. CLEANUP
    # ------------------------------------------------------------------

    async def clean_up(self) -> None:
        """Format the generated project when Prettier is enabled."""
        if self.options.prettier:
            await self.package_manager.run_script("format:write")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_final_summary(self, total_elapsed: float) -> None:
        """Print what was configured and the final status panel."""
        if self.state.get("success"):
            print_summary_table(self._feature_summary(), title="Configured")
            border_style = "bold green"
            status_text = "[bold green]SCAFFOLD SUCCEEDED[/bold green]"
        else:
            border_style = "bold red"
            status_text = "[bold red]SCAFFOLD FAILED[/bold red]"

        detail_lines = [
            status_text,
            "",
            f"Duration  : {format_duration(total_elapsed)}",
            f"Completed : {', '.join(self.state['stages_completed']) or 'none'}",
        ]
        if self.state.get("failed_stage"):
            detail_lines.append(f"Failed    : {self.state['failed_stage']}")
            detail_lines.append(f"Error     : {self.state['error']}")
        detail_lines.extend(["", f"Project   : {self.root}"])

        console.print()
        console.print(
            Panel(
                "\n".join(detail_lines),
                title="[bold]Scaffold Complete[/bold]",
                border_style=border_style,
            )
        )

    def _feature_summary(self) -> dict[str, str]:
        opts = self.options
        features = {
            "TypeScript": opts.typescript,
            "ESLint": opts.eslint,
            "Prettier": opts.prettier,
            "Jest": opts.jest,
            "React Testing Library": opts.react_testing_library,
            "lint-staged": opts.lint_staged,
            "Husky": opts.husky,
            "Storybook": opts.storybook,
            "Cypress": opts.cypress,
            "Docker": opts.docker,
            "Image optimisation": opts.image_optimisation,
        }
        summary = {name: "yes" if enabled else "no" for name, enabled in features.items()}
        summary["Package manager"] = opts.package_manager.value
        if opts.optional_dependencies:
            summary["Extra packages"] = ", ".join(dep.module for dep in opts.optional_dependencies)
        return summary


def _append_env_block(gitignore: Path) -> None:
    if GITIGNORE_ENV_BLOCK.strip() in gitignore.read_text(encoding="utf-8"):
        return
    with gitignore.open("a", encoding="utf-8") as fh:
        fh.write(GITIGNORE_ENV_BLOCK)
