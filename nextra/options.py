"""Pydantic v2 models describing what the user asked for.

``Options`` is the single immutable input of the scaffolding run.  It is
collected once (from prompts or flags) and never mutated: facts discovered
after ``create-next-app`` has run are folded in by producing a new instance
via :meth:`Options.with_next_app_facts`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PackageManagerKind(str, Enum):
    """Supported JavaScript package managers."""
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"


# ---------------------------------------------------------------------------
# Optional dependency records
# ---------------------------------------------------------------------------

class OptionalDependency(BaseModel):
    """A popular package the user opted into at prompt time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    module: str = Field(..., min_length=1, description="Package name as published on npm")
    save_dev: bool = Field(default=False, description="Install as a devDependency")
    github: str = Field(default="", description="Repository URL shown in the README table")
    description: str = Field(default="", description="One-line description for the README table")


# ---------------------------------------------------------------------------
# Facts discovered from a freshly created Next.js app
# ---------------------------------------------------------------------------

class NextAppFacts(BaseModel):
    """What ``create-next-app`` left on disk."""

    model_config = ConfigDict(frozen=True)

    typescript: bool = False
    app_router: bool = False
    eslint: bool = False
    tailwind: bool = False
    src_dir: bool = False


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class Options(BaseModel):
    """Feature toggles and choices driving the whole scaffold.

    Every boolean is independent; cross-feature rules are applied when the
    configuration is derived, never here.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_manager: PackageManagerKind = Field(default=PackageManagerKind.NPM)

    typescript: bool = False
    eslint: bool = False
    prettier: bool = False
    jest: bool = False
    react_testing_library: bool = False
    lint_staged: bool = False
    husky: bool = False
    storybook: bool = False
    cypress: bool = False
    docker: bool = False
    image_optimisation: bool = False

    # Discovered after project creation.
    app_router: bool = False
    tailwind: bool = False
    src_dir: bool = False

    optional_dependencies: tuple[OptionalDependency, ...] = Field(
        default=(),
        description="User-selected extra packages, in selection order",
    )
    dot_env_files: tuple[str, ...] = Field(
        default=(),
        description="Env file names to create empty in the project root",
    )

    @field_validator("dot_env_files")
    @classmethod
    def _unique_env_files(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        seen: list[str] = []
        for name in value:
            name = name.strip()
            if not name:
                raise ValueError("env file names must not be empty")
            if "/" in name or "\\" in name:
                raise ValueError(f"env file name must not contain a path separator: {name!r}")
            if name not in seen:
                seen.append(name)
        return tuple(seen)

    def with_next_app_facts(self, facts: NextAppFacts) -> "Options":
        """Return a copy of these options updated with discovered project facts."""
        return self.model_copy(
            update={
                "typescript": facts.typescript,
                "app_router": facts.app_router,
                "tailwind": facts.tailwind,
                "src_dir": facts.src_dir,
            }
        )

    @property
    def has_optional_dependencies(self) -> bool:
        return len(self.optional_dependencies) > 0
