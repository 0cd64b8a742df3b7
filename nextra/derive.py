"""Configuration derivation.

``derive_config`` maps a set of :class:`~nextra.options.Options` onto a
``ScaffoldConfig``: which template files and directories to copy, which
packages to install, which ``package.json`` scripts to add and which README
fragments to assemble.  It is a pure function; the same options always give
the same configuration, list order included.  Order is significant: the
README reads in fragment order and packages install in list order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .errors import DerivationError
from .options import Options, PackageManagerKind


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASE_TEMPLATE_FILES: tuple[str, ...] = ("next.config.js",)
DOCKER_TEMPLATE_FILES: tuple[str, ...] = ("docker-compose.yml", "Dockerfile", "Makefile")
JEST_TEMPLATE_FILES: tuple[str, ...] = ("jest.config.js", "jest.setup.js")

CYPRESS_TEMPLATE_DIR = "cypress"
STORYBOOK_TEMPLATE_DIR = ".storybook"

CYPRESS_DEV_DEPENDENCIES: tuple[str, ...] = ("cypress",)
HUSKY_DEV_DEPENDENCIES: tuple[str, ...] = ("husky",)
ESLINT_TYPESCRIPT_DEV_DEPENDENCIES: tuple[str, ...] = ("@typescript-eslint/eslint-plugin",)
LINT_STAGED_DEV_DEPENDENCIES: tuple[str, ...] = ("lint-staged",)
PRETTIER_DEV_DEPENDENCIES: tuple[str, ...] = (
    "prettier",
    "eslint-config-prettier",
    "@trivago/prettier-plugin-sort-imports",
)
STORYBOOK_DEV_DEPENDENCIES: tuple[str, ...] = (
    "@storybook/addon-essentials",
    "@storybook/addon-interactions",
    "@storybook/addon-links",
    "@storybook/addon-onboarding",
    "@storybook/blocks",
    "@storybook/nextjs",
    "@storybook/react",
    "@storybook/testing-library",
    "eslint-plugin-storybook",
    "storybook",
)
JEST_DEV_DEPENDENCIES: tuple[str, ...] = ("jest", "jest-environment-jsdom")
JEST_TYPESCRIPT_DEV_DEPENDENCIES: tuple[str, ...] = ("@types/jest", "ts-jest")
REACT_TESTING_LIBRARY_DEV_DEPENDENCIES: tuple[str, ...] = (
    "@testing-library/jest-dom",
    "@testing-library/user-event",
    "@testing-library/react",
    "eslint-plugin-testing-library",
)
IMAGE_OPTIMISATION_DEPENDENCIES: tuple[str, ...] = ("sharp",)

HUSKY_INSTALL_SCRIPT = "husky install"

PRETTIER_SCRIPTS: dict[str, str] = {
    "format:check": "prettier --check .",
    "format:write": "prettier --write .",
}
JEST_SCRIPTS: dict[str, str] = {
    "test": "jest",
    "test:watch": "jest --watch",
    "test:coverage": "jest --coverage",
    "test:ci": "jest --ci --coverage",
}
CYPRESS_SCRIPTS: dict[str, str] = {"e2e": "cypress run"}
STORYBOOK_SCRIPTS: dict[str, str] = {
    "storybook": "storybook dev -p 6006",
    "build-storybook": "storybook build",
}

NEXT_FRAGMENT = "next"
SELECTED_DEPENDENCIES_FRAGMENT = "selected-dependencies"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class ScaffoldConfig(BaseModel):
    """The fully resolved plan executed by the pipeline.

    Every list defaults to empty so callers never need ``None`` checks.
    """

    model_config = ConfigDict(frozen=True)

    config_template_files: list[str] = Field(default_factory=list)
    config_template_directories: list[str] = Field(default_factory=list)
    package_dependencies: list[str] = Field(default_factory=list)
    package_dev_dependencies: list[str] = Field(default_factory=list)
    package_scripts: dict[str, str] = Field(default_factory=dict)
    markdown: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------

def derive_config(options: Options) -> ScaffoldConfig:
    """Derive the scaffold configuration for *options*.

    Raises:
        DerivationError: If *options* names an unknown package manager.
    """
    pm = resolve_package_manager(options.package_manager)

    return ScaffoldConfig(
        config_template_files=_template_files(options),
        config_template_directories=_template_directories(options),
        package_dependencies=_dependencies(options),
        package_dev_dependencies=_dev_dependencies(options),
        package_scripts=_scripts(options, pm),
        markdown=_markdown(options),
    )


def resolve_package_manager(value: object) -> PackageManagerKind:
    """Coerce *value* to a ``PackageManagerKind`` or raise ``DerivationError``."""
    try:
        return PackageManagerKind(value)
    except ValueError as exc:
        known = ", ".join(kind.value for kind in PackageManagerKind)
        raise DerivationError(
            f"Unknown package manager {value!r} (expected one of: {known})"
        ) from exc


def husky_script_key(pm: PackageManagerKind) -> str:
    """Yarn runs ``postinstall`` after every install; the others use ``prepare``."""
    return "postinstall" if pm is PackageManagerKind.YARN else "prepare"


def _template_files(options: Options) -> list[str]:
    files = list(BASE_TEMPLATE_FILES)
    if options.docker:
        files.extend(DOCKER_TEMPLATE_FILES)
    if options.jest:
        files.extend(JEST_TEMPLATE_FILES)
    return files


def _template_directories(options: Options) -> list[str]:
    directories: list[str] = []
    if options.cypress:
        directories.append(CYPRESS_TEMPLATE_DIR)
    if options.storybook:
        directories.append(STORYBOOK_TEMPLATE_DIR)
    return directories


def _dependencies(options: Options) -> list[str]:
    dependencies: list[str] = []
    if options.image_optimisation:
        dependencies.extend(IMAGE_OPTIMISATION_DEPENDENCIES)
    dependencies.extend(
        dep.module for dep in options.optional_dependencies if not dep.save_dev
    )
    return dependencies


def _dev_dependencies(options: Options) -> list[str]:
    dev: list[str] = []
    if options.cypress:
        dev.extend(CYPRESS_DEV_DEPENDENCIES)
    if options.husky:
        dev.extend(HUSKY_DEV_DEPENDENCIES)
    if options.eslint and options.typescript:
        dev.extend(ESLINT_TYPESCRIPT_DEV_DEPENDENCIES)
    if options.lint_staged:
        dev.extend(LINT_STAGED_DEV_DEPENDENCIES)
    if options.prettier:
        dev.extend(PRETTIER_DEV_DEPENDENCIES)
    if options.storybook:
        dev.extend(STORYBOOK_DEV_DEPENDENCIES)
    if options.jest:
        dev.extend(JEST_DEV_DEPENDENCIES)
        if options.typescript:
            dev.extend(JEST_TYPESCRIPT_DEV_DEPENDENCIES)
    if options.react_testing_library:
        dev.extend(REACT_TESTING_LIBRARY_DEV_DEPENDENCIES)
    dev.extend(dep.module for dep in options.optional_dependencies if dep.save_dev)
    return dev


def _scripts(options: Options, pm: PackageManagerKind) -> dict[str, str]:
    scripts: dict[str, str] = {
        "build:standalone": "BUILD_STANDALONE=true next build",
        "start:standalone": (
            "cp -R ./public ./.next/standalone && "
            "cp -R ./.next/static ./public ./.next/standalone/.next && "
            "node ./.next/standalone/server.js"
        ),
        "build-start": "next build && next start",
        "build-start:standalone": (
            f"{pm.value} run build:standalone && {pm.value} run start:standalone"
        ),
    }
    if options.prettier:
        scripts.update(PRETTIER_SCRIPTS)
    if options.jest:
        scripts.update(JEST_SCRIPTS)
    if options.cypress:
        scripts.update(CYPRESS_SCRIPTS)
    if options.storybook:
        scripts.update(STORYBOOK_SCRIPTS)
    if options.husky:
        scripts[husky_script_key(pm)] = HUSKY_INSTALL_SCRIPT
    return scripts


def _markdown(options: Options) -> list[str]:
    fragments = [NEXT_FRAGMENT]
    for enabled, name in (
        (options.cypress, "cypress"),
        (options.docker, "docker"),
        (options.prettier, "prettier"),
        (options.storybook, "storybook"),
        (options.jest, "jest"),
        (options.react_testing_library, "reactTestingLibrary"),
        (options.lint_staged, "lint-staged"),
    ):
        if enabled:
            fragments.append(name)
    if options.husky:
        fragments.extend(["git", "husky"])
    if options.has_optional_dependencies:
        fragments.append(SELECTED_DEPENDENCIES_FRAGMENT)
    return fragments
