"""ESLint configuration generation.

Builds the ``.eslintrc.json`` object for the selected tooling.  The Next.js
``core-web-vitals`` preset is always the base; ``prettier`` must stay the
last entry of ``extends`` so it switches off every stylistic rule the
earlier presets turned on.
"""

from __future__ import annotations

from typing import Any

BASE_EXTENDS = "next/core-web-vitals"
TYPESCRIPT_PLUGIN = "@typescript-eslint"
TYPESCRIPT_EXTENDS = "plugin:@typescript-eslint/recommended"
STORYBOOK_EXTENDS = "plugin:storybook/recommended"
PRETTIER_EXTENDS = "prettier"
TESTING_LIBRARY_PLUGIN = "testing-library"
TESTING_LIBRARY_EXTENDS = "plugin:testing-library/react"

TYPESCRIPT_RULES: dict[str, str] = {
    "@typescript-eslint/no-unused-vars": "error",
    "@typescript-eslint/no-explicit-any": "error",
}

TEST_FILE_GLOBS: tuple[str, ...] = (
    "**/__tests__/**/*.[jt]s?(x)",
    "**/?(*.)+(spec|test).[jt]s?(x)",
)


def make_eslintrc(
    *,
    eslint: bool,
    react_testing_library: bool = False,
    prettier: bool = False,
    storybook: bool = False,
    typescript: bool = False,
) -> dict[str, Any] | None:
    """Return the ESLint config object, or ``None`` when ESLint is disabled.

    ``plugins``, ``rules`` and ``overrides`` are left out entirely when they
    would be empty.
    """
    if not eslint:
        return None

    plugins: list[str] = []
    extends: list[str] = [BASE_EXTENDS]
    rules: dict[str, str] = {}
    overrides: list[dict[str, Any]] = []

    if typescript:
        plugins.append(TYPESCRIPT_PLUGIN)
        extends.append(TYPESCRIPT_EXTENDS)
        rules.update(TYPESCRIPT_RULES)

    if react_testing_library:
        plugins.append(TESTING_LIBRARY_PLUGIN)
        overrides.append(
            {
                "files": list(TEST_FILE_GLOBS),
                "extends": [TESTING_LIBRARY_EXTENDS],
            }
        )

    if storybook:
        extends.append(STORYBOOK_EXTENDS)

    # Must be last.
    if prettier:
        extends.append(PRETTIER_EXTENDS)

    eslintrc: dict[str, Any] = {"root": True}
    if plugins:
        eslintrc["plugins"] = plugins
    eslintrc["extends"] = extends
    if rules:
        eslintrc["rules"] = rules
    if overrides:
        eslintrc["overrides"] = overrides
    return eslintrc
