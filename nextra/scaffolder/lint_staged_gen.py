"""lint-staged rule generation.

Maps staged-file globs to the ordered commands run against them on commit.
Within a glob the order is always: prettier, eslint, jest, and (TypeScript
globs only) the type check.
"""

from __future__ import annotations

JS_GLOB = "**/*.js?(x)"
TS_GLOB = "**/*.ts?(x)"
DATA_GLOB = "**/*.{md,yml,yaml,json}"
STYLES_GLOB = "**/*.{css}"

PRETTIER_COMMANDS: tuple[str, ...] = ("prettier --check .", "prettier --write .")
ESLINT_COMMANDS: tuple[str, ...] = ("eslint .", "eslint --fix .")
JEST_COMMANDS: tuple[str, ...] = ("jest --ci",)
TYPECHECK_COMMAND = "tsc --noEmit"


def make_lint_staged_config(
    *,
    eslint: bool = False,
    jest: bool = False,
    prettier: bool = False,
    typescript: bool = False,
) -> dict[str, list[str]]:
    """Return the lint-staged mapping; globs with no commands are omitted."""
    script_commands: list[str] = []
    if prettier:
        script_commands.extend(PRETTIER_COMMANDS)
    if eslint:
        script_commands.extend(ESLINT_COMMANDS)
    if jest:
        script_commands.extend(JEST_COMMANDS)

    config: dict[str, list[str]] = {
        JS_GLOB: list(script_commands),
    }
    if typescript:
        config[TS_GLOB] = [*script_commands, TYPECHECK_COMMAND]
    if prettier:
        config[DATA_GLOB] = list(PRETTIER_COMMANDS)
        config[STYLES_GLOB] = list(PRETTIER_COMMANDS)

    return {glob: commands for glob, commands in config.items() if commands}
