"""Husky pre-commit hook generation.

The hook is assembled from fixed fragments joined by newlines.  With
lint-staged enabled a single ``npx lint-staged`` call replaces the per-tool
steps; the TODO/FIXME scan and the closing banner are always emitted.
"""

from __future__ import annotations

from ..derive import resolve_package_manager
from ..options import PackageManagerKind

PACKAGE_MANAGER_PLACEHOLDER = "<PACKAGE_MANAGER>"

HEAD = "\n".join([
    "#!/usr/bin/env sh",
    '. "$(dirname -- "$0")/_/husky.sh"',
])

LINT_STAGED = "\n".join([
    'printf "\\n\\n"',
    "npx lint-staged || {",
    ' printf "\\n\\n------------------------------------------\\n\\n"',
    ' printf "🚫 YOU HAVE ERRORS!"',
    ' printf "\\n\\n------------------------------------------\\n\\n"',
    " exit 1;",
    "}",
])

PRETTIER = "\n".join([
    f"{PACKAGE_MANAGER_PLACEHOLDER} run format:check",
    f"{PACKAGE_MANAGER_PLACEHOLDER} run format:write",
])

ESLINT = "\n".join([
    f"{PACKAGE_MANAGER_PLACEHOLDER} run lint:check",
    f"{PACKAGE_MANAGER_PLACEHOLDER} run lint:fix",
])

JEST = "\n".join([
    "",
    f"{PACKAGE_MANAGER_PLACEHOLDER} run test --passWithNoTests",
])

TYPESCRIPT = f"{PACKAGE_MANAGER_PLACEHOLDER} run build --no-emit"

LEASOT = "\n".join([
    "# Following is for observability purposes",
    "",
    'printf "\\n\\n"',
    'printf "TODOs / FIXMEs - consider reviewing these"',
    'printf "\\n------------------------------------------\\n"',
    "",
    "npx leasot 'src/**/*.[jt]s?(x)' --exit-nicely",
])

FOOTER = "\n".join([
    'printf "\\n\\n------------------------------------------\\n\\n"',
    'printf "Now push your code! 🚀"',
    'printf "\\n\\n------------------------------------------\\n\\n"',
])


def make_husky_pre_commit(
    *,
    package_manager: PackageManagerKind | str,
    eslint: bool = False,
    jest: bool = False,
    lint_staged: bool = False,
    prettier: bool = False,
    typescript: bool = False,
) -> str:
    """Return the text of ``.husky/pre-commit``."""
    pm = resolve_package_manager(package_manager).value

    fragments = [HEAD]
    if lint_staged:
        fragments.append(LINT_STAGED)
    else:
        if prettier:
            fragments.append(PRETTIER)
        if eslint:
            fragments.append(ESLINT)
        if jest:
            fragments.append(JEST)
        if typescript:
            fragments.append(TYPESCRIPT)
    fragments.extend([LEASOT, FOOTER])

    return "\n".join(fragments).replace(PACKAGE_MANAGER_PLACEHOLDER, pm)
