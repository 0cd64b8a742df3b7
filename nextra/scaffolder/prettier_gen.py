"""Prettier configuration and ignore-file generation."""

from __future__ import annotations

from typing import Any

PRETTIER_IGNORE: tuple[str, ...] = (
    ".next",
    ".cache",
    "package-lock.json",
    "public",
    "node_modules",
    "next-env.d.ts",
    "next.config.ts",
    "yarn.lock",
)


def make_prettierrc(semi: bool = True) -> dict[str, Any]:
    """Return the ``.prettierrc.json`` object."""
    return {
        "semi": semi,
        "trailingComma": "es5",
        "singleQuote": True,
        "tabWidth": 2,
        "plugins": ["@trivago/prettier-plugin-sort-imports"],
        "importOrderSeparation": True,
        "importOrder": ["^[./]"],
    }


def make_prettierignore() -> str:
    return "\n".join(PRETTIER_IGNORE)
