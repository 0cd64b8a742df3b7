"""Nextra runtime settings.

Where the scaffolder finds its template assets and markdown fragments, and
what it names the files it writes.  Settings use a Pydantic v2 model so they
can be validated at construction time and serialised to/from JSON or
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_PACKAGE_DIR = Path(__file__).parent

DEFAULT_TEMPLATES_DIR = _PACKAGE_DIR / "scaffolder" / "templates"
DEFAULT_MARKDOWN_DIR = _PACKAGE_DIR / "scaffolder" / "markdown"


class Settings(BaseModel):
    """Global nextra configuration.

    Instances are typically created once by the CLI entry point and passed
    to the ``Pipeline``.
    """

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    markdown_dir: Path = Field(default=DEFAULT_MARKDOWN_DIR)
    manifest_name: str = Field(default="package.json")
    readme_name: str = Field(default="README.md")
    eslintrc_name: str = Field(default=".eslintrc.json")
    prettierrc_name: str = Field(default=".prettierrc.json")
    prettierignore_name: str = Field(default=".prettierignore")
    pre_commit_path: str = Field(default=".husky/pre-commit")
    create_next_app: str = Field(
        default="create-next-app@latest",
        description="npx package spec used to create the Next.js app",
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            NEXTRA_TEMPLATES_DIR, NEXTRA_MARKDOWN_DIR, NEXTRA_CREATE_NEXT_APP.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NEXTRA_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["NEXTRA_TEMPLATES_DIR"])
        if os.environ.get("NEXTRA_MARKDOWN_DIR"):
            kwargs["markdown_dir"] = Path(os.environ["NEXTRA_MARKDOWN_DIR"])
        if os.environ.get("NEXTRA_CREATE_NEXT_APP"):
            kwargs["create_next_app"] = os.environ["NEXTRA_CREATE_NEXT_APP"]
        return cls(**kwargs)
