"""Template assets for project scaffolding.

Provides the TemplateRenderer class which copies static template files and
directories from the ``nextra/scaffolder/templates/`` directory into the
project root, and renders the Jinja2 templates (``*.j2``) used for generated
text such as the README dependency table.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import DEFAULT_TEMPLATES_DIR
from ..errors import TemplateCopyError
from ..utils import write_text


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Copies and renders scaffold templates.

    Static assets (``next.config.js``, ``Dockerfile``, ``cypress/`` ...) are
    copied verbatim.  Files ending in ``.j2`` are Jinja2 templates rendered
    with a context dictionary.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = DEFAULT_TEMPLATES_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["md_cell"] = _md_cell_filter

    # -- Rendering -----------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"readme/selected-dependencies-table.md.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*."""
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(write_text, out, content)
        return out

    # -- Copying -------------------------------------------------------------

    async def copy_files(self, names: Sequence[str], project_root: Path) -> list[Path]:
        """Copy template files named in *names* into *project_root* concurrently.

        Raises:
            TemplateCopyError: If a template is missing or a destination
                cannot be written.
        """
        return list(
            await asyncio.gather(
                *(self._copy(name, project_root, recursive=False) for name in names)
            )
        )

    async def copy_directories(self, names: Sequence[str], project_root: Path) -> list[Path]:
        """Recursively copy template directories into *project_root* concurrently."""
        return list(
            await asyncio.gather(
                *(self._copy(name, project_root, recursive=True) for name in names)
            )
        )

    async def _copy(self, name: str, project_root: Path, *, recursive: bool) -> Path:
        source = self.template_dir / name
        destination = Path(project_root) / name
        if recursive and not source.is_dir():
            raise TemplateCopyError(
                f"Template directory not found: {source}",
                source=str(source),
                destination=str(destination),
            )
        if not recursive and not source.is_file():
            raise TemplateCopyError(
                f"Template file not found: {source}",
                source=str(source),
                destination=str(destination),
            )
        try:
            await asyncio.to_thread(_copy_path, source, destination, recursive)
        except OSError as exc:
            raise TemplateCopyError(
                f"Cannot copy {source} to {destination}: {exc}",
                source=str(source),
                destination=str(destination),
            ) from exc
        return destination

    # -- Utility -------------------------------------------------------------

    def list_templates(self, suffix: str = ".j2") -> list[str]:
        """Return a sorted list of template paths ending in *suffix*."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            str(p.relative_to(self.template_dir))
            for p in self.template_dir.rglob(f"*{suffix}")
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _md_cell_filter(value: Any) -> str:
    """Make a value safe to place inside a markdown table cell."""
    return str(value).replace("|", "\\|").replace("\n", " ").strip()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _copy_path(source: Path, destination: Path, recursive: bool) -> None:
    """Synchronous helper: copy a file or a directory tree."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    if recursive:
        shutil.copytree(source, destination, dirs_exist_ok=True)
    else:
        shutil.copy2(source, destination)
