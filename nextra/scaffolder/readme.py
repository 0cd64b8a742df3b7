"""README assembly.

The README is the concatenation of named markdown fragments, separated by a
blank line, optionally followed by a table listing the optional packages the
user picked.  Fragment ``x`` lives in ``<markdown_dir>/x.md``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from jinja2 import TemplateError

from ..config import DEFAULT_MARKDOWN_DIR
from ..errors import ReadmeAssemblyError
from ..options import OptionalDependency
from ..utils import write_text
from .templates import TemplateRenderer

DEPENDENCY_TABLE_TEMPLATE = "readme/selected-dependencies-table.md.j2"
FRAGMENT_SEPARATOR = "\n\n"


class ReadmeBuilder:
    """Reads markdown fragments and writes the project README."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        markdown_dir: str | Path | None = None,
    ) -> None:
        self.renderer = renderer
        self.markdown_dir = Path(markdown_dir) if markdown_dir is not None else DEFAULT_MARKDOWN_DIR

    def fragment_path(self, name: str) -> Path:
        return self.markdown_dir / f"{name}.md"

    async def read_fragment(self, name: str) -> str:
        """Return the text of fragment *name* without trailing whitespace.

        Raises:
            ReadmeAssemblyError: If the fragment is missing or unreadable.
        """
        path = self.fragment_path(name)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as exc:
            raise ReadmeAssemblyError(f"Cannot read markdown fragment '{name}' ({path}): {exc}") from exc
        return text.rstrip()

    def render_dependency_table(self, dependencies: Sequence[OptionalDependency]) -> str:
        """Render the markdown table listing *dependencies* in selection order."""
        try:
            return self.renderer.render(
                DEPENDENCY_TABLE_TEMPLATE,
                {"dependencies": list(dependencies)},
            ).rstrip()
        except TemplateError as exc:
            raise ReadmeAssemblyError(f"Cannot render dependency table: {exc}") from exc

    async def build(
        self,
        fragments: Sequence[str],
        dependencies: Sequence[OptionalDependency] = (),
    ) -> str:
        """Assemble the README text from *fragments* and *dependencies*."""
        sections = list(await asyncio.gather(*(self.read_fragment(name) for name in fragments)))
        if dependencies:
            sections.append(self.render_dependency_table(dependencies))
        return FRAGMENT_SEPARATOR.join(sections) + "\n"

    async def write(
        self,
        output_path: Path,
        fragments: Sequence[str],
        dependencies: Sequence[OptionalDependency] = (),
    ) -> Path:
        """Build the README and write it to *output_path*.

        Raises:
            ReadmeAssemblyError: If a fragment cannot be read or the README
                cannot be written.
        """
        content = await self.build(fragments, dependencies)
        try:
            await asyncio.to_thread(write_text, output_path, content)
        except OSError as exc:
            raise ReadmeAssemblyError(f"Cannot write {output_path}: {exc}") from exc
        return output_path
