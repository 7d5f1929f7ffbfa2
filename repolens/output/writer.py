"""MarkdownWriter: saves generated markdown as UTF-8 files."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePath

from repolens.config.models import OutputConfig

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9\-_]")


def safe_title(title: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9-_]`` with ``_``."""
    return _UNSAFE_RE.sub("_", title)


def readme_filename(title: str) -> str:
    """File name for a project README, e.g. ``My_Project_README.md``."""
    return f"{safe_title(title)}_README.md"


def file_docs_filename(name: str) -> str:
    """File name for one file's docs: ``App.tsx_README.md``; markdown keeps its own name."""
    name = PurePath(name).name
    return name if name.endswith(".md") else f"{name}_README.md"


class MarkdownWriter:
    """Writes generated markdown under the configured base directory."""

    def __init__(self, config: OutputConfig | None = None) -> None:
        self.config = config or OutputConfig()
        self.base_dir = Path(self.config.base_dir)

    def write(self, title: str, markdown: str, *, dry_run: bool = False) -> Path:
        """Write the README *markdown* for project *title*.

        Returns the Path of the written (or would-be) file.
        """
        return self._save(self.base_dir / readme_filename(title), markdown, dry_run)

    def write_file_docs(self, filename: str, markdown: str, *, dry_run: bool = False) -> Path:
        """Write docs generated for the project file *filename*."""
        return self._save(self.base_dir / file_docs_filename(filename), markdown, dry_run)

    def _save(self, dest: Path, markdown: str, dry_run: bool) -> Path:
        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(markdown, encoding="utf-8")
        logger.info("wrote %s (%d chars)", dest, len(markdown))
        return dest
