"""File tree formatting for LLM context."""

from __future__ import annotations

from collections.abc import Sequence

from repolens.ingest.models import Entry

_INDENT = "  "


def flatten_tree(entries: Sequence[Entry], max_depth: int = 4, depth: int = 0) -> str:
    """Render a forest as an indented ``- name (kind)`` listing.

    Once a sibling list sits deeper than *max_depth*, that call stops and
    returns what it has; it does not go on to later siblings. The caller one
    level up resumes with its own remaining siblings.
    """
    output = ""
    indent = _INDENT * depth
    for entry in entries:
        if depth > max_depth:
            return output
        output += f"{indent}- {entry.name} ({entry.kind})\n"
        if entry.children:
            output += flatten_tree(entry.children, max_depth, depth + 1)
    return output
