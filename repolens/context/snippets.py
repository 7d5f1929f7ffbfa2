"""Key-file snippet collection.

Relevance is decided by a ``RelevanceClassifier``; swapping the classifier
changes which files are picked without touching the traversal.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from repolens.ingest.models import Entry

IGNORE_SUBSTRINGS: tuple[str, ...] = (
    "test",
    "spec",
    "config",
    "setup",
    "d.ts",
    "min.js",
    "node_modules",
    "dist",
    "build",
    ".git",
)

CORE_SUBSTRINGS: tuple[str, ...] = ("App", "Server", "Routes", "Main", "Controller", "Service")

MODEL_PATTERN = re.compile(r"^[A-Z][a-zA-Z0-9]{2,}\.(java|ts|tsx|py|cs|jsx)$")

SNIPPET_CHARS = 1000
TOTAL_CAP = 10_000


@runtime_checkable
class RelevanceClassifier(Protocol):
    """Decides whether a file name is worth sending as a snippet."""

    def classify(self, filename: str) -> bool: ...


class HeuristicClassifier:
    """Name-based relevance test.

    Ignore substrings are checked first and always win: ``AppConfig.ts``
    matches both the model pattern and ``App`` but is still excluded.
    """

    def __init__(
        self,
        ignore: Iterable[str] = IGNORE_SUBSTRINGS,
        core: Iterable[str] = CORE_SUBSTRINGS,
        model_pattern: re.Pattern[str] = MODEL_PATTERN,
    ) -> None:
        self.ignore = tuple(ignore)
        self.core = tuple(core)
        self.model_pattern = model_pattern

    def classify(self, filename: str) -> bool:
        lower = filename.lower()
        if any(s in lower for s in self.ignore):
            return False
        if self.model_pattern.match(filename):
            return True
        return any(s in filename for s in self.core)


def format_snippet(entry: Entry, snippet_chars: int = SNIPPET_CHARS) -> str:
    return f"\n--- File: {entry.name} ---\n{(entry.content or '')[:snippet_chars]}\n...\n"


def collect_key_snippets(
    entries: Sequence[Entry],
    total_cap: int = TOTAL_CAP,
    classifier: RelevanceClassifier | None = None,
    snippet_chars: int = SNIPPET_CHARS,
) -> str:
    """Concatenate heads of relevant files, cut to *total_cap* characters.

    The cut is applied once to the whole bundle and may land inside a
    snippet.
    """
    classifier = classifier or HeuristicClassifier()
    parts: list[str] = []

    def scan(items: Sequence[Entry]) -> None:
        for entry in items:
            if entry.kind == "file" and entry.content and classifier.classify(entry.name):
                parts.append(format_snippet(entry, snippet_chars))
            if entry.children:
                scan(entry.children)

    scan(entries)
    return "".join(parts)[: max(total_cap, 0)]
