"""Dependency manifest lookup."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from repolens.ingest.models import Entry

NO_MANIFEST = "No dependency file found."

MANIFEST_NAMES: tuple[str, ...] = (
    "package.json",
    "pom.xml",
    "pyproject.toml",
    "requirements.txt",
    "Cargo.toml",
    "go.mod",
    "build.gradle",
    "composer.json",
    "Gemfile",
)


def format_manifest(entry: Entry) -> str:
    return f"Filename: {entry.name}\nContent:\n{entry.content}"


def find_manifest_entry(
    entries: Sequence[Entry], names: Collection[str] = MANIFEST_NAMES
) -> Entry | None:
    """Return the manifest entry a project description should be built from.

    The top level is consulted first: the first root entry with a manifest
    name wins if it has content. Otherwise the whole forest is searched
    depth-first for the first manifest with content.
    """
    names = frozenset(names)
    root = next((e for e in entries if e.name in names), None)
    if root is not None and root.content:
        return root
    return _search(entries, names)


def locate_manifest(entries: Sequence[Entry], names: Collection[str] = MANIFEST_NAMES) -> str:
    """Formatted manifest excerpt, or the ``NO_MANIFEST`` sentinel."""
    found = find_manifest_entry(entries, names)
    if found is None:
        return NO_MANIFEST
    return format_manifest(found)


def _search(entries: Sequence[Entry], names: frozenset[str]) -> Entry | None:
    for entry in entries:
        if entry.name in names and entry.content:
            return entry
        if entry.children:
            found = _search(entry.children, names)
            if found is not None:
                return found
    return None
