"""Data models for the ingested directory tree."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from repolens.config.models import MAX_CONTENT_CHARS

PATH_SEPARATOR = "/"


class Entry(BaseModel):
    """One file-system item in an ingested forest.

    Files may carry captured text in ``content``; directories carry an
    ordered ``children`` tuple (possibly empty). Instances are immutable.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: Literal["file", "directory"]
    path: str
    content: str | None = None
    children: tuple[Entry, ...] | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Entry:
        if self.kind == "file":
            if self.children is not None:
                raise ValueError(f"file entry {self.path!r} cannot have children")
            if self.content is not None and len(self.content) > MAX_CONTENT_CHARS:
                raise ValueError(
                    f"content of {self.path!r} exceeds {MAX_CONTENT_CHARS} characters"
                )
        elif self.content is not None:
            raise ValueError(f"directory entry {self.path!r} cannot have content")
        return self

    @property
    def is_dir(self) -> bool:
        return self.kind == "directory"


def join_path(parent: str, name: str) -> str:
    """Child path from its parent's path. Root entries use an empty parent."""
    return f"{parent}{PATH_SEPARATOR}{name}"


def iter_entries(entries: tuple[Entry, ...] | list[Entry]) -> Iterator[Entry]:
    """Yield every entry of a forest in pre-order."""
    for entry in entries:
        yield entry
        if entry.children:
            yield from iter_entries(entry.children)


def find_entry(entries: tuple[Entry, ...] | list[Entry], path: str) -> Entry | None:
    """Return the entry whose path equals *path*, or None."""
    for entry in iter_entries(entries):
        if entry.path == path:
            return entry
    return None
