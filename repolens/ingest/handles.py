"""Directory-handle capability consumed by the ingester.

The ingester only depends on the two protocols below. ``LocalDirectoryHandle``
and ``LocalFileHandle`` implement them over the local filesystem.
"""

from __future__ import annotations

import asyncio
import mimetypes
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Literal, Protocol, Union, runtime_checkable


class RootUnavailableError(Exception):
    """The root directory could not be opened."""


@runtime_checkable
class FileHandle(Protocol):
    """A readable file with a MIME-like type hint."""

    kind: Literal["file"]
    name: str
    media_type: str

    async def read_text(self, limit: int | None = None) -> str:
        """Decoded text, at most *limit* characters when given."""
        ...


@runtime_checkable
class DirectoryHandle(Protocol):
    """A directory whose entries can be enumerated in canonical order."""

    kind: Literal["directory"]
    name: str

    def entries(self) -> AsyncIterator[tuple[str, Handle]]: ...


Handle = Union[FileHandle, DirectoryHandle]


class LocalFileHandle:
    """File on the local filesystem."""

    kind: Literal["file"] = "file"

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = path.name
        self.media_type = mimetypes.guess_type(path.name)[0] or ""

    async def read_text(self, limit: int | None = None) -> str:
        return await asyncio.to_thread(self._read, limit)

    def _read(self, limit: int | None) -> str:
        with open(self.path, encoding="utf-8", errors="replace") as f:
            return f.read(-1 if limit is None else limit)

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self.path)!r})"


class LocalDirectoryHandle:
    """Directory on the local filesystem, enumerated in sorted name order."""

    kind: Literal["directory"] = "directory"

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = path.name

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> LocalDirectoryHandle:
        """Open *path* as a root handle, raising RootUnavailableError if unusable."""
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise RootUnavailableError(f"Not a directory: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise RootUnavailableError(f"Directory is not readable: {root}")
        return cls(root)

    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        listing = await asyncio.to_thread(self._list)
        for name, is_dir in listing:
            child = self.path / name
            if is_dir:
                yield name, LocalDirectoryHandle(child)
            else:
                yield name, LocalFileHandle(child)

    def _list(self) -> list[tuple[str, bool]]:
        items: list[tuple[str, bool]] = []
        with os.scandir(self.path) as it:
            for dirent in it:
                try:
                    is_dir = dirent.is_dir()
                    if not is_dir and not dirent.is_file():
                        continue  # sockets, fifos, dangling links
                except OSError:
                    continue
                items.append((dirent.name, is_dir))
        items.sort(key=lambda item: item[0])
        return items

    def __repr__(self) -> str:
        return f"LocalDirectoryHandle({str(self.path)!r})"
