"""Recursive, fault-tolerant directory ingestion into an immutable Entry forest."""

from __future__ import annotations

import asyncio
import logging

from repolens.config.models import IngestConfig
from repolens.ingest.handles import DirectoryHandle, FileHandle, Handle
from repolens.ingest.models import Entry, join_path

logger = logging.getLogger(__name__)


class DirectoryIngester:
    """Reads a directory handle into a tuple of root Entries.

    Siblings are processed concurrently, but each result is placed at its
    enumeration index, so the tree shape never depends on completion order.
    """

    def __init__(self, config: IngestConfig | None = None) -> None:
        self.config = config or IngestConfig()
        self._ignore = frozenset(self.config.ignore_names)

    async def ingest(self, root: DirectoryHandle) -> tuple[Entry, ...]:
        """Ingest *root* and return its filtered, content-capped entries."""
        reads = asyncio.Semaphore(self.config.max_concurrent_reads)
        entries = await self._read_directory(root, "", 0, reads)
        logger.debug("Ingested %d root entries from %r", len(entries), root.name)
        return entries

    def is_ignored(self, name: str) -> bool:
        prefix = self.config.hidden_prefix
        return name in self._ignore or bool(prefix and name.startswith(prefix))

    def is_binary(self, media_type: str) -> bool:
        return any(media_type.startswith(p) for p in self.config.binary_media_prefixes)

    async def _read_directory(
        self,
        directory: DirectoryHandle,
        path: str,
        depth: int,
        reads: asyncio.Semaphore,
    ) -> tuple[Entry, ...]:
        children: list[tuple[str, Handle]] = []
        async for name, handle in directory.entries():
            if self.is_ignored(name):
                continue
            children.append((name, handle))

        results = await asyncio.gather(
            *(self._read_entry(name, handle, path, depth, reads) for name, handle in children)
        )
        return tuple(entry for entry in results if entry is not None)

    async def _read_entry(
        self,
        name: str,
        handle: Handle,
        parent_path: str,
        depth: int,
        reads: asyncio.Semaphore,
    ) -> Entry | None:
        path = join_path(parent_path, name)

        if handle.kind == "file":
            return await self._read_file(name, handle, path, reads)

        if depth + 1 > self.config.max_depth:
            logger.warning("Depth ceiling %d reached at %s; not descending", self.config.max_depth, path)
            return Entry(name=name, kind="directory", path=path, children=())

        try:
            children = await self._read_directory(handle, path, depth + 1, reads)
        except OSError as e:
            logger.warning("Cannot list %s: %s", path, e)
            children = ()
        return Entry(name=name, kind="directory", path=path, children=children)

    async def _read_file(
        self,
        name: str,
        handle: FileHandle,
        path: str,
        reads: asyncio.Semaphore,
    ) -> Entry | None:
        if self.is_binary(handle.media_type or ""):
            return None

        content: str | None
        try:
            limit = self.config.max_content_chars
            async with reads:
                text = await handle.read_text(limit)
            # handles may ignore the limit
            content = text[:limit]
        except (OSError, UnicodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            content = None
        return Entry(name=name, kind="file", path=path, content=content)
