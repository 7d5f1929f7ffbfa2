"""Ingestion session: owns the current snapshot and discards stale results."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict

from repolens.ingest.handles import DirectoryHandle, RootUnavailableError
from repolens.ingest.ingester import DirectoryIngester
from repolens.ingest.models import Entry

logger = logging.getLogger(__name__)

RootOpener = Callable[[], Awaitable[DirectoryHandle]]


class Snapshot(BaseModel):
    """An applied ingestion result."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    entries: tuple[Entry, ...] = ()
    generation: int = 0


class IngestionSession:
    """Single owner of the "current tree" reference.

    Every call to ``load`` takes a new generation ticket. A completed
    ingestion is applied only if no newer load has started since; otherwise
    the result is dropped. The snapshot is replaced by a single assignment.
    """

    def __init__(self, ingester: DirectoryIngester | None = None) -> None:
        self._ingester = ingester or DirectoryIngester()
        self._generation = 0
        self._in_flight = 0
        self._current = Snapshot()

    @property
    def current(self) -> Snapshot:
        return self._current

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def load(self, opener: RootOpener) -> Snapshot | None:
        """Open a root via *opener*, ingest it, and apply it if still current.

        Returns the applied snapshot, or None when the root could not be
        opened or a newer load superseded this one.
        """
        self._generation += 1
        ticket = self._generation
        self._in_flight += 1
        try:
            try:
                root = await opener()
                entries = await self._ingester.ingest(root)
            except (RootUnavailableError, OSError) as e:
                logger.warning("Could not open directory: %s", e)
                return None

            if ticket != self._generation:
                logger.debug(
                    "Discarding stale ingestion %d (latest is %d)", ticket, self._generation
                )
                return None

            snapshot = Snapshot(title=root.name, entries=entries, generation=ticket)
            self._current = snapshot
            logger.info("Loaded %r: %d root entries", root.name, len(entries))
            return snapshot
        finally:
            self._in_flight -= 1
