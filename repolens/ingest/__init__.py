"""Directory ingestion: handles, the Entry model, and the ingestion session."""

from repolens.ingest.handles import (
    DirectoryHandle,
    FileHandle,
    LocalDirectoryHandle,
    LocalFileHandle,
    RootUnavailableError,
)
from repolens.ingest.ingester import DirectoryIngester
from repolens.ingest.models import Entry, find_entry, iter_entries, join_path
from repolens.ingest.session import IngestionSession, Snapshot

__all__ = [
    "DirectoryHandle",
    "DirectoryIngester",
    "Entry",
    "FileHandle",
    "IngestionSession",
    "LocalDirectoryHandle",
    "LocalFileHandle",
    "RootUnavailableError",
    "Snapshot",
    "find_entry",
    "iter_entries",
    "join_path",
]
