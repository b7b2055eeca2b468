"""
File Summary:
- Collects archive readers and record sources feeding the playback loop.
- Exposes ``open_record_source`` and ``load_archive`` for scripts and the CLI.
- Integrates with wavecast.viz.playback, which consumes RecordSource objects.
"""

from .archive import ArchiveMetadata, load_archive, read_archive_metadata, read_archive_record
from .sources import InMemoryRecordSource, RecordSource, StreamingRecordSource, open_record_source

__all__ = [
    "ArchiveMetadata",
    "load_archive",
    "read_archive_metadata",
    "read_archive_record",
    "RecordSource",
    "StreamingRecordSource",
    "InMemoryRecordSource",
    "open_record_source",
]
