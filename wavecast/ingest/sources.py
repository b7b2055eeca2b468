# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Encapsulates record retrieval for playback behind a RecordSource interface.
- Streams one record per call from an archive, or looks records up in memory.
- open_record_source() picks the strategy once from the dataset identifier.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import xarray as xr
from wavecast import logger

from wavecast.core.records import Record, WW3Dataset
from wavecast.errors import InvalidDatasetError
from wavecast.ingest.archive import ArchiveMetadata, read_archive_metadata, read_archive_record

DatasetIdentifier = Union[str, os.PathLike, WW3Dataset, xr.Dataset, Mapping[str, Any]]


class RecordSource(ABC):
    """Abstract base class for time-ordered record providers."""

    @abstractmethod
    def record_count(self) -> int:
        """Return the number of records (always >= 1)."""

    @abstractmethod
    def get_record(self, index: int) -> Record:
        """Return record ``index`` for ``0 <= index < record_count()``."""

    def __len__(self) -> int:
        return self.record_count()


class StreamingRecordSource(RecordSource):
    """Reads one record at a time from an archive, reopening the file on each call."""

    def __init__(self, path: Union[str, os.PathLike], engine: Optional[str] = None):
        self.path = Path(path)
        self.engine = engine
        self.metadata: ArchiveMetadata = read_archive_metadata(self.path, engine)

    def record_count(self) -> int:
        return self.metadata.n_records

    def get_record(self, index: int) -> Record:
        return read_archive_record(self.path, index, self.engine)


class InMemoryRecordSource(RecordSource):
    """Serves records from a fully materialized dataset."""

    def __init__(self, dataset: Union[WW3Dataset, xr.Dataset]):
        if isinstance(dataset, xr.Dataset):
            dataset = WW3Dataset.from_xarray(dataset)
        self.dataset = dataset.validate()

    def record_count(self) -> int:
        return self.dataset.n_records

    def get_record(self, index: int) -> Record:
        return self.dataset.record(index)


def open_record_source(identifier: DatasetIdentifier, engine: Optional[str] = None) -> RecordSource:
    """Build the record source matching ``identifier``."""
    if isinstance(identifier, RecordSource):
        return identifier
    if isinstance(identifier, (str, os.PathLike)):
        source: RecordSource = StreamingRecordSource(identifier, engine=engine)
    elif isinstance(identifier, (WW3Dataset, xr.Dataset)):
        source = InMemoryRecordSource(identifier)
    elif isinstance(identifier, Mapping):
        source = InMemoryRecordSource(WW3Dataset.from_mapping(identifier))
    elif isinstance(identifier, (list, tuple)):
        raise InvalidDatasetError(
            f"Expected exactly one dataset, got a sequence of {len(identifier)}."
        )
    else:
        raise InvalidDatasetError(
            f"Dataset must be an archive path or a WW3Dataset, not {type(identifier).__name__}."
        )
    logger.debug("Using %s with %d records", type(source).__name__, source.record_count())
    return source
