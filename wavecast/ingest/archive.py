# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Reads WaveWatch III hindcast archives (NetCDF, or GRIB through cfgrib) with xarray.
- Offers metadata-only inspection, single-record reads, and full materialization.
- Every call opens and closes its own handle; nothing stays open between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import xarray as xr
from wavecast import logger

from wavecast.core.records import (
    LAT_NAMES,
    LON_NAMES,
    TIME_NAMES,
    Channel,
    Grid,
    Record,
    WW3Dataset,
    channel_from_variable,
    find_dim,
    grid_from_xarray,
    record_from_xarray,
)
from wavecast.errors import InvalidDatasetError

GRIB_SUFFIXES = {".grb", ".grb2", ".grib", ".grib2"}


@dataclass(frozen=True)
class ArchiveMetadata:
    """Summary of an archive gathered without reading any record values."""

    path: Path
    n_records: int
    grid: Grid
    channels: Tuple[Channel, ...]
    start: np.datetime64
    end: np.datetime64


def _resolve_engine(path: Path, engine: Optional[str]) -> Optional[str]:
    if engine is not None:
        return engine
    if path.suffix.lower() in GRIB_SUFFIXES:
        return "cfgrib"
    return None


def open_archive(path: Path | str, engine: Optional[str] = None) -> xr.Dataset:
    """Open an archive lazily; callers are expected to close it (use as a context manager)."""
    archive = Path(path)
    if not archive.is_file():
        raise InvalidDatasetError(f"WW3 archive not found: {archive}")
    try:
        return xr.open_dataset(archive, engine=_resolve_engine(archive, engine))
    except (OSError, ValueError, TypeError) as exc:
        raise InvalidDatasetError(f"Could not read WW3 archive {archive}: {exc}") from exc


def _time_name(ds: xr.Dataset, archive: Path) -> str:
    name = find_dim(ds, TIME_NAMES)
    if name is None or name not in ds.dims:
        raise InvalidDatasetError(f"WW3 archive {archive} has no time axis.")
    return name


def read_archive_metadata(path: Path | str, engine: Optional[str] = None) -> ArchiveMetadata:
    """Return record count, grid, and channels using only coordinate reads."""
    archive = Path(path)
    with open_archive(archive, engine) as ds:
        time_name = _time_name(ds, archive)
        times = ds[time_name].values
        if times.size == 0:
            raise InvalidDatasetError(f"WW3 archive {archive} contains no records.")
        grid = grid_from_xarray(ds)
        dims = {time_name, find_dim(ds, LAT_NAMES), find_dim(ds, LON_NAMES)}
        channels = tuple(
            channel_from_variable(name, var)
            for name, var in ds.data_vars.items()
            if set(var.dims) == dims
        )
        if not channels:
            raise InvalidDatasetError(f"WW3 archive {archive} has no gridded data variables.")
        meta = ArchiveMetadata(
            path=archive,
            n_records=int(times.size),
            grid=grid,
            channels=channels,
            start=np.datetime64(times[0], "ns"),
            end=np.datetime64(times[-1], "ns"),
        )
    logger.info(
        "Archive %s: %d records, %dx%d grid, channels=%s",
        archive,
        meta.n_records,
        grid.lon.size,
        grid.lat.size,
        ",".join(ch.name for ch in channels),
    )
    return meta


def read_archive_record(path: Path | str, index: int, engine: Optional[str] = None) -> Record:
    """Read the single record at ``index`` and release the file before returning."""
    archive = Path(path)
    with open_archive(archive, engine) as ds:
        time_name = _time_name(ds, archive)
        n_records = ds.sizes[time_name]
        if not 0 <= index < n_records:
            raise IndexError(f"Record index {index} outside [0, {n_records}) for {archive}.")
        record = record_from_xarray(ds.isel({time_name: index}).load())
    logger.debug("Read record %d (%s) from %s", index, record.time, archive)
    return record


def load_archive(path: Path | str, engine: Optional[str] = None) -> WW3Dataset:
    """Materialize every record of an archive into a :class:`WW3Dataset`."""
    archive = Path(path)
    with open_archive(archive, engine) as ds:
        _time_name(ds, archive)
        dataset = WW3Dataset.from_xarray(ds.load(), path=archive)
    logger.info("Loaded %d records from %s", dataset.n_records, archive)
    return dataset
