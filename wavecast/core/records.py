# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Describes WaveWatch III hindcast grids, channels, single-time records, and full datasets.
- Validates shapes, step sizes, and time ordering so playback never sees malformed input.
- Converts in-memory xarray datasets (or single time slices) into the wavecast model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
import xarray as xr

from wavecast.errors import InvalidDatasetError

NO_DATA = np.nan

MAPPING_FIELDS = ("description", "units", "data", "lat", "lon", "time")

LAT_NAMES = ("lat", "latitude", "y")
LON_NAMES = ("lon", "longitude", "x")
TIME_NAMES = ("time", "valid_time", "t")


def _axis_step(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    return float(values[1] - values[0])


@dataclass(frozen=True, eq=False)
class Grid:
    """Regular lat/lon grid shared by every record of a dataset."""

    lat: np.ndarray
    lon: np.ndarray
    lat_step: Optional[float] = None
    lon_step: Optional[float] = None

    def __post_init__(self) -> None:
        lat = np.asarray(self.lat, dtype=float)
        lon = np.asarray(self.lon, dtype=float)
        if lat.ndim != 1 or lon.ndim != 1 or lat.size == 0 or lon.size == 0:
            raise InvalidDatasetError("Grid axes must be non-empty 1-D arrays.")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)
        if self.lat_step is None:
            object.__setattr__(self, "lat_step", _axis_step(lat))
        if self.lon_step is None:
            object.__setattr__(self, "lon_step", _axis_step(lon))
        for name, axis, step in (("lat", lat, self.lat_step), ("lon", lon, self.lon_step)):
            if axis.size > 1 and not np.allclose(np.diff(axis), step):
                raise InvalidDatasetError(f"Grid {name} axis is not evenly spaced by {step}.")

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix shape of one channel: (longitudes, latitudes)."""
        return (self.lon.size, self.lat.size)

    def matches(self, other: "Grid") -> bool:
        return (
            self.shape == other.shape
            and np.allclose(self.lat, other.lat)
            and np.allclose(self.lon, other.lon)
        )


@dataclass(frozen=True)
class Channel:
    """One physical quantity carried by every record (e.g. significant wave height)."""

    name: str
    description: str
    units: str = ""


@dataclass(frozen=True, eq=False)
class Record:
    """Values of every channel at a single time step."""

    time: np.datetime64
    grid: Grid
    channels: Tuple[Channel, ...]
    data: Tuple[np.ndarray, ...]

    def __post_init__(self) -> None:
        channels = tuple(self.channels)
        data = tuple(np.asarray(values, dtype=float) for values in self.data)
        if not channels:
            raise InvalidDatasetError("Record has no channels.")
        if len(data) != len(channels):
            raise InvalidDatasetError(
                f"Record carries {len(data)} matrices for {len(channels)} channels."
            )
        for channel, values in zip(channels, data):
            if values.shape != self.grid.shape:
                raise InvalidDatasetError(
                    f"Channel {channel.name!r} has shape {values.shape}, grid expects {self.grid.shape}."
                )
        object.__setattr__(self, "time", np.datetime64(self.time, "ns"))
        object.__setattr__(self, "channels", channels)
        object.__setattr__(self, "data", data)

    def values(self, channel: int) -> np.ndarray:
        return self.data[channel]


@dataclass(eq=False)
class WW3Dataset:
    """Fully materialized hindcast: one (time, lon, lat) array per channel."""

    grid: Grid
    channels: Tuple[Channel, ...]
    times: np.ndarray
    data: Tuple[np.ndarray, ...]
    path: Optional[Path] = None
    attrs: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            self.channels = tuple(self.channels)
            self.times = np.asarray(self.times).astype("datetime64[ns]")
            self.data = tuple(np.asarray(values, dtype=float) for values in self.data)
        except (TypeError, ValueError) as exc:
            raise InvalidDatasetError(f"Malformed dataset fields: {exc}") from exc

    @property
    def n_records(self) -> int:
        return int(self.times.size)

    def validate(self) -> "WW3Dataset":
        """Check structure; raises :class:`InvalidDatasetError` on the first problem found."""
        if not isinstance(self.grid, Grid):
            raise InvalidDatasetError("Dataset grid must be a wavecast Grid.")
        if not self.channels or not all(isinstance(ch, Channel) for ch in self.channels):
            raise InvalidDatasetError("Dataset requires at least one Channel.")
        if self.times.ndim != 1 or self.times.size == 0:
            raise InvalidDatasetError("Dataset requires a non-empty 1-D time axis.")
        if self.times.size > 1 and not np.all(np.diff(self.times) > np.timedelta64(0, "ns")):
            raise InvalidDatasetError("Dataset times must be strictly increasing.")
        if len(self.data) != len(self.channels):
            raise InvalidDatasetError(
                f"Dataset carries {len(self.data)} arrays for {len(self.channels)} channels."
            )
        expected = (self.n_records,) + self.grid.shape
        for channel, values in zip(self.channels, self.data):
            if values.shape != expected:
                raise InvalidDatasetError(
                    f"Channel {channel.name!r} has shape {values.shape}, expected {expected}."
                )
        return self

    def record(self, index: int) -> Record:
        if not 0 <= index < self.n_records:
            raise IndexError(f"Record index {index} outside [0, {self.n_records}).")
        return Record(
            time=self.times[index],
            grid=self.grid,
            channels=self.channels,
            data=tuple(values[index] for values in self.data),
        )

    @classmethod
    def from_records(cls, records: Sequence[Record], path: Optional[Path] = None) -> "WW3Dataset":
        """Stack individual records (identical grid and channels) into one dataset."""
        if not records:
            raise InvalidDatasetError("Cannot build a dataset from zero records.")
        first = records[0]
        for rec in records[1:]:
            if rec.channels != first.channels or not rec.grid.matches(first.grid):
                raise InvalidDatasetError("Records disagree on grid or channel set.")
        data = tuple(
            np.stack([rec.data[idx] for rec in records], axis=0) for idx in range(len(first.channels))
        )
        times = np.array([rec.time for rec in records], dtype="datetime64[ns]")
        return cls(grid=first.grid, channels=first.channels, times=times, data=data, path=path)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "WW3Dataset":
        """Build a dataset from a plain mapping of WW3 fields.

        Required keys are ``description``, ``units``, ``data``, ``lat``, ``lon``
        and ``time``; ``name``, ``latstep``, ``lonstep`` and ``path`` are optional.
        ``data`` holds one entry per channel, each a (time, lon, lat) array or a
        list of (lon, lat) matrices.
        """
        missing = [key for key in MAPPING_FIELDS if key not in payload]
        if missing:
            raise InvalidDatasetError(f"WW3 mapping is missing fields: {', '.join(missing)}")
        descriptions = list(payload["description"])
        units = list(payload["units"])
        names = list(payload.get("name") or [f"channel{idx}" for idx in range(len(descriptions))])
        if not len(names) == len(descriptions) == len(units) == len(payload["data"]):
            raise InvalidDatasetError("WW3 mapping has mismatched name/description/units/data lengths.")
        grid = Grid(
            lat=payload["lat"],
            lon=payload["lon"],
            lat_step=payload.get("latstep"),
            lon_step=payload.get("lonstep"),
        )
        path = payload.get("path")
        return cls(
            grid=grid,
            channels=tuple(Channel(str(n), str(d), str(u)) for n, d, u in zip(names, descriptions, units)),
            times=np.atleast_1d(np.asarray(payload["time"])),
            data=tuple(payload["data"]),
            path=Path(path) if path else None,
        ).validate()

    @classmethod
    def from_xarray(cls, ds: xr.Dataset, path: Optional[Path] = None) -> "WW3Dataset":
        """Convert an in-memory ``xarray.Dataset`` with time/lat/lon dimensions."""
        time_dim = find_dim(ds, TIME_NAMES)
        if time_dim is None:
            raise InvalidDatasetError("Dataset has no time dimension.")
        if time_dim not in ds.dims:
            ds = ds.expand_dims(time_dim)
        grid = grid_from_xarray(ds)
        channels, arrays = _channel_arrays(ds, (time_dim,))
        times = np.atleast_1d(ds[time_dim].values)
        return cls(
            grid=grid,
            channels=channels,
            times=times,
            data=tuple(arrays),
            path=path,
            attrs=dict(ds.attrs),
        ).validate()


def find_dim(ds: xr.Dataset, candidates: Iterable[str]) -> Optional[str]:
    for name in candidates:
        if name in ds.dims or name in ds.coords:
            return name
    return None


def grid_from_xarray(ds: xr.Dataset) -> Grid:
    lat_name = find_dim(ds, LAT_NAMES)
    lon_name = find_dim(ds, LON_NAMES)
    if lat_name is None or lon_name is None:
        raise InvalidDatasetError("Dataset needs latitude and longitude coordinates.")
    return Grid(lat=np.atleast_1d(ds[lat_name].values), lon=np.atleast_1d(ds[lon_name].values))


def channel_from_variable(name: str, var: xr.DataArray) -> Channel:
    description = var.attrs.get("long_name") or var.attrs.get("GRIB_name") or name
    return Channel(name=str(name), description=str(description), units=str(var.attrs.get("units", "")))


def _channel_arrays(ds: xr.Dataset, leading: Tuple[str, ...]) -> Tuple[Tuple[Channel, ...], list]:
    lat_name = find_dim(ds, LAT_NAMES)
    lon_name = find_dim(ds, LON_NAMES)
    order = leading + (lon_name, lat_name)
    channels = []
    arrays = []
    for name, var in ds.data_vars.items():
        if set(var.dims) != set(order):
            continue
        channels.append(channel_from_variable(name, var))
        arrays.append(var.transpose(*order).values.astype(float))
    if not channels:
        raise InvalidDatasetError(f"No data variables span dimensions {order}.")
    return tuple(channels), arrays


def record_from_xarray(ds: xr.Dataset) -> Record:
    """Convert a dataset already reduced to a single time step into a :class:`Record`."""
    time_name = find_dim(ds, TIME_NAMES)
    if time_name is None:
        raise InvalidDatasetError("Record slice carries no time coordinate.")
    if time_name in ds.dims:
        if ds.sizes[time_name] != 1:
            raise InvalidDatasetError("Record slice must contain exactly one time step.")
        ds = ds.isel({time_name: 0})
    channels, arrays = _channel_arrays(ds, ())
    return Record(
        time=np.datetime64(ds[time_name].values[()], "ns"),
        grid=grid_from_xarray(ds),
        channels=channels,
        data=tuple(arrays),
    )
