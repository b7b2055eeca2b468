"""Shared fixtures: synthetic WW3 datasets and NetCDF archives on a headless backend."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
import xarray as xr
from matplotlib import pyplot as plt

from wavecast.core.records import Channel, Grid, WW3Dataset

HS = Channel("hs", "significant height of combined wind waves and swell", "m")
U = Channel("u", "u-component of wind", "m s-1")
V = Channel("v", "v-component of wind", "m s-1")


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def make_dataset():
    """Factory for (time, lon, lat) datasets with a NaN land cell in the last column."""

    def _make(n_times: int = 3, n_lon: int = 4, n_lat: int = 3, channels=(HS,)) -> WW3Dataset:
        grid = Grid(lat=np.linspace(-10.0, -10.0 + 0.5 * (n_lat - 1), n_lat), lon=np.arange(n_lon) * 1.0 + 200.0)
        times = np.datetime64("2012-05-04T00:00", "ns") + np.arange(n_times) * np.timedelta64(3, "h")
        data = []
        for c_idx, _ in enumerate(channels):
            values = np.arange(n_times * n_lon * n_lat, dtype=float).reshape(n_times, n_lon, n_lat) + 100.0 * c_idx
            values[:, -1, -1] = np.nan
            data.append(values)
        return WW3Dataset(grid=grid, channels=tuple(channels), times=times, data=tuple(data)).validate()

    return _make


@pytest.fixture
def small_dataset():
    """One channel, three steps, 2x2 grid with the bottom-right cell missing."""
    grid = Grid(lat=[0.0, 1.0], lon=[0.0, 1.0])
    data = np.array(
        [
            [[1.0, 2.0], [3.0, np.nan]],
            [[2.0, 3.0], [4.0, np.nan]],
            [[3.0, 4.0], [5.0, np.nan]],
        ]
    )
    times = np.array(["2014-02-05T00:00", "2014-02-05T03:00", "2014-02-05T06:00"], dtype="datetime64[ns]")
    return WW3Dataset(grid=grid, channels=(HS,), times=times, data=(data,)).validate()


def to_xarray(dataset: WW3Dataset) -> xr.Dataset:
    data_vars = {}
    for channel, values in zip(dataset.channels, dataset.data):
        data_vars[channel.name] = xr.Variable(
            ("time", "latitude", "longitude"),
            np.transpose(values, (0, 2, 1)),
            attrs={"long_name": channel.description, "units": channel.units},
        )
    return xr.Dataset(
        data_vars,
        coords={"time": dataset.times, "latitude": dataset.grid.lat, "longitude": dataset.grid.lon},
    )


@pytest.fixture
def write_archive(tmp_path):
    def _write(dataset: WW3Dataset, name: str = "multi_1.glo_30m.hs.201205.nc"):
        path = tmp_path / name
        to_xarray(dataset).to_netcdf(path)
        return path

    return _write


@pytest.fixture
def archive_path(make_dataset, write_archive):
    return write_archive(make_dataset())


@pytest.fixture
def plain_axes():
    """Headless renderer options: plain matplotlib axes, no cartopy features."""
    return {"projection": None, "coastlines": False}


@pytest.fixture
def as_xarray():
    return to_xarray
