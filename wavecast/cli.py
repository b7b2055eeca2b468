# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Typer-based command line interface for playing and recording WW3 map movies.
- Offers commands for live playback, PNG frame export, and archive inspection.
- Entry point exposed as ``wavecast`` via the pyproject console script.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from matplotlib import pyplot as plt

from wavecast import configure_logging, logger
from wavecast.config import PlaybackConfig, load_config
from wavecast.errors import WavecastError
from wavecast.ingest.archive import read_archive_metadata
from wavecast.ingest.sources import open_record_source
from wavecast.viz.capture import save_frames
from wavecast.viz.playback import PlaybackLoop
from wavecast.viz.update import format_time

app = typer.Typer(help="WaveWatch III hindcast map movies")


def _build_config(
    config: Optional[Path],
    delay: Optional[float],
    clim: Optional[Tuple[float, float]],
    cmap: Optional[str],
    engine: Optional[str],
    coastlines: bool,
    make_movie: bool,
) -> PlaybackConfig:
    overrides: Dict[str, Any] = {
        "delay": delay,
        "clim": tuple(clim) if clim else None,
        "cmap": cmap,
        "engine": engine,
        "make_movie": make_movie,
    }
    if config is not None:
        cfg = load_config(config, **overrides)
    else:
        cfg = PlaybackConfig.create(**{key: value for key, value in overrides.items() if value is not None})
    if not coastlines:
        cfg = cfg.model_copy(update={"map_options": {**cfg.map_options, "coastlines": False}})
    return cfg


def _run(archive: Path, cfg: PlaybackConfig):
    source = open_record_source(archive, engine=cfg.engine)
    return PlaybackLoop(source, cfg).run()


@app.command("play")
def play(
    archive: Path = typer.Argument(..., exists=True, dir_okay=False, help="WW3 NetCDF or GRIB archive."),
    delay: Optional[float] = typer.Option(None, "--delay", help="Seconds between time steps (default 0.33)."),
    clim: Optional[Tuple[float, float]] = typer.Option(None, "--clim", help="Colour limits LOW HIGH."),
    cmap: Optional[str] = typer.Option(None, "--cmap", help="Matplotlib colormap name."),
    engine: Optional[str] = typer.Option(None, "--engine", help="xarray engine, e.g. cfgrib."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, help="YAML playback preset."),
    coastlines: bool = typer.Option(True, "--coastlines/--no-coastlines"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Play the archive as a live map movie."""
    configure_logging(verbose)
    try:
        cfg = _build_config(config, delay, clim, cmap, engine, coastlines, make_movie=False)
        _run(archive, cfg)
    except (WavecastError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("frames")
def frames(
    archive: Path = typer.Argument(..., exists=True, dir_okay=False, help="WW3 NetCDF or GRIB archive."),
    out: Path = typer.Option(Path("results/frames"), "--out", help="Directory receiving one folder per channel."),
    delay: float = typer.Option(0.0, "--delay", help="Seconds between time steps while recording."),
    clim: Optional[Tuple[float, float]] = typer.Option(None, "--clim", help="Colour limits LOW HIGH."),
    cmap: Optional[str] = typer.Option(None, "--cmap", help="Matplotlib colormap name."),
    engine: Optional[str] = typer.Option(None, "--engine", help="xarray engine, e.g. cfgrib."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, help="YAML playback preset."),
    coastlines: bool = typer.Option(True, "--coastlines/--no-coastlines"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Record the movie and write each channel's frames as PNG files."""
    configure_logging(verbose)
    try:
        cfg = _build_config(config, delay, clim, cmap, engine, coastlines, make_movie=True)
        movies = _run(archive, cfg) or []
    except (WavecastError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    written: List[Path] = []
    for movie in movies:
        label = movie.name or f"channel{movie.channel}"
        written.extend(save_frames(movie, out / label, prefix=label))
    plt.close("all")
    typer.echo(f"Wrote {len(written)} frames for {len(movies)} channel(s) to {out}")


@app.command("info")
def info(
    archive: Path = typer.Argument(..., exists=True, dir_okay=False, help="WW3 NetCDF or GRIB archive."),
    engine: Optional[str] = typer.Option(None, "--engine", help="xarray engine, e.g. cfgrib."),
) -> None:
    """Summarize records, grid, and channels of an archive."""
    try:
        meta = read_archive_metadata(archive, engine)
    except WavecastError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    grid = meta.grid
    typer.echo(f"Archive: {meta.path}")
    typer.echo(f"Records: {meta.n_records} ({format_time(meta.start)} -> {format_time(meta.end)})")
    typer.echo(
        f"Grid: {grid.lon.size} x {grid.lat.size} "
        f"(lon {grid.lon[0]:g}..{grid.lon[-1]:g} step {grid.lon_step:g}, "
        f"lat {grid.lat[0]:g}..{grid.lat[-1]:g} step {grid.lat_step:g})"
    )
    for channel in meta.channels:
        typer.echo(f"  {channel.name}: {channel.description} [{channel.units}]")
    logger.debug("Reported metadata for %s", archive)


if __name__ == "__main__":  # pragma: no cover
    app()
