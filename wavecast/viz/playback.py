# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Plays a WaveWatch III hindcast as a map movie by mutating the first frame's maps in place.
- Runs a BUILDING -> RUNNING -> DONE/ABORTED loop: fetch, pace, update, optionally capture.
- Returns one MovieBuffer per channel when frames are requested; partial movies are never returned.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from matplotlib import pyplot as plt
from wavecast import logger

from wavecast.config import PlaybackConfig
from wavecast.core.records import Record
from wavecast.errors import InvalidDatasetError, RenderSetupError
from wavecast.ingest.sources import DatasetIdentifier, RecordSource, open_record_source
from wavecast.viz.capture import MovieAssembler, MovieBuffer
from wavecast.viz.map import render_record
from wavecast.viz.targets import RenderTarget, TargetRegistry
from wavecast.viz.update import format_time, update_targets

Renderer = Callable[..., Sequence[RenderTarget]]


class PlaybackState(str, Enum):
    BUILDING = "building"
    RUNNING = "running"
    DONE = "done"
    ABORTED = "aborted"


class Pacer:
    """The loop's only suspension point: waits ``delay`` seconds before each update."""

    def __init__(self, delay: float, sleep: Callable[[float], Any] = time.sleep):
        self.delay = float(delay)
        self.sleep = sleep

    def wait(self) -> None:
        if self.delay > 0.0:
            self.sleep(self.delay)


def build_initial_frame(
    record: Record,
    renderer: Renderer = render_record,
    options: Optional[Mapping[str, Any]] = None,
) -> TargetRegistry:
    """Render ``record`` once and freeze the resulting channel -> target registry."""
    options = dict(options or {})
    n_channels = len(record.channels)
    parents = options.get("parents")
    if parents is not None and len(parents) < n_channels:
        raise RenderSetupError(
            f"Got {len(parents)} parent axes for {n_channels} channels; pass one axes per channel."
        )
    targets = list(renderer(record, **options))
    if len(targets) != n_channels:
        raise RenderSetupError(f"Renderer produced {len(targets)} targets for {n_channels} channels.")
    for idx, target in enumerate(targets):
        if target.channel != idx:
            raise RenderSetupError(f"Renderer returned channel {target.channel} at position {idx}.")
    registry = TargetRegistry.from_targets(targets)
    logger.info(
        "Initial frame %s: %d map(s) on %d figure(s)",
        format_time(record.time),
        len(registry),
        len(registry.figures),
    )
    return registry


def _is_interactive(registry: TargetRegistry) -> bool:
    return any(getattr(fig.canvas, "required_interactive_framework", None) for fig in registry.figures)


def redraw(registry: TargetRegistry) -> None:
    for fig in registry.figures:
        fig.canvas.draw_idle()
        fig.canvas.flush_events()


class PlaybackLoop:
    """Drives one map-movie run over a :class:`RecordSource`."""

    def __init__(
        self,
        source: RecordSource,
        config: Optional[PlaybackConfig] = None,
        renderer: Renderer = render_record,
        pacer: Optional[Pacer] = None,
    ):
        self.source = source
        self.config = config or PlaybackConfig()
        self.renderer = renderer
        self._default_pacer = pacer is None
        self.pacer = pacer or Pacer(self.config.delay)
        self.state = PlaybackState.BUILDING
        self.registry: Optional[TargetRegistry] = None
        self.steps_completed = 0

    def run(self) -> Optional[List[MovieBuffer]]:
        """Play every record; returns the movies when ``config.make_movie`` is set."""
        if self.state is not PlaybackState.BUILDING:
            raise RuntimeError(f"PlaybackLoop already {self.state.value}; create a new loop per run.")
        assembler: Optional[MovieAssembler] = None
        try:
            n_records = self.source.record_count()
            first = self.source.get_record(0)
            self.registry = build_initial_frame(first, self.renderer, self.config.renderer_options())
            if self.config.make_movie:
                assembler = MovieAssembler(self.registry, names=[ch.name for ch in first.channels])
                assembler.capture(0, first.time)
            elif _is_interactive(self.registry):
                plt.show(block=False)
                if self._default_pacer:
                    # keep the GUI event loop running while waiting
                    self.pacer.sleep = plt.pause
            self.steps_completed = 1
            self.state = PlaybackState.RUNNING

            for index in range(1, n_records):
                record = self.source.get_record(index)
                self.pacer.wait()
                update_targets(record, self.registry.targets)
                redraw(self.registry)
                if assembler is not None:
                    assembler.capture(index, record.time)
                self.steps_completed = index + 1
        except Exception as exc:
            self.state = PlaybackState.ABORTED
            logger.error("Playback aborted after %d step(s): %s", self.steps_completed, exc)
            raise

        self.state = PlaybackState.DONE
        logger.info("Playback finished: %d step(s)", self.steps_completed)
        return assembler.movies() if assembler is not None else None


def play_movie(
    dataset: Optional[Union[DatasetIdentifier, RecordSource]] = None,
    delay: Optional[float] = None,
    clim: Optional[Sequence[float]] = None,
    cmap: Any = None,
    *,
    make_movie: bool = False,
    engine: Optional[str] = None,
    renderer: Renderer = render_record,
    pacer: Optional[Pacer] = None,
    config: Optional[PlaybackConfig] = None,
    **map_options: Any,
) -> Optional[List[MovieBuffer]]:
    """Play (and optionally record) a WaveWatch III hindcast map movie.

    Args:
        dataset: Archive path, :class:`~wavecast.core.records.WW3Dataset`, in-memory
            ``xarray.Dataset``, WW3 field mapping, or a ready :class:`RecordSource`.
        delay: Seconds between time steps (default 0.33).
        clim: Colour limits for every channel.
        cmap: Colormap for every channel.
        make_movie: Capture frames and return one :class:`MovieBuffer` per channel.
        engine: xarray engine for archive paths (e.g. ``"cfgrib"``).
        renderer: Callable drawing the first record; defaults to :func:`render_record`.
        pacer: Override the pacing step (tests, custom event loops).
        config: Pre-built configuration; replaces delay/clim/cmap/make_movie/engine/map options.
        **map_options: Forwarded to the renderer (``parents``, ``projection``, ``coastlines``...).

    Returns:
        The movies when ``make_movie`` is true, otherwise ``None`` after live playback.
    """
    if config is None:
        config = PlaybackConfig.create(
            delay=delay,
            clim=tuple(clim) if clim is not None else None,
            cmap=cmap,
            make_movie=make_movie,
            engine=engine,
            map_options=map_options,
        )
    if dataset is None:
        raise InvalidDatasetError("No dataset given; pass an archive path or an in-memory dataset.")
    source = open_record_source(dataset, engine=config.engine)
    logger.info(
        "Playing %d record(s) with delay %.2fs%s",
        source.record_count(),
        config.delay,
        " (recording)" if config.make_movie else "",
    )
    return PlaybackLoop(source, config, renderer=renderer, pacer=pacer).run()
