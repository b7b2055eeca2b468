# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Snapshots map figures into immutable RGBA frames after each playback step.
- Assembles one contiguous, time-ordered MovieBuffer per channel.
- Writes frame sequences to PNG files for downstream video tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

import imageio.v3 as iio
import numpy as np
from matplotlib.figure import Figure
from wavecast import logger

from wavecast.viz.targets import TargetRegistry


@dataclass(frozen=True, eq=False)
class Frame:
    """Rendered pixels of one figure at one time step."""

    step: int
    time: np.datetime64
    image: np.ndarray

    @property
    def size(self) -> tuple:
        return self.image.shape[1], self.image.shape[0]


def capture_frame(figure: Figure, step: int, time: np.datetime64) -> Frame:
    """Draw ``figure`` and copy its canvas into a read-only RGBA frame."""
    figure.canvas.draw()
    image = np.array(figure.canvas.buffer_rgba(), dtype=np.uint8, copy=True)
    image.setflags(write=False)
    return Frame(step=step, time=np.datetime64(time, "ns"), image=image)


class MovieBuffer(Sequence[Frame]):
    """Frames of one channel; position ``k`` always holds time step ``k``."""

    def __init__(self, channel: int, name: str = ""):
        self.channel = channel
        self.name = name
        self._frames: List[Frame] = []

    def append(self, frame: Frame) -> None:
        if frame.step != len(self._frames):
            raise ValueError(
                f"Frame for step {frame.step} cannot follow {len(self._frames)} frames in channel {self.channel}."
            )
        self._frames.append(frame)

    def __getitem__(self, index):  # type: ignore[override]
        return self._frames[index]

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    @property
    def times(self) -> np.ndarray:
        return np.array([frame.time for frame in self._frames], dtype="datetime64[ns]")

    def __repr__(self) -> str:
        return f"MovieBuffer(channel={self.channel}, name={self.name!r}, frames={len(self)})"


class MovieAssembler:
    """Captures each host figure once per step and files the frame under its channels."""

    def __init__(self, registry: TargetRegistry, names: Sequence[str] = ()):
        self.registry = registry
        self.buffers = [
            MovieBuffer(channel=target.channel, name=names[target.channel] if names else "")
            for target in registry.targets
        ]
        self._figure_channels: Dict[int, tuple] = {
            id(fig): registry.channels_on(fig) for fig in registry.figures
        }

    def capture(self, step: int, time: np.datetime64) -> None:
        for fig in self.registry.figures:
            frame = capture_frame(fig, step, time)
            for channel in self._figure_channels[id(fig)]:
                self.buffers[channel].append(frame)

    def movies(self) -> List[MovieBuffer]:
        return list(self.buffers)


def save_frames(movie: MovieBuffer, directory: Path | str, prefix: str = "frame") -> List[Path]:
    """Write every frame of ``movie`` as ``<prefix>_<step>.png`` under ``directory``."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for frame in movie:
        path = out_dir / f"{prefix}_{frame.step:05d}.png"
        iio.imwrite(path, frame.image)
        paths.append(path)
    logger.info("Wrote %d frames for %s to %s", len(paths), movie.name or movie.channel, out_dir)
    return paths
