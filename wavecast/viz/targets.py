# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Defines RenderTarget, the persistent per-channel mesh that playback mutates in place.
- Groups targets into a fixed, channel-ordered registry together with their host figures.
- Detects targets whose figure was closed or whose axes were removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from matplotlib import pyplot as plt
from matplotlib.axes import Axes
from matplotlib.collections import QuadMesh
from matplotlib.figure import Figure
from matplotlib.text import Text


@dataclass(eq=False)
class RenderTarget:
    """One channel's map: the axes, its mesh artist, and the padded data shape it accepts."""

    channel: int
    ax: Axes
    mesh: QuadMesh
    data_shape: Tuple[int, int]
    figure_number: Optional[int] = None

    @property
    def figure(self) -> Figure:
        return self.ax.figure

    @property
    def title(self) -> Text:
        return self.ax.title

    def is_alive(self) -> bool:
        fig = self.ax.figure
        if fig is None or self.ax not in fig.axes:
            return False
        if self.mesh.axes is not self.ax or self.mesh not in self.ax.collections:
            return False
        if self.figure_number is not None and not plt.fignum_exists(self.figure_number):
            return False
        return True


@dataclass(frozen=True)
class TargetRegistry:
    """Targets indexed by channel, plus the distinct figures hosting them in first-seen order."""

    targets: Tuple[RenderTarget, ...]
    figures: Tuple[Figure, ...]

    @classmethod
    def from_targets(cls, targets: Sequence[RenderTarget]) -> "TargetRegistry":
        figures = []
        for target in targets:
            if not any(target.figure is fig for fig in figures):
                figures.append(target.figure)
        return cls(targets=tuple(targets), figures=tuple(figures))

    def __len__(self) -> int:
        return len(self.targets)

    def __getitem__(self, channel: int) -> RenderTarget:
        return self.targets[channel]

    def channels_on(self, figure: Figure) -> Tuple[int, ...]:
        return tuple(target.channel for target in self.targets if target.figure is figure)


def pyplot_number(figure: Figure) -> Optional[int]:
    """Figure number if pyplot manages ``figure``, else ``None``."""
    number = getattr(figure, "number", None)
    if isinstance(number, int) and plt.fignum_exists(number):
        return number
    return None
