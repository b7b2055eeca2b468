# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Centralizes matplotlib style customizations for wavecast map movies.
- Maps WW3 quantities (heights, periods, directions, wind components) to default limits and colormaps.
- Ensures every channel opens with a sensible colour range when the caller gives none.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from matplotlib import pyplot as plt

from wavecast.core.records import Channel

BACKGROUND = "#0b1d3a"

_COMPONENT_NAMES = {"u", "v", "u10", "v10", "ugrd", "vgrd", "ugrdsfc", "vgrdsfc", "uwnd", "vwnd"}


@dataclass(frozen=True)
class QuantityStyle:
    clim: Tuple[float, float]
    cmap: str


SPEED_STYLE = QuantityStyle(clim=(0.0, 15.0), cmap="inferno")
PERIOD_STYLE = QuantityStyle(clim=(0.0, 20.0), cmap="inferno")
DIRECTION_STYLE = QuantityStyle(clim=(0.0, 360.0), cmap="hsv")
COMPONENT_STYLE = QuantityStyle(clim=(-15.0, 15.0), cmap="inferno")


def apply_style() -> None:
    """Register the wavecast matplotlib style globally."""
    plt.rcParams.update(
        {
            "figure.facecolor": BACKGROUND,
            "axes.facecolor": BACKGROUND,
            "axes.edgecolor": "#d6d4c6",
            "axes.labelcolor": "#f1f0ea",
            "axes.titlecolor": "#f1f0ea",
            "xtick.color": "#f1f0ea",
            "ytick.color": "#f1f0ea",
            "font.size": 11,
            "font.family": "DejaVu Sans",
            "savefig.facecolor": BACKGROUND,
        }
    )


def quantity_style(channel: Channel) -> QuantityStyle:
    """Pick default colour limits and colormap from a channel's name and description."""
    name = channel.name.lower()
    description = channel.description.lower()
    if "dir" in name or "direction" in description:
        return DIRECTION_STYLE
    if name in _COMPONENT_NAMES or "component" in description:
        return COMPONENT_STYLE
    if "per" in name or name in {"tp", "tm", "t01", "t02"} or "period" in description:
        return PERIOD_STYLE
    return SPEED_STYLE
