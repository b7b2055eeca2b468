# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Pushes a new hindcast record into existing map meshes without recreating them.
- Pads channel matrices to the cell-edge layout pcolormesh expects and hides no-data cells.
- Refuses to touch any target once one of them has been closed or removed.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pandas as pd
from wavecast import logger

from wavecast.core.records import Channel, Record
from wavecast.errors import InvalidDatasetError, TargetLostError
from wavecast.viz.targets import RenderTarget

SOURCE_LABEL = "NOAA WaveWatch III Hindcast"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def pad_cell_edges(values: np.ndarray) -> np.ndarray:
    """Repeat the last row and column of an R x S matrix, then transpose to (S+1, R+1).

    The renderer draws one more edge than cells along each axis, so the final
    row/column of data is duplicated to give that edge a value.
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 2 or 0 in values.shape:
        raise InvalidDatasetError(f"Expected a non-empty 2-D matrix, got shape {values.shape}.")
    rows = np.r_[np.arange(values.shape[0]), values.shape[0] - 1]
    cols = np.r_[np.arange(values.shape[1]), values.shape[1] - 1]
    return values[np.ix_(rows, cols)].T


def visibility_mask(padded: np.ndarray) -> np.ndarray:
    """True where a cell holds data, False where it holds the NaN no-data sentinel."""
    return ~np.isnan(padded)


def format_time(time: np.datetime64) -> str:
    return pd.Timestamp(time).strftime(TIME_FORMAT)


def title_lines(channel: Channel, time: np.datetime64) -> Tuple[str, str, str]:
    return (SOURCE_LABEL, channel.description, format_time(time))


def check_targets(targets: Sequence[RenderTarget]) -> None:
    """Raise :class:`TargetLostError` if any target is no longer on a live figure."""
    lost = [target.channel for target in targets if not target.is_alive()]
    if lost:
        raise TargetLostError(
            f"Map axes for channel(s) {lost} disappeared (figure closed or axes removed)."
        )


def update_targets(record: Record, targets: Sequence[RenderTarget]) -> None:
    """Overwrite every target's mesh data, transparency, and title with ``record``."""
    check_targets(targets)
    if len(record.channels) != len(targets):
        raise InvalidDatasetError(
            f"Record at {record.time} has {len(record.channels)} channels for {len(targets)} targets."
        )

    # validate every channel before mutating so a bad record leaves all maps untouched
    padded_values = [pad_cell_edges(record.values(target.channel)) for target in targets]
    for target, padded in zip(targets, padded_values):
        if padded.shape != target.data_shape:
            raise InvalidDatasetError(
                f"Record at {record.time} has padded shape {padded.shape}, map expects {target.data_shape}."
            )

    for target, padded in zip(targets, padded_values):
        channel = record.channels[target.channel]
        target.mesh.set_array(padded)
        target.mesh.set_alpha(visibility_mask(padded).astype(float))
        target.title.set_text("\n".join(title_lines(channel, record.time)))
    logger.debug("Updated %d map(s) to %s", len(targets), format_time(record.time))
