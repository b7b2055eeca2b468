# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Package root for wavecast, the WaveWatch III hindcast map-movie toolkit.
- Owns the shared ``logger`` and ``configure_logging`` helper used by every module.
- Re-exports the playback entry point and record sources for notebook usage.
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

logger = logging.getLogger("wavecast")


def configure_logging(verbose: bool = False) -> None:
    """Install a basic stderr handler for CLI and script usage."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s | %(message)s")
    logger.setLevel(level)


from wavecast.config import PlaybackConfig, load_config  # noqa: E402
from wavecast.core.records import NO_DATA, Channel, Grid, Record, WW3Dataset  # noqa: E402
from wavecast.errors import (  # noqa: E402
    InvalidDatasetError,
    InvalidDelayError,
    RenderSetupError,
    TargetLostError,
    WavecastError,
)
from wavecast.ingest import load_archive, open_record_source  # noqa: E402
from wavecast.viz.playback import PlaybackLoop, PlaybackState, play_movie  # noqa: E402

__all__ = [
    "__version__",
    "logger",
    "configure_logging",
    "PlaybackConfig",
    "load_config",
    "NO_DATA",
    "Channel",
    "Grid",
    "Record",
    "WW3Dataset",
    "WavecastError",
    "InvalidDatasetError",
    "InvalidDelayError",
    "RenderSetupError",
    "TargetLostError",
    "load_archive",
    "open_record_source",
    "PlaybackLoop",
    "PlaybackState",
    "play_movie",
]
