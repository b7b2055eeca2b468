# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Defines the wavecast exception taxonomy raised by ingest, config, and playback code.
- Input problems subclass ValueError so generic callers can still catch them.
- TargetLostError marks the fatal mid-run loss of a figure or axes.
"""

from __future__ import annotations


class WavecastError(Exception):
    """Base class for all wavecast failures."""


class InvalidDatasetError(WavecastError, ValueError):
    """Dataset identifier is neither a readable archive nor a valid in-memory dataset."""


class InvalidDelayError(WavecastError, ValueError):
    """Playback delay is not a finite, non-negative real scalar."""


class RenderSetupError(WavecastError):
    """Renderer could not provide one render target per channel."""


class TargetLostError(WavecastError, RuntimeError):
    """A render target was closed or removed while the movie was running."""
