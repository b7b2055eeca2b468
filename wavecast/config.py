# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Declares the pydantic PlaybackConfig model with documented defaults for map movies.
- Validates delay, colour limits, and renderer options once, before any rendering.
- Loads YAML playback presets so CLI runs can be reproduced from a file.
"""

from __future__ import annotations

import math
import numbers
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from matplotlib.colors import Colormap
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wavecast.errors import InvalidDelayError

DEFAULT_DELAY = 0.33


class PlaybackConfig(BaseModel):
    """Options for one map-movie run.

    Attributes:
        delay: Seconds to pause before each time step after the first.
        clim: Colour limits applied to every channel; per-quantity defaults when ``None``.
        cmap: Colormap name or object; per-quantity defaults when ``None``.
        make_movie: Capture frames and return one movie per channel.
        engine: xarray backend used to read archives (``None`` lets xarray decide).
        map_options: Extra keyword options forwarded verbatim to the renderer.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    delay: float = DEFAULT_DELAY
    clim: Optional[Tuple[float, float]] = None
    cmap: Optional[Union[str, Colormap]] = None
    make_movie: bool = False
    engine: Optional[str] = None
    map_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("delay", mode="before")
    @classmethod
    def _check_delay(cls, value: Any) -> float:
        if value is None:
            return DEFAULT_DELAY
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError("delay must be a real scalar in seconds")
        value = float(value)
        if not math.isfinite(value) or value < 0.0:
            raise ValueError("delay must be a finite, non-negative number of seconds")
        return value

    @field_validator("clim")
    @classmethod
    def _check_clim(cls, value: Optional[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
        if value is not None and not value[0] < value[1]:
            raise ValueError("clim must be an increasing (low, high) pair")
        return value

    @classmethod
    def create(cls, **values: Any) -> "PlaybackConfig":
        """Validate ``values``; a bad delay raises :class:`InvalidDelayError`."""
        try:
            return cls(**values)
        except ValidationError as exc:
            if any(err["loc"][:1] == ("delay",) for err in exc.errors()):
                raise InvalidDelayError(
                    f"DELAY must be a non-negative scalar in seconds, got {values.get('delay')!r}"
                ) from exc
            raise

    def renderer_options(self) -> Dict[str, Any]:
        """Options handed to the renderer: map options plus any explicit clim/cmap."""
        options = dict(self.map_options)
        if self.clim is not None:
            options["clim"] = self.clim
        if self.cmap is not None:
            options["cmap"] = self.cmap
        return options


def load_config(path: Path | str, **overrides: Any) -> PlaybackConfig:
    """Load a playback preset from YAML; ``overrides`` win over file values."""
    config_path = Path(path)
    with config_path.open("r", encoding="utf8") as fh:
        payload = yaml.safe_load(fh) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Playback config {config_path} must contain a mapping.")
    payload = dict(payload.get("playback", payload))
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return PlaybackConfig.create(**payload)
