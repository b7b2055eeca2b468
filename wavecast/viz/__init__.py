"""
File Summary:
- Hosts visualization utilities for styling, map rendering, in-place updates, and frame capture.
- Re-exports primary user-facing functions for quick notebook usage.
- See playback.play_movie for the end-to-end map-movie pipeline.
"""

from .style import apply_style, quantity_style
from .targets import RenderTarget, TargetRegistry
from .update import pad_cell_edges, title_lines, update_targets, visibility_mask
from .map import make_map_axes, render_record
from .capture import Frame, MovieAssembler, MovieBuffer, capture_frame, save_frames
from .playback import Pacer, PlaybackLoop, PlaybackState, build_initial_frame, play_movie

__all__ = [
    "apply_style",
    "quantity_style",
    "RenderTarget",
    "TargetRegistry",
    "pad_cell_edges",
    "visibility_mask",
    "title_lines",
    "update_targets",
    "make_map_axes",
    "render_record",
    "Frame",
    "MovieBuffer",
    "MovieAssembler",
    "capture_frame",
    "save_frames",
    "Pacer",
    "PlaybackLoop",
    "PlaybackState",
    "build_initial_frame",
    "play_movie",
]
