"""
File Summary:
- Draws the first hindcast record as one cartopy map per channel and returns RenderTargets.
- Adds coastlines, colorbars with units, and the three-line source/description/time title.
- Acts as the default renderer for playback; callers may inject any renderer with the same call shape.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple, Union

import cartopy.crs as ccrs
import numpy as np
from cartopy.mpl.geoaxes import GeoAxes
from matplotlib import pyplot as plt
from matplotlib.axes import Axes
from matplotlib.colors import Colormap

from wavecast.core.records import Grid, Record
from wavecast.errors import RenderSetupError
from wavecast.viz.style import apply_style, quantity_style
from wavecast.viz.targets import RenderTarget, pyplot_number
from wavecast.viz.update import pad_cell_edges, title_lines, visibility_mask

Projection = Union[str, ccrs.Projection, None]


def _axis_nodes(values: np.ndarray, step: float) -> np.ndarray:
    return np.append(values, values[-1] + (step or 1.0))


def cell_nodes(grid: Grid) -> Tuple[np.ndarray, np.ndarray]:
    """Longitude and latitude node vectors matching the padded data layout."""
    return _axis_nodes(grid.lon, grid.lon_step), _axis_nodes(grid.lat, grid.lat_step)


def _resolve_projection(projection: Projection) -> Optional[ccrs.Projection]:
    if projection is None or isinstance(projection, ccrs.Projection):
        return projection
    return getattr(ccrs, projection)()


def make_map_axes(
    n_maps: int,
    projection: Projection = "PlateCarree",
    figsize: Optional[Tuple[float, float]] = None,
) -> List[Axes]:
    """Create one figure holding ``n_maps`` stacked map axes."""
    proj = _resolve_projection(projection)
    fig = plt.figure(figsize=figsize or (9.0, 4.2 * n_maps), constrained_layout=True)
    return [fig.add_subplot(n_maps, 1, idx + 1, projection=proj) for idx in range(n_maps)]


def render_record(
    record: Record,
    clim: Optional[Tuple[float, float]] = None,
    cmap: Optional[Union[str, Colormap]] = None,
    parents: Optional[Sequence[Axes]] = None,
    projection: Projection = "PlateCarree",
    coastlines: bool = True,
    figsize: Optional[Tuple[float, float]] = None,
    colorbar: bool = True,
    **options: Any,
) -> List[RenderTarget]:
    """Map every channel of ``record`` and return one :class:`RenderTarget` per channel.

    Args:
        record: First record of the movie.
        clim: Colour limits for all channels; per-quantity defaults when omitted.
        cmap: Colormap for all channels; per-quantity defaults when omitted.
        parents: Existing axes, one per channel, to draw into instead of a new figure.
        projection: Cartopy projection (name or instance); ``None`` for plain axes.
        coastlines: Draw coastlines on cartopy axes.
        figsize: Size of the new figure when ``parents`` is not given.
        colorbar: Attach a colorbar labelled with the channel units.
        **options: Forwarded to ``pcolormesh``.
    """
    n_channels = len(record.channels)
    if parents is not None:
        parents = list(parents)
        if len(parents) < n_channels:
            raise RenderSetupError(
                f"Got {len(parents)} parent axes for {n_channels} channels; pass one axes per channel."
            )
        axes = parents[:n_channels]
    else:
        apply_style()
        axes = make_map_axes(n_channels, projection=projection, figsize=figsize)

    lon_nodes, lat_nodes = cell_nodes(record.grid)
    targets: List[RenderTarget] = []
    for idx, (channel, ax) in enumerate(zip(record.channels, axes)):
        style = quantity_style(channel)
        vmin, vmax = clim if clim is not None else style.clim
        padded = pad_cell_edges(record.values(idx))
        mesh_kwargs = dict(options)
        is_geo = isinstance(ax, GeoAxes)
        if is_geo:
            mesh_kwargs.setdefault("transform", ccrs.PlateCarree())
        mesh = ax.pcolormesh(
            lon_nodes,
            lat_nodes,
            padded,
            shading="nearest",
            cmap=cmap if cmap is not None else style.cmap,
            vmin=vmin,
            vmax=vmax,
            **mesh_kwargs,
        )
        mesh.set_alpha(visibility_mask(padded).astype(float))
        if is_geo and coastlines:
            ax.coastlines(resolution="50m", color="#cdd1c4", linewidth=0.6)
        if colorbar:
            ax.figure.colorbar(mesh, ax=ax, label=channel.units, shrink=0.85)
        ax.set_title("\n".join(title_lines(channel, record.time)), fontsize=10)
        targets.append(
            RenderTarget(
                channel=idx,
                ax=ax,
                mesh=mesh,
                data_shape=padded.shape,
                figure_number=pyplot_number(ax.figure),
            )
        )
    return targets
