"""
Static station map composed with plotnine's grammar of graphics.

The boundary, roads and stations are stacked as ``geom_map`` layers; the
station identifier drives a continuous, reversed colour ramp. Background
themes only touch canvas chrome, never the data layers.
"""

from pathlib import Path
from typing import Callable, Dict, Optional, Union

import geopandas as gpd
from plotnine import (
    aes, coord_fixed, element_blank, element_line, element_rect, element_text,
    geom_map, ggplot, labs, scale_fill_cmap, theme, theme_minimal, theme_void
)

from station_maps.config import (
    BOUNDARY_EDGE, BOUNDARY_FILL, EXPORT_DPI, FIGURE_SIZE, MAP_CAPTION,
    MAP_SUBTITLE, MAP_TITLE, POINT_CMAP, POINT_EDGE, POINT_SIZE, ROAD_COLOR,
    STATION_ID_COLUMN
)


# =============================================================================
# THEMES
# =============================================================================

def theme_stations_minimal() -> theme:
    """Light gridlines on a transparent canvas."""
    return theme_minimal(base_size=10) + theme(
        panel_grid_major=element_line(color='#e5e5e5', size=0.4),
        panel_grid_minor=element_blank(),
        plot_title=element_text(size=14, weight='bold'),
    )


def theme_stations_void() -> theme:
    """No axes or grid, plain white canvas."""
    return theme_void(base_size=10) + theme(
        plot_background=element_rect(fill='white', color='white'),
        plot_title=element_text(size=14, weight='bold'),
    )


def theme_stations_dark() -> theme:
    """Dark panel with a muted grid and larger type."""
    return theme_minimal(base_size=12) + theme(
        plot_background=element_rect(fill='#2b2b2b', color='#2b2b2b'),
        panel_background=element_rect(fill='#2b2b2b', color='#2b2b2b'),
        panel_grid_major=element_line(color='#444444', size=0.3),
        panel_grid_minor=element_blank(),
        text=element_text(color='#e0e0e0'),
        axis_text=element_text(color='#bbbbbb', size=8),
        plot_title=element_text(size=18, weight='bold'),
    )


THEMES: Dict[str, Callable[[], theme]] = {
    'minimal': theme_stations_minimal,
    'void': theme_stations_void,
    'dark': theme_stations_dark,
}


# =============================================================================
# COMPOSITION
# =============================================================================

def build_grammar_map(
    boundary: gpd.GeoDataFrame,
    roads: gpd.GeoDataFrame,
    stations: gpd.GeoDataFrame,
    theme_name: str = 'minimal',
    value_column: str = STATION_ID_COLUMN,
    cmap: str = POINT_CMAP,
    reverse: bool = True,
    title: Optional[str] = MAP_TITLE,
    subtitle: Optional[str] = MAP_SUBTITLE,
    caption: Optional[str] = MAP_CAPTION
) -> ggplot:
    """
    Layer boundary, roads and stations into one plot.

    Parameters
    ----------
    boundary, roads, stations : gpd.GeoDataFrame
        Layers in a shared projected CRS. Empty layers are left out.
    theme_name : str
        Key of ``THEMES``.
    value_column : str
        Numeric station column mapped to point fill.
    cmap : str
        Matplotlib colormap for the fill ramp.
    reverse : bool
        Run the ramp from its high end to its low end.
    title, subtitle, caption : str, optional
        Plot labels.

    Returns
    -------
    plotnine.ggplot
    """
    if theme_name not in THEMES:
        raise ValueError(
            f"Unknown theme {theme_name!r}; choose from {', '.join(THEMES)}"
        )

    plot = ggplot()
    if not boundary.empty:
        plot += geom_map(data=boundary, fill=BOUNDARY_FILL, color=BOUNDARY_EDGE, size=0.6)
    if not roads.empty:
        plot += geom_map(data=roads, color=ROAD_COLOR, size=0.5)
    if not stations.empty:
        plot += geom_map(
            aes(fill=value_column), data=stations,
            color=POINT_EDGE, size=POINT_SIZE
        )
        plot += scale_fill_cmap(cmap_name=f"{cmap}_r" if reverse else cmap)

    plot += coord_fixed()
    plot += labs(title=title, subtitle=subtitle, caption=caption, fill="Station ID")
    plot += THEMES[theme_name]()
    return plot


def show_grammar_map(plot: ggplot) -> None:
    """Display the plot in the active matplotlib backend."""
    plot.show()


def save_grammar_map(
    plot: ggplot,
    filepath: Union[str, Path],
    width: float = FIGURE_SIZE[0],
    height: float = FIGURE_SIZE[1],
    dpi: int = EXPORT_DPI
) -> Path:
    """Write the plot to ``filepath``; the format follows the extension."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    plot.save(filepath, width=width, height=height, units='in', dpi=dpi, verbose=False)
    print(f"  ✓ Saved {filepath}")
    return filepath
