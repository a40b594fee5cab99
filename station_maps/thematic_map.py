"""
Thematic map composition in the shape-then-style manner.

Each layer is opened with ``shape(gdf)`` and drawn by the style call that
follows it::

    tm = (ThematicMap()
          .shape(boundary).polygons(fill='#f2efe9', border_width=1.5)
          .shape(roads).lines(color='grey')
          .shape(stations).dots(fill='station_id', palette='YlOrRd', style='jenks')
          .scale_bar()
          .layout(title="Stations", frame=False, legend_outside=True))
    save_thematic_map(tm, "results/station_map.png", dpi=300)

Layers are drawn in declaration order with geopandas on a matplotlib
canvas. Classified fills are binned with mapclassify and handed to
geopandas as user-defined bins, so the classes on the map are exactly the
ones ``classify`` reports.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import geopandas as gpd
import mapclassify
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib_scalebar.scalebar import ScaleBar

from station_maps.config import (
    BOUNDARY_EDGE, BOUNDARY_FILL, BOUNDARY_WIDTH, CLASSIFICATION_K, EXPORT_DPI,
    FIGURE_SIZE, POINT_EDGE, POINT_MARKERSIZE, ROAD_COLOR, ROAD_WIDTH
)


# =============================================================================
# CLASSIFICATION
# =============================================================================

CLASSIFIERS = {
    'jenks': mapclassify.FisherJenks,
    'fisher': mapclassify.FisherJenks,
    'quantile': mapclassify.Quantiles,
    'equal': mapclassify.EqualInterval,
    'headtails': mapclassify.HeadTailBreaks,
    'pretty': mapclassify.PrettyBreaks,
}


def classify(values: pd.Series, style: str = 'jenks', n: int = CLASSIFICATION_K):
    """
    Bin numeric values into classes.

    ``'jenks'`` is natural breaks (Fisher-Jenks, minimising within-class
    variance). ``n`` is capped at the number of distinct values.
    """
    if style not in CLASSIFIERS:
        raise ValueError(
            f"Unknown classification style {style!r}; choose from {', '.join(CLASSIFIERS)}"
        )
    values = pd.Series(values).dropna()
    classifier = CLASSIFIERS[style]
    if style == 'headtails':
        return classifier(values)
    return classifier(values, k=max(1, min(n, values.nunique())))


def _scale_units(crs) -> Dict[str, str]:
    if crs is None or crs.is_geographic:
        raise ValueError("A scale bar needs a projected coordinate reference system")
    unit = crs.axis_info[0].unit_name.lower()
    if 'foot' in unit or 'feet' in unit:
        return {'units': 'ft', 'dimension': 'imperial-length'}
    return {'units': 'm', 'dimension': 'si-length'}


# =============================================================================
# COMPOSITION
# =============================================================================

class ThematicMap:
    """Builder for a static map made of shape/style layer pairs."""

    def __init__(self, figsize: Tuple[float, float] = FIGURE_SIZE):
        self.layers: List[Dict[str, Any]] = []
        self.figsize = figsize
        self.scalebar: Optional[Dict[str, Any]] = None
        self.title: Optional[str] = None
        self.frame = True
        self.legend_outside = False

    # Layers ------------------------------------------------------------------

    def shape(self, gdf: gpd.GeoDataFrame) -> 'ThematicMap':
        """Open a new layer on ``gdf``; the next style call draws it."""
        self.layers.append({'gdf': gdf, 'kind': None, 'options': {}})
        return self

    def _style(self, kind: str, **options) -> 'ThematicMap':
        if not self.layers:
            raise ValueError(f"{kind}() needs a preceding shape()")
        layer = self.layers[-1]
        if layer['kind'] is not None:
            # Further styles on the same shape draw it again on top
            layer = {'gdf': layer['gdf'], 'kind': None, 'options': {}}
            self.layers.append(layer)
        layer['kind'] = kind
        layer['options'] = options
        return self

    def polygons(self, fill: str = BOUNDARY_FILL, border_color: str = BOUNDARY_EDGE,
                 border_width: float = BOUNDARY_WIDTH) -> 'ThematicMap':
        return self._style('polygons', fill=fill, border_color=border_color,
                           border_width=border_width)

    def lines(self, color: str = ROAD_COLOR, width: float = ROAD_WIDTH) -> 'ThematicMap':
        return self._style('lines', color=color, width=width)

    def dots(self, fill: str = 'black', size: float = POINT_MARKERSIZE,
             palette: Optional[str] = None, style: Optional[str] = None,
             n: int = CLASSIFICATION_K, title: Optional[str] = None,
             fmt: Optional[str] = None) -> 'ThematicMap':
        """
        Draw points.

        Parameters
        ----------
        fill : str
            A colour, or a column name whose values drive the colour.
        size : float
            Marker area in points squared.
        palette : str, optional
            Matplotlib colormap used when ``fill`` is a column.
        style : str, optional
            Classification method (a key of ``CLASSIFIERS``). Without it the
            column is mapped onto a continuous ramp.
        n : int
            Number of classes.
        title : str, optional
            Legend title, defaults to the column name.
        fmt : str, optional
            Format string for class break labels, e.g. ``'{:.0f}'``.
        """
        if style is not None and style not in CLASSIFIERS:
            raise ValueError(
                f"Unknown classification style {style!r}; choose from {', '.join(CLASSIFIERS)}"
            )
        return self._style('dots', fill=fill, size=size, palette=palette,
                           style=style, n=n, title=title, fmt=fmt)

    # Map furniture -----------------------------------------------------------

    def scale_bar(self, location: str = 'lower left',
                  length_fraction: float = 0.25) -> 'ThematicMap':
        self.scalebar = {'location': location, 'length_fraction': length_fraction}
        return self

    def layout(self, title: Optional[str] = None, frame: bool = True,
               legend_outside: bool = False,
               figsize: Optional[Tuple[float, float]] = None) -> 'ThematicMap':
        self.title = title
        self.frame = frame
        self.legend_outside = legend_outside
        if figsize is not None:
            self.figsize = figsize
        return self

    # Drawing -----------------------------------------------------------------

    def _legend_kwds(self, title: str, fmt: Optional[str]) -> Dict[str, Any]:
        kwds: Dict[str, Any] = {'title': title, 'frameon': False}
        if fmt is not None:
            kwds['fmt'] = fmt
        if self.legend_outside:
            kwds.update(loc='center left', bbox_to_anchor=(1.02, 0.5))
        else:
            kwds.update(loc='lower right')
        return kwds

    def _draw_dots(self, ax: plt.Axes, gdf: gpd.GeoDataFrame, fill: str, size: float,
                   palette: Optional[str], style: Optional[str], n: int,
                   title: Optional[str], fmt: Optional[str]) -> None:
        if fill not in gdf.columns:
            gdf.plot(ax=ax, color=fill, markersize=size, edgecolor=POINT_EDGE,
                     linewidth=0.3, zorder=3)
            return

        if style is None:
            gdf.plot(ax=ax, column=fill, cmap=palette, markersize=size,
                     edgecolor=POINT_EDGE, linewidth=0.3, zorder=3, legend=True,
                     legend_kwds={'label': title or fill, 'shrink': 0.6})
            return

        classifier = classify(gdf[fill], style, n)
        gdf.plot(
            ax=ax, column=fill, cmap=palette, markersize=size,
            edgecolor=POINT_EDGE, linewidth=0.3, zorder=3,
            scheme='UserDefined',
            classification_kwds={'bins': list(classifier.bins)},
            legend=True, legend_kwds=self._legend_kwds(title or fill, fmt)
        )

    def render(self) -> Tuple[plt.Figure, plt.Axes]:
        """Draw every layer and return the figure and axes."""
        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_aspect('equal')

        crs = None
        for layer in self.layers:
            gdf, kind, options = layer['gdf'], layer['kind'], layer['options']
            if crs is None:
                crs = gdf.crs
            if kind is None or gdf.empty:
                continue

            if kind == 'polygons':
                gdf.plot(ax=ax, facecolor=options['fill'],
                         edgecolor=options['border_color'],
                         linewidth=options['border_width'], zorder=1)
            elif kind == 'lines':
                gdf.plot(ax=ax, color=options['color'],
                         linewidth=options['width'], zorder=2)
            elif kind == 'dots':
                self._draw_dots(ax, gdf, **options)

        if self.scalebar is not None:
            ax.add_artist(ScaleBar(
                1, box_alpha=0.8, **_scale_units(crs), **self.scalebar
            ))

        if self.title:
            ax.set_title(self.title, fontsize=14, fontweight='bold', pad=12)

        if self.frame:
            ax.set_xticks([])
            ax.set_yticks([])
            for spine in ax.spines.values():
                spine.set_edgecolor('black')
                spine.set_linewidth(1.0)
        else:
            ax.set_axis_off()

        if self.legend_outside:
            fig.subplots_adjust(right=0.72)

        return fig, ax

    def show(self) -> None:
        self.render()
        plt.show()


def save_thematic_map(tm: ThematicMap, filename: Union[str, Path],
                      dpi: int = EXPORT_DPI) -> Path:
    """
    Render ``tm`` and write it as an image.

    The format follows the file extension and the image is exactly the
    map's figure size times ``dpi``.
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    fig, _ = tm.render()
    try:
        fig.savefig(filename, dpi=dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)

    size_kb = filename.stat().st_size / 1024
    print(f"  ✓ Saved {filename} ({size_kb:.0f} KB, {dpi} dpi)")
    return filename
