"""
Interactive Leaflet previews of a single layer, for checking data by eye.
"""

import re
import tempfile
import webbrowser
from pathlib import Path
from typing import List, Optional, Union

import folium
import geopandas as gpd

from station_maps.config import BOUNDARY_EDGE, ROAD_COLOR, SOURCE_CRS


def _style(feature):
    return {
        'fillColor': 'lightgray',
        'color': BOUNDARY_EDGE,
        'weight': 1.5,
        'fillOpacity': 0.3,
    }


def _line_style(feature):
    return {'color': ROAD_COLOR, 'weight': 3}


def preview_path(name: str) -> Path:
    """Fixed HTML file in the system temp directory, overwritten on each preview."""
    slug = re.sub(r"\W+", "_", name).strip("_") or "layer"
    return Path(tempfile.gettempdir()) / f"station_maps_preview_{slug}.html"


def preview_layer(
    gdf: gpd.GeoDataFrame,
    name: Optional[str] = None,
    tooltip: Optional[List[str]] = None,
    output: Optional[Union[str, Path]] = None,
    open_browser: bool = False
) -> folium.Map:
    """
    Build a pannable web map showing one layer.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Layer to inspect, in any CRS.
    name : str, optional
        Layer name shown in the layer control.
    tooltip : list of str, optional
        Attribute columns shown on hover. Defaults to all attributes.
    output : str or Path, optional
        HTML file to write the map to.
    open_browser : bool
        Open the written HTML in the default browser. Without ``output``
        the map goes to ``preview_path(name)``, reused across calls.

    Returns
    -------
    folium.Map
    """
    web = gdf.to_crs(SOURCE_CRS)
    fields = tooltip if tooltip is not None else [
        c for c in web.columns if c != web.geometry.name
    ]

    m = folium.Map(tiles="CartoDB positron", control_scale=True)

    kwargs = {}
    if fields:
        kwargs['tooltip'] = folium.GeoJsonTooltip(fields=fields)

    geom_types = set(web.geom_type.dropna())
    if geom_types and geom_types <= {'Point', 'MultiPoint'}:
        kwargs['marker'] = folium.CircleMarker(radius=4, fill=True, fill_opacity=0.8, weight=1)
        default_name = "points"
    elif geom_types and geom_types <= {'LineString', 'MultiLineString'}:
        kwargs['style_function'] = _line_style
        default_name = "lines"
    else:
        kwargs['style_function'] = _style
        default_name = "polygons"

    if web.empty:
        print(f"  ! {name or 'layer'} has no features; showing base map only")
    else:
        folium.GeoJson(web.to_json(), name=name or default_name, **kwargs).add_to(m)
        minx, miny, maxx, maxy = web.total_bounds
        m.fit_bounds([[miny, minx], [maxy, maxx]])

    folium.LayerControl().add_to(m)

    if output is None and open_browser:
        output = preview_path(name or default_name)
    if output is not None:
        m.save(str(output))
        print(f"  ✓ Saved preview to {output}")
        if open_browser:
            webbrowser.open(Path(output).resolve().as_uri())

    return m
