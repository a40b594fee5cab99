"""
Clip road centrelines to the study area and merge them by name.
"""

from typing import Optional, Union

import geopandas as gpd
from shapely.geometry import LineString, MultiLineString
from shapely.geometry.base import BaseGeometry
from shapely.ops import linemerge

from station_maps.config import ROAD_NAME_COLUMN


# =============================================================================
# GEOMETRY PROCESSING
# =============================================================================

def _empty_like(gdf: gpd.GeoDataFrame, name_column: str) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame({name_column: []}, geometry=[], crs=gdf.crs)


def clip_to_boundary(lines: gpd.GeoDataFrame,
                     boundary: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Intersect every line with the boundary polygon.

    Lines entirely outside the boundary are dropped and lines crossing it
    are cut to the part inside. Attributes of ``lines`` are kept. The
    intersection may produce point or collection geometries where a line
    only touches the boundary; those are left for ``keep_line_parts``.
    """
    if lines.crs != boundary.crs:
        raise ValueError(
            f"CRS mismatch: lines are {lines.crs}, boundary is {boundary.crs}"
        )
    if lines.empty or boundary.empty:
        return lines.iloc[0:0].copy()

    clip_area = boundary[[boundary.geometry.name]]
    return gpd.overlay(lines, clip_area, how='intersection', keep_geom_type=False)


def dissolve_by_name(lines: gpd.GeoDataFrame,
                     name_column: str = ROAD_NAME_COLUMN) -> gpd.GeoDataFrame:
    """Union all features sharing a name into one record per name."""
    if lines.empty:
        return _empty_like(lines, name_column)
    merged = lines[[name_column, lines.geometry.name]].dissolve(
        by=name_column, as_index=False
    )
    return merged[[name_column, merged.geometry.name]]


def extract_lines(geometry: Optional[BaseGeometry]) -> Optional[Union[LineString, MultiLineString]]:
    """
    Return only the line parts of a geometry.

    Parameters
    ----------
    geometry : shapely geometry or None
        Any geometry, including GeometryCollections mixing points, lines
        and polygons.

    Returns
    -------
    LineString, MultiLineString or None
        None when the geometry holds no line part.
    """
    if geometry is None or geometry.is_empty:
        return None
    if isinstance(geometry, (LineString, MultiLineString)):
        return geometry
    if not hasattr(geometry, 'geoms'):
        return None

    parts = []
    for part in geometry.geoms:
        line = extract_lines(part)
        if line is None:
            continue
        if isinstance(line, MultiLineString):
            parts.extend(line.geoms)
        else:
            parts.append(line)

    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return MultiLineString(parts)


def merge_lines(geometry: Optional[Union[LineString, MultiLineString]]) -> Optional[Union[LineString, MultiLineString]]:
    """Join touching pieces of a MultiLineString into longer lines."""
    if isinstance(geometry, MultiLineString):
        return linemerge(geometry)
    return geometry


def keep_line_parts(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Reduce each geometry to its merged line parts and drop line-less records."""
    out = gdf.copy()
    out[out.geometry.name] = [merge_lines(extract_lines(g)) for g in gdf.geometry]
    out = out[out.geometry.notna() & ~out.geometry.is_empty]
    return out.reset_index(drop=True)


def aggregate_roads(roads: gpd.GeoDataFrame, boundary: gpd.GeoDataFrame,
                    name_column: str = ROAD_NAME_COLUMN) -> gpd.GeoDataFrame:
    """
    Derive one line record per road name inside the boundary.

    Parameters
    ----------
    roads : gpd.GeoDataFrame
        Raw road centrelines with a name column.
    boundary : gpd.GeoDataFrame
        Clip polygon, in the same CRS as ``roads``.
    name_column : str
        Attribute the roads are grouped by.

    Returns
    -------
    gpd.GeoDataFrame
        Columns ``[name_column, 'geometry']``; geometries are LineString
        or MultiLineString only. Empty when no road reaches the boundary.
    """
    print("Clipping roads to boundary...")
    clipped = clip_to_boundary(roads, boundary)
    print(f"  ✓ {len(clipped)} road segments intersect the boundary")

    if clipped.empty:
        print("  ! No roads intersect the boundary; road layer will be omitted")
        return _empty_like(roads, name_column)

    merged = keep_line_parts(dissolve_by_name(clipped, name_column))
    print(f"  ✓ Merged into {len(merged)} named roads")
    return merged
