"""
Load the boundary, station and road layers into the target CRS.
"""

from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import geopandas as gpd

from station_maps.config import (
    BOUNDARY_NAME_COLUMN, STATION_ID_COLUMN, TARGET_CRS, TIGER_YEAR
)
from station_maps.download_geodata import fetch_primary_roads


# =============================================================================
# DATA LOADING
# =============================================================================

def read_layer(filepath: Union[str, Path],
               columns: Optional[Sequence[str]] = None,
               crs: str = TARGET_CRS) -> gpd.GeoDataFrame:
    """
    Read a vector file and reproject it.

    Parameters
    ----------
    filepath : str or Path
        Shapefile (with sidecar files), GeoPackage, GeoJSON or zipped
        shapefile.
    columns : sequence of str, optional
        Attribute columns to keep. The geometry column is always kept.
    crs : str
        CRS the layer is reprojected into.

    Returns
    -------
    gpd.GeoDataFrame
        Layer in ``crs``.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"No such layer: {filepath}")

    gdf = gpd.read_file(filepath)
    if gdf.crs is None:
        raise ValueError(f"{filepath.name} has no coordinate reference system")

    if columns is not None:
        missing = [c for c in columns if c not in gdf.columns]
        if missing:
            raise KeyError(f"{filepath.name} lacks columns: {', '.join(missing)}")
        gdf = gdf[list(columns) + [gdf.geometry.name]]

    return gdf.to_crs(crs)


def load_boundary(filepath: Union[str, Path], crs: str = TARGET_CRS) -> gpd.GeoDataFrame:
    """Load the study-area boundary polygon."""
    return read_layer(filepath, [BOUNDARY_NAME_COLUMN], crs)


def load_stations(filepath: Union[str, Path], crs: str = TARGET_CRS) -> gpd.GeoDataFrame:
    """Load station points keeping only the station identifier."""
    return read_layer(filepath, [STATION_ID_COLUMN], crs)


def load_all_layers(paths: Dict[str, Path], year: int = TIGER_YEAR,
                    crs: str = TARGET_CRS) -> Dict[str, gpd.GeoDataFrame]:
    """Load the boundary, stations and national primary roads."""
    print("Loading layers...")
    boundary = load_boundary(paths['boundary'], crs)
    print(f"  ✓ Loaded boundary: {len(boundary)} features")

    stations = load_stations(paths['stations'], crs)
    print(f"  ✓ Loaded stations: {len(stations)} features")

    roads = fetch_primary_roads(year, cache_dir=paths['cache'], crs=crs)

    return {'boundary': boundary, 'stations': stations, 'roads': roads}
