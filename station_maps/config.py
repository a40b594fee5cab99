"""
Shared configuration for the station map pipeline.

Constants used by every step live here. Data locations are read from
``paths.json`` at the project root so the same code runs on any machine.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union


# =============================================================================
# CONFIGURATION - PROJECTION AND ATTRIBUTES
# =============================================================================

# Coordinate reference systems
TARGET_CRS = "EPSG:2272"  # NAD83 / Pennsylvania South (ftUS)
SOURCE_CRS = "EPSG:4326"  # WGS84, used for web previews

# Attribute columns kept after loading
BOUNDARY_NAME_COLUMN = "NAME"
STATION_ID_COLUMN = "station_id"
ROAD_NAME_COLUMN = "FULLNAME"

# Census TIGER/Line primary roads
TIGER_YEAR = 2019
TIGER_FIRST_YEAR = 2011
TIGER_URL = (
    "https://www2.census.gov/geo/tiger/TIGER{year}/PRIMARYROADS/"
    "tl_{year}_us_primaryroads.zip"
)
TIGER_TIMEOUT = 300
USER_AGENT = "station-maps/0.1"


# =============================================================================
# CONFIGURATION - VISUALIZATION PARAMETERS
# =============================================================================

# Colors
BOUNDARY_FILL = '#f2efe9'
BOUNDARY_EDGE = '#4d4d4d'
ROAD_COLOR = '#7f7f7f'
POINT_EDGE = 'black'
POINT_CMAP = 'viridis'
POINT_PALETTE = 'YlOrRd'

# Line and marker sizes
BOUNDARY_WIDTH = 1.5
ROAD_WIDTH = 0.8
POINT_SIZE = 2.5
POINT_MARKERSIZE = 30

# Classification
CLASSIFICATION_STYLE = 'jenks'
CLASSIFICATION_K = 5

# Labels
MAP_TITLE = "Bike share stations"
MAP_SUBTITLE = "Stations coloured by identifier, with primary roads"
MAP_CAPTION = "Source: US Census Bureau TIGER/Line primary roads"

# Output
FIGURE_SIZE = (8, 8)
EXPORT_DPI = 300
EXPORT_FILENAME = "station_map.png"

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
PATHS_FILE = "paths.json"
DEFAULT_PATHS: Dict[str, str] = {
    'boundary': "data/boundary/boundary.shp",
    'stations': "data/stations/stations.shp",
    'cache': "data/cache",
    'results': "results",
}


def load_paths(filepath: Optional[Union[str, Path]] = None,
               root: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
    """
    Load data locations from a JSON file.

    Missing keys fall back to ``DEFAULT_PATHS``. Relative entries are
    resolved against ``root`` (the project root unless given).

    Parameters
    ----------
    filepath : str or Path, optional
        JSON file to read. Defaults to ``paths.json`` under ``root``.
    root : str or Path, optional
        Directory relative paths are resolved against.

    Returns
    -------
    dict
        Mapping of location name to absolute ``Path``.
    """
    root = Path(root) if root is not None else PROJECT_ROOT
    filepath = Path(filepath) if filepath is not None else root / PATHS_FILE

    paths = dict(DEFAULT_PATHS)
    if filepath.exists():
        with open(filepath, 'r') as file:
            paths.update(json.load(file))

    resolved = {}
    for key, value in paths.items():
        path = Path(value)
        resolved[key] = path if path.is_absolute() else root / path
    return resolved
