import matplotlib
matplotlib.use('Agg')

import geopandas as gpd
import pytest
from shapely.geometry import LineString, Point, box

from station_maps.config import (
    BOUNDARY_NAME_COLUMN, ROAD_NAME_COLUMN, STATION_ID_COLUMN, TARGET_CRS
)

# Lower-left corner and side of the square test city, in US survey feet
X0, Y0 = 2_690_000.0, 230_000.0
SIDE = 20_000.0


@pytest.fixture
def boundary():
    return gpd.GeoDataFrame(
        {BOUNDARY_NAME_COLUMN: ["Testville"]},
        geometry=[box(X0, Y0, X0 + SIDE, Y0 + SIDE)],
        crs=TARGET_CRS
    )


@pytest.fixture
def roads():
    mid_y = Y0 + SIDE / 2
    mid_x = X0 + SIDE / 2
    records = [
        # Two touching pieces inside plus a piece running off to the west
        ("I- 95", LineString([(X0 - 5000, mid_y), (X0 + 5000, mid_y)])),
        ("I- 95", LineString([(X0 + 5000, mid_y), (X0 + 15000, mid_y)])),
        ("I- 95", LineString([(X0 - 30000, mid_y), (X0 - 20000, mid_y)])),
        # Crosses the city from south to north
        ("I- 76", LineString([(mid_x, Y0 - 8000), (mid_x, Y0 + SIDE + 8000)])),
        # Entirely outside
        ("US Hwy 1", LineString([(X0 + SIDE + 1000, Y0), (X0 + SIDE + 9000, Y0 + SIDE)])),
        # Ends exactly on the east edge
        ("Touching Rd", LineString([(X0 + SIDE + 5000, mid_y), (X0 + SIDE, mid_y)])),
    ]
    names, geoms = zip(*records)
    return gpd.GeoDataFrame({ROAD_NAME_COLUMN: list(names)}, geometry=list(geoms), crs=TARGET_CRS)


@pytest.fixture
def stations():
    ids = [3004, 3005, 3006, 3007, 3008, 3010, 3012, 3016, 3018, 3020, 3021, 3022]
    points = [
        Point(X0 + 1500 + (i % 4) * 4500, Y0 + 2000 + (i // 4) * 6000)
        for i in range(len(ids))
    ]
    return gpd.GeoDataFrame({STATION_ID_COLUMN: ids}, geometry=points, crs=TARGET_CRS)


@pytest.fixture
def layer_files(tmp_path, boundary, stations):
    """Boundary and stations written as WGS84 shapefiles with extra columns."""
    boundary_path = tmp_path / "boundary" / "boundary.shp"
    stations_path = tmp_path / "stations" / "stations.shp"
    boundary_path.parent.mkdir()
    stations_path.parent.mkdir()

    b = boundary.to_crs("EPSG:4326")
    b['AREA'] = 1.0
    b.to_file(boundary_path)

    s = stations.to_crs("EPSG:4326")
    s['name'] = [f"Station {i}" for i in range(len(s))]
    s.to_file(stations_path)

    return {
        'boundary': boundary_path,
        'stations': stations_path,
        'cache': tmp_path / "cache",
        'results': tmp_path / "results",
    }
