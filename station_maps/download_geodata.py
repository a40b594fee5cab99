"""
Download Census TIGER/Line primary roads.

Usage:
    python -m station_maps.download_geodata [YEAR]

This stores tl_<YEAR>_us_primaryroads.zip in the cache directory listed
in paths.json so later runs read it from disk.
"""

import sys
from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import requests

from station_maps.config import (
    ROAD_NAME_COLUMN, TARGET_CRS, TIGER_FIRST_YEAR, TIGER_TIMEOUT, TIGER_URL,
    TIGER_YEAR, USER_AGENT, load_paths
)


def primary_roads_url(year: int) -> str:
    """Return the TIGER/Line primary roads archive URL for a given year."""
    if isinstance(year, bool) or not isinstance(year, int) or not 1000 <= year <= 9999:
        raise ValueError(f"year must be a four-digit integer, got {year!r}")
    if year < TIGER_FIRST_YEAR:
        raise ValueError(
            f"TIGER/Line primary roads are available from {TIGER_FIRST_YEAR}, got {year}"
        )
    return TIGER_URL.format(year=year)


def download_primary_roads(year: int, cache_dir: Union[str, Path],
                           timeout: float = TIGER_TIMEOUT,
                           overwrite: bool = False) -> Path:
    """
    Download the national primary roads archive into ``cache_dir``.

    An archive already present in the cache is reused unless ``overwrite``
    is set. Network and HTTP errors are raised as-is.
    """
    url = primary_roads_url(year)
    cache_dir = Path(cache_dir)
    cache_dir.mkdir(parents=True, exist_ok=True)
    zip_path = cache_dir / url.rsplit('/', 1)[-1]

    if zip_path.exists() and not overwrite:
        print(f"  Using cached {zip_path.name}")
        return zip_path

    print(f"  Downloading {url}...")
    response = requests.get(url, headers={'User-Agent': USER_AGENT}, timeout=timeout)
    response.raise_for_status()

    # Cache only ever holds complete archives
    partial = zip_path.with_suffix('.part')
    partial.write_bytes(response.content)
    partial.replace(zip_path)

    size_mb = zip_path.stat().st_size / (1024 * 1024)
    print(f"    ✓ {zip_path.name} ({size_mb:.1f} MB)")
    return zip_path


def fetch_primary_roads(year: int = TIGER_YEAR,
                        cache_dir: Optional[Union[str, Path]] = None,
                        timeout: float = TIGER_TIMEOUT,
                        crs: str = TARGET_CRS) -> gpd.GeoDataFrame:
    """
    Fetch national primary roads for ``year`` as a projected GeoDataFrame.

    Parameters
    ----------
    year : int
        Four-digit TIGER/Line vintage.
    cache_dir : str or Path, optional
        Where the archive is stored. Defaults to the ``cache`` entry of
        paths.json.
    timeout : float
        Seconds to wait for the Census server.
    crs : str
        CRS the roads are reprojected into.

    Returns
    -------
    gpd.GeoDataFrame
        Road centrelines with the full name column only.
    """
    if cache_dir is None:
        cache_dir = load_paths()['cache']

    print(f"Fetching TIGER/Line primary roads ({year})...")
    zip_path = download_primary_roads(year, cache_dir, timeout=timeout)

    roads = gpd.read_file(f"zip://{zip_path}")
    roads = roads[[ROAD_NAME_COLUMN, 'geometry']].to_crs(crs)
    print(f"    ✓ primary roads: {len(roads)} features")
    return roads


def main() -> None:
    year = int(sys.argv[1]) if len(sys.argv) > 1 else TIGER_YEAR
    print("=" * 60)
    print("TIGER/Line Primary Roads Download")
    print("=" * 60)
    print()

    download_primary_roads(year, load_paths()['cache'])

    print()
    print("=" * 60)
    print("SUCCESS!")
    print("=" * 60)


if __name__ == "__main__":
    main()
