"""
Station Map Generator

Builds a static map of bike share stations within the city boundary,
together with the national primary roads that cross it, using two
different composition styles. The last map is written to
results/station_map.png at 300 dpi.

Usage:
    python -m station_maps.generate_map
"""

import warnings
from pathlib import Path
from typing import Dict, Optional

import geopandas as gpd
import matplotlib.pyplot as plt

from station_maps.config import (
    CLASSIFICATION_K, CLASSIFICATION_STYLE, EXPORT_DPI, EXPORT_FILENAME,
    MAP_TITLE, POINT_PALETTE, ROAD_NAME_COLUMN, STATION_ID_COLUMN, TIGER_YEAR,
    load_paths
)
from station_maps.geoprocessing import aggregate_roads
from station_maps.grammar_map import THEMES, build_grammar_map, show_grammar_map
from station_maps.load_layers import load_all_layers
from station_maps.preview import preview_layer
from station_maps.thematic_map import ThematicMap, save_thematic_map


# =============================================================================
# THEMATIC MAPS
# =============================================================================

def basic_thematic_map(layers: Dict[str, gpd.GeoDataFrame]) -> ThematicMap:
    """Boundary, roads and plain station dots."""
    return (ThematicMap()
            .shape(layers['boundary']).polygons()
            .shape(layers['roads']).lines()
            .shape(layers['stations']).dots(fill='black'))


def classified_thematic_map(layers: Dict[str, gpd.GeoDataFrame]) -> ThematicMap:
    """Stations coloured by natural-breaks classes of their identifier."""
    return (ThematicMap()
            .shape(layers['boundary']).polygons()
            .shape(layers['roads']).lines()
            .shape(layers['stations']).dots(
                fill=STATION_ID_COLUMN, palette=POINT_PALETTE,
                style=CLASSIFICATION_STYLE, n=CLASSIFICATION_K,
                title="Station ID", fmt="{:.0f}"
            ))


def final_thematic_map(layers: Dict[str, gpd.GeoDataFrame]) -> ThematicMap:
    """Classified map with a scale bar, no frame and the legend outside."""
    return (classified_thematic_map(layers)
            .scale_bar(location='lower left')
            .layout(title=MAP_TITLE, frame=False, legend_outside=True))


# =============================================================================
# MAIN
# =============================================================================

def main(paths: Optional[Dict[str, Path]] = None, year: int = TIGER_YEAR,
         preview: bool = False, show: bool = True) -> Path:
    """
    Main execution.

    1. Load the boundary, stations and primary roads in the target CRS
    2. Clip roads to the boundary and merge them by name
    3. Optionally preview each layer in the browser
    4. Draw the grammar-of-graphics map with each theme
    5. Draw the thematic maps and export the final one

    Library warnings are silenced for the duration of the run only.
    """
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        return run_pipeline(paths, year, preview, show)


def run_pipeline(paths: Optional[Dict[str, Path]], year: int,
                 preview: bool, show: bool) -> Path:
    print("=" * 60)
    print("Station Map Generator")
    print("=" * 60)
    print()

    paths = paths or load_paths()
    raw = load_all_layers(paths, year)

    roads = aggregate_roads(raw['roads'], raw['boundary'], ROAD_NAME_COLUMN)
    layers = {'boundary': raw['boundary'], 'roads': roads, 'stations': raw['stations']}

    if preview:
        print("Opening previews...")
        for name, gdf in layers.items():
            preview_layer(gdf, name=name, open_browser=True)

    print("Drawing grammar-of-graphics maps...")
    for theme_name in THEMES:
        print(f"  Theme: {theme_name}")
        plot = build_grammar_map(layers['boundary'], layers['roads'],
                                 layers['stations'], theme_name=theme_name)
        if show:
            show_grammar_map(plot)

    print("Drawing thematic maps...")
    if show:
        basic_thematic_map(layers).show()
        classified_thematic_map(layers).show()

    print("Saving output...")
    output = save_thematic_map(
        final_thematic_map(layers),
        Path(paths['results']) / EXPORT_FILENAME,
        dpi=EXPORT_DPI
    )
    plt.close('all')

    print()
    print("=" * 60)
    print("✓ SUCCESS!")
    print("=" * 60)
    return output


if __name__ == "__main__":
    main()
