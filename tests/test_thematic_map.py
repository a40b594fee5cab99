import mapclassify
import matplotlib.image as mpimg
import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib_scalebar.scalebar import ScaleBar
from pyproj import CRS

from station_maps.config import STATION_ID_COLUMN
from station_maps.geoprocessing import aggregate_roads
from station_maps.thematic_map import (
    ThematicMap, _scale_units, classify, save_thematic_map
)


@pytest.fixture
def layers(boundary, roads, stations):
    return {
        'boundary': boundary,
        'roads': aggregate_roads(roads, boundary),
        'stations': stations,
    }


def final_map(layers, figsize=(3, 3)):
    return (ThematicMap()
            .shape(layers['boundary']).polygons()
            .shape(layers['roads']).lines(color='grey')
            .shape(layers['stations']).dots(
                fill=STATION_ID_COLUMN, palette='YlOrRd', style='jenks', n=4,
                title="Station ID", fmt="{:.0f}")
            .scale_bar()
            .layout(title="Stations", frame=False, legend_outside=True, figsize=figsize))


def canvas(tm):
    fig, _ = tm.render()
    fig.canvas.draw()
    image = np.asarray(fig.canvas.buffer_rgba()).copy()
    plt.close(fig)
    return image


def test_jenks_is_natural_breaks(stations):
    values = stations[STATION_ID_COLUMN]
    result = classify(values, 'jenks', 4)
    expected = mapclassify.FisherJenks(values, k=4)
    assert list(result.bins) == list(expected.bins)
    assert result.k == 4


def test_classes_capped_at_distinct_values():
    result = classify([1, 1, 2, 2, 3], 'quantile', 5)
    assert result.k <= 3


def test_pretty_breaks(stations):
    values = stations[STATION_ID_COLUMN]
    result = classify(values, 'pretty', 4)
    expected = mapclassify.PrettyBreaks(values, k=4)
    assert isinstance(result, mapclassify.PrettyBreaks)
    assert list(result.bins) == list(expected.bins)


def test_pretty_style_renders(stations):
    tm = ThematicMap().shape(stations).dots(
        fill=STATION_ID_COLUMN, palette='Blues', style='pretty', n=4, title="Station ID"
    )
    fig, ax = tm.render()
    assert ax.get_legend() is not None
    plt.close(fig)


def test_unknown_classification_style(stations):
    with pytest.raises(ValueError, match="Unknown classification style"):
        ThematicMap().shape(stations).dots(fill=STATION_ID_COLUMN, style='pretty-ish')
    with pytest.raises(ValueError):
        classify(stations[STATION_ID_COLUMN], 'pretty-ish')


def test_style_needs_a_shape():
    with pytest.raises(ValueError, match="shape"):
        ThematicMap().polygons()


def test_layers_are_drawn_in_order(layers):
    tm = (ThematicMap()
          .shape(layers['boundary']).polygons()
          .shape(layers['roads']).lines()
          .shape(layers['stations']).dots())
    assert [layer['kind'] for layer in tm.layers] == ['polygons', 'lines', 'dots']


def test_second_style_on_one_shape_adds_a_layer(boundary):
    tm = ThematicMap().shape(boundary).polygons().lines(color='red')
    assert [layer['kind'] for layer in tm.layers] == ['polygons', 'lines']
    assert tm.layers[0]['gdf'] is tm.layers[1]['gdf']


def test_classified_legend(layers):
    fig, ax = final_map(layers).render()
    legend = ax.get_legend()
    assert legend is not None
    assert legend.get_title().get_text() == "Station ID"
    assert len(legend.get_texts()) == 4
    plt.close(fig)


def test_layout_and_scale_bar(layers):
    fig, ax = final_map(layers).render()
    assert not ax.axison
    assert ax.get_title() == "Stations"
    assert any(isinstance(artist, ScaleBar) for artist in ax.artists)
    plt.close(fig)


def test_continuous_fill_adds_colorbar(layers):
    tm = ThematicMap().shape(layers['stations']).dots(fill=STATION_ID_COLUMN, palette='viridis')
    fig, _ = tm.render()
    assert len(fig.axes) == 2
    plt.close(fig)


def test_empty_layer_is_skipped(layers):
    tm = (ThematicMap()
          .shape(layers['boundary']).polygons()
          .shape(layers['roads'].iloc[0:0]).lines())
    fig, ax = tm.render()
    assert len(ax.collections) == 1
    plt.close(fig)


def test_scale_units():
    assert _scale_units(CRS.from_user_input("EPSG:2272"))['units'] == 'ft'
    assert _scale_units(CRS.from_user_input("EPSG:32618"))['units'] == 'm'
    with pytest.raises(ValueError):
        _scale_units(CRS.from_user_input("EPSG:4326"))


def test_rendering_is_repeatable(layers):
    assert np.array_equal(canvas(final_map(layers)), canvas(final_map(layers)))


def test_export_at_300_dpi(tmp_path, layers):
    path = save_thematic_map(final_map(layers, figsize=(2, 1.5)), tmp_path / "maps" / "stations.png", dpi=300)
    assert path == tmp_path / "maps" / "stations.png"
    assert path.stat().st_size > 0
    height, width = mpimg.imread(path).shape[:2]
    assert (width, height) == (600, 450)
