import tempfile
import webbrowser

import folium

from station_maps.preview import preview_layer, preview_path


def test_preview_returns_map(boundary):
    m = preview_layer(boundary, name="boundary")
    assert isinstance(m, folium.Map)
    geojson = [child for child in m._children.values() if isinstance(child, folium.GeoJson)]
    assert len(geojson) == 1
    assert geojson[0].layer_name == "boundary"


def test_preview_saves_html(tmp_path, stations):
    output = tmp_path / "stations.html"
    preview_layer(stations, tooltip=['station_id'], output=output)
    html = output.read_text()
    assert "leaflet" in html.lower()
    assert "station_id" in html


def test_preview_of_empty_layer(roads):
    m = preview_layer(roads.iloc[0:0])
    assert isinstance(m, folium.Map)


def test_browser_preview_reuses_one_file(monkeypatch, tmp_path, stations):
    monkeypatch.setattr(tempfile, 'tempdir', str(tmp_path))
    opened = []
    monkeypatch.setattr(webbrowser, 'open', opened.append)

    preview_layer(stations, name="stations", open_browser=True)
    preview_layer(stations, name="stations", open_browser=True)

    assert len(opened) == 2
    assert opened[0] == opened[1]
    assert [p.name for p in tmp_path.iterdir()] == ["station_maps_preview_stations.html"]


def test_preview_path_is_stable_per_name(monkeypatch, tmp_path):
    monkeypatch.setattr(tempfile, 'tempdir', str(tmp_path))
    assert preview_path("roads") == preview_path("roads")
    assert preview_path("roads") != preview_path("stations")
    assert preview_path("I- 95 / west").name == "station_maps_preview_I_95_west.html"
    assert preview_path("").parent == tmp_path
