import json

import pytest

from road_spelling.config.models import GraphByName, GraphByPath
from road_spelling.domain.entities.geography import Location
from road_spelling.domain.entities.road_graph import RoadGraph
from road_spelling.domain.errors import GraphDataError
from road_spelling.runtime.registries import resolve_graph
from road_spelling.runtime.resources import load_graph_from_path, parse_graph


def _feature(fid, coords, **props):
    return {
        "type": "Feature",
        "properties": {"id": fid, **props},
        "geometry": {"type": "LineString", "coordinates": coords},
    }


GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        _feature(1, [[0.0, 0.0], [0.0005, 0.0], [0.001, 0.0]], name="Main Street", lanes=2),
        _feature(2, [[0.001, 0.0], [0.002, 0.0]], name="Maim Street"),
        {"type": "Feature", "id": 3, "properties": {"name": "Broken"}, "geometry": None},
        _feature(4, [[0.002, 0.0], [500.0, 0.0]]),
    ],
}


def test_geojson_graph():
    g = parse_graph(GEOJSON, "geojson")
    assert len(g) == 4
    s1 = g.segment(1)
    assert s1.start == Location(0.0, 0.0) and s1.end == Location(0.0, 0.001)
    assert s1.tags == {"name": "Main Street", "lanes": "2"}
    assert {s.id for s in s1.connected_segments()} == {2}


def test_geojson_malformed_geometry_kept_without_locations(caplog):
    g = parse_graph(GEOJSON, "geojson")
    assert g.segment(3).start is None and g.segment(3).end is None
    assert g.segment(3).name == "Broken"
    assert g.segment(4).start is not None and g.segment(4).end is None
    assert "segment 3" in caplog.text and "segment 4" in caplog.text


def test_json_graph():
    doc = {
        "segments": [
            {"id": 1, "start": [0, 0], "end": [0, 0.001], "tags": {"name": "Main Street"}},
            {"id": -1, "start": [0, 0.001], "end": [0, 0]},
        ]
    }
    g = parse_graph(doc, "json")
    assert g.segment(1).end == Location(0, 0.001)
    assert g.segment(-1).name is None
    assert [s.id for s in g.primary_segments()] == [1]


@pytest.mark.parametrize(
    "doc,fmt",
    [
        ({"type": "Feature"}, "geojson"),
        ({"type": "FeatureCollection", "features": [_feature("x", [[0, 0], [1, 1]])]}, "geojson"),
        ({"segments": {}}, "json"),
        ({"type": "FeatureCollection", "features": [1]}, "geojson"),
        ({"type": "FeatureCollection", "features": [{"properties": [1]}]}, "geojson"),
        ({"segments": ["x"]}, "json"),
        ({"segments": [{"id": 1, "tags": "Main Street"}]}, "json"),
        ({"segments": [{"id": 1}, {"id": 1}]}, "json"),
        ({"type": "FeatureCollection", "features": [_feature(1, []), _feature(1, [])]}, "geojson"),
    ],
)
def test_bad_documents(doc, fmt):
    with pytest.raises(GraphDataError):
        parse_graph(doc, fmt)


def test_unknown_format():
    with pytest.raises(ValueError) as exc:
        parse_graph({}, "shapefile")
    assert exc.value.__suppress_context__


def test_duplicate_segment_id_names_the_segment():
    with pytest.raises(GraphDataError) as exc:
        parse_graph({"segments": [{"id": 7}, {"id": 7}]}, "json")
    assert exc.value.segment_id == 7


def test_geojson_positions_with_altitude():
    doc = {
        "type": "FeatureCollection",
        "features": [
            _feature(1, [[0, 0, 12.5], [0.001, 0, 12.5]], name="Main Street"),
            _feature(2, [[0.001, 0, 12.5], [0.002, 0, 12.5]], name="Maim Street"),
        ],
    }
    g = parse_graph(doc, "geojson")
    assert g.segment(1).start == Location(0, 0)
    assert g.segment(2).end == Location(0, 0.002)
    assert {s.id for s in g.segment(1).connected_segments()} == {2}


def test_short_position_is_unusable(caplog):
    g = parse_graph({"segments": [{"id": 1, "start": [0], "end": [0, 0.001]}]}, "json")
    assert g.segment(1).start is None
    assert g.segment(1).end == Location(0, 0.001)
    assert "segment 1" in caplog.text


def test_load_from_path(tmp_path):
    path = tmp_path / "roads.geojson"
    path.write_text(json.dumps(GEOJSON))
    g = load_graph_from_path(str(path), "geojson")
    assert len(g) == 4
    assert load_graph_from_path(str(path), "geojson") is g  # cached

    bad = tmp_path / "bad.geojson"
    bad.write_text("{not json")
    with pytest.raises(GraphDataError):
        load_graph_from_path(str(bad), "geojson")

    latin = tmp_path / "latin.geojson"
    latin.write_bytes(b'{"type": "FeatureCollection", "features": [], "x": "\xff"}')
    with pytest.raises(GraphDataError):
        load_graph_from_path(str(latin), "geojson")


def test_resolve_graph(tmp_path):
    town = RoadGraph()
    assert resolve_graph(GraphByName(name="town"), deps={"graphs": {"town": town}}) is town
    assert resolve_graph(None, deps={"graph": town}) is town
    with pytest.raises(KeyError):
        resolve_graph(GraphByName(name="city"), deps={"graphs": {}})
    with pytest.raises(ValueError):
        resolve_graph(None, deps={})

    missing = str(tmp_path / "missing.geojson")
    with pytest.raises(FileNotFoundError):
        resolve_graph(GraphByPath(file=missing), deps={})
    assert len(resolve_graph(GraphByPath(file=missing, must_exist=False), deps={})) == 0
