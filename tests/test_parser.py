import pytest

from overpass_geojson.osm.models import ElementType, OSMNode, OSMPoint, OSMRelation, OSMWay
from overpass_geojson.osm.parser import OSMResponseParser


def test_parse_response_dict():
    data = {
        "version": 0.6,
        "elements": [
            {"type": "node", "id": 1, "lat": 51.5, "lon": -0.1, "tags": {"amenity": "cafe"},
             "version": "3", "user": "mapper"},
            {"type": "way", "id": 2, "nodes": [1, 3]},
        ],
    }

    elements = OSMResponseParser.parse_elements(data)

    node, way = elements
    assert isinstance(node, OSMNode)
    assert node.to_position() == [-0.1, 51.5]
    assert node.meta_information() == {"version": "3", "user": "mapper"}
    assert isinstance(way, OSMWay)
    assert way.nodes == [1, 3]
    assert way.tags == {}
    assert way.geometry is None


def test_parse_way_geometry_drops_null_points():
    data = [{
        "type": "way", "id": 2, "nodes": [1, 2, 3],
        "geometry": [{"lat": 1, "lon": 2}, None, {"lat": 3, "lon": 4}],
        "bounds": {"minlat": 1, "minlon": 2, "maxlat": 3, "maxlon": 4},
    }]

    way = OSMResponseParser.parse_elements(data)[0]

    assert way.geometry == [OSMPoint(lat=1, lon=2), OSMPoint(lat=3, lon=4)]
    assert way.get_coordinates() == [[2, 1], [4, 3]]
    assert way.bounds.maxlon == 4


def test_parse_relation_members():
    data = [{
        "type": "relation", "id": 5, "tags": {"type": "multipolygon"},
        "members": [
            {"type": "way", "ref": 7, "role": "outer"},
            {"type": "node", "ref": 8, "role": "label", "lat": 1.0, "lon": 2.0},
        ],
    }]

    rel = OSMResponseParser.parse_elements(data)[0]

    assert isinstance(rel, OSMRelation)
    assert rel.key == "relation/5"
    assert [(m.type, m.ref, m.role) for m in rel.members] == [
        (ElementType.WAY, 7, "outer"), (ElementType.NODE, 8, "label"),
    ]
    assert rel.members[1].lat == 1.0


def test_unknown_element_types_skipped():
    data = [{"type": "area", "id": 3600000001}, {"type": "node", "id": 1, "lat": 0, "lon": 0}]
    elements = OSMResponseParser.parse_elements(data)
    assert [e.key for e in elements] == ["node/1"]


def test_parsed_elements_pass_through():
    node = OSMNode(id=4)
    assert OSMResponseParser.parse_elements([node])[0] is node


def test_element_without_id_rejected():
    with pytest.raises(ValueError):
        OSMResponseParser.parse_elements([{"type": "node", "lat": 0, "lon": 0}])


def test_bad_input_rejected():
    with pytest.raises(ValueError):
        OSMResponseParser.parse_elements("not a response")


def test_way_coordinates_from_nodes_skip_missing():
    nodes = {1: OSMNode(id=1, lat=0, lon=0), 3: OSMNode(id=3, lat=1, lon=1)}
    way = OSMWay(id=1, nodes=[1, 2, 3])
    assert way.get_coordinates(nodes) == [[0, 0], [1, 1]]
    assert way.get_coordinates() == []


def test_node_without_coordinates():
    element = OSMResponseParser.parse_element({"type": "node", "id": 5, "tags": {"name": "x"}})
    assert element.lat is None and element.lon is None
    assert not element.has_coordinates
    assert element.tags == {"name": "x"}
