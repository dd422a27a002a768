import pytest


def node(node_id, lon, lat, **extra):
    element = {"type": "node", "id": node_id, "lat": lat, "lon": lon}
    element.update(extra)
    return element


def way(way_id, nodes, tags=None, **extra):
    element = {"type": "way", "id": way_id, "nodes": nodes}
    if tags is not None:
        element["tags"] = tags
    element.update(extra)
    return element


def relation(rel_id, members, tags=None, **extra):
    element = {"type": "relation", "id": rel_id, "members": members}
    if tags is not None:
        element["tags"] = tags
    element.update(extra)
    return element


@pytest.fixture
def building_elements():
    """A closed building way over three nodes"""
    return [
        way(1, [10, 11, 12, 10], {"building": "yes"}),
        node(10, 0, 0),
        node(11, 0, 1),
        node(12, 1, 1),
    ]
