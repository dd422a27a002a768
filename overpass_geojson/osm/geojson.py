"""
OSM to GeoJSON conversion

Orchestrates deduplication, relation indexing, geometry building,
polygon classification and ring rewinding
"""

from typing import Any, Dict, List, Sequence, Union

from loguru import logger

from .dedup import deduplicate
from .models import ElementType, OSMElement, OSMNode, OSMRelation, OSMWay
from .parser import OSMResponseParser
from .polygon import is_polygon_feature
from .relations import RelationIndex, build_relation_index, memberships_for
from .rewind import rewind

ElementInput = Union[OSMElement, Dict[str, Any]]


class GeoJSONAssembler:
    """
    Builds GeoJSON features from one batch of OSM elements

    Nodes referenced by a way are treated as way geometry and are not
    emitted as points. Relations only contribute membership records;
    relation geometry is not assembled.
    """

    def __init__(self, elements: Sequence[ElementInput]):
        if not isinstance(elements, dict):
            elements = list(elements)
        parsed = OSMResponseParser.parse_elements(elements)

        self.nodes: Dict[int, OSMNode] = deduplicate(
            e for e in parsed if e.type == ElementType.NODE
        )
        self.ways: Dict[int, OSMWay] = deduplicate(
            e for e in parsed if e.type == ElementType.WAY
        )
        self.relations: Dict[int, OSMRelation] = deduplicate(
            e for e in parsed if e.type == ElementType.RELATION
        )
        self.relation_index: RelationIndex = build_relation_index(self.relations.values())

    def points_of_interest(self) -> List[OSMNode]:
        """Nodes with coordinates that are not used by any way"""
        way_node_ids = set()
        for way in self.ways.values():
            way_node_ids.update(way.nodes)
        return [
            node for node_id, node in self.nodes.items()
            if node_id not in way_node_ids and node.has_coordinates
        ]

    def _properties(self, element: OSMElement) -> Dict[str, Any]:
        memberships = memberships_for(self.relation_index, element.type, element.id)
        return {
            "type": element.type.value,
            "id": element.id,
            "tags": element.tags,
            "relations": [m.to_dict() for m in memberships],
            "meta": element.meta_information(),
        }

    def _feature(self, element: OSMElement, geometry: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "id": element.key,
            "properties": self._properties(element),
            "geometry": geometry,
        }

    def build_features(self) -> List[Dict[str, Any]]:
        """
        Build unflattened features

        Properties have the shape {type, id, tags, relations, meta}.
        """
        features = []
        pois = self.points_of_interest()
        for node in pois:
            features.append(self._feature(node, {
                "type": "Point",
                "coordinates": node.to_position(),
            }))

        lines = polygons = dropped = 0
        for way in self.ways.values():
            coords = way.get_coordinates(self.nodes)
            if len(coords) <= 1:
                dropped += 1
                continue

            is_closed = coords[0][0] == coords[-1][0] and coords[0][1] == coords[-1][1]
            if is_closed and is_polygon_feature(way.tags):
                geometry = {"type": "Polygon", "coordinates": [coords]}
                polygons += 1
            else:
                geometry = {"type": "LineString", "coordinates": coords}
                lines += 1
            features.append(self._feature(way, geometry))

        logger.debug(
            f"Built {len(pois)} points, {lines} lines, {polygons} polygons "
            f"({dropped} ways without enough coordinates dropped)"
        )
        return features


def flatten_properties(
    features: List[Dict[str, Any]],
    include_relations: bool = False
) -> List[Dict[str, Any]]:
    """
    Flatten feature properties into meta + tags + id

    The '<type>/<id>' id is applied last so a tag named 'id' cannot
    shadow it. Relation memberships are dropped unless include_relations
    is set.
    """
    flattened = []
    for feature in features:
        props = feature.get("properties") or {}
        properties = {}
        properties.update(props.get("meta") or {})
        properties.update(props.get("tags") or {})
        if include_relations:
            properties["relations"] = props.get("relations") or []
        properties["id"] = f"{props.get('type')}/{props.get('id')}"
        flattened.append({**feature, "properties": properties})
    return flattened


def osm2geojson(
    elements: Sequence[ElementInput],
    outer_clockwise: bool = True,
    include_relations: bool = False
) -> Dict[str, Any]:
    """
    Convert OSM elements to a GeoJSON FeatureCollection

    Args:
        elements: Overpass elements, raw dicts or parsed
        outer_clockwise: Winding of outer polygon rings
        include_relations: Keep relation memberships in the output properties

    Returns:
        FeatureCollection dict
    """
    assembler = GeoJSONAssembler(elements)
    features = assembler.build_features()

    geojson = {
        "type": "FeatureCollection",
        "features": features,
    }
    rewind(geojson, outer_clockwise)

    geojson["features"] = flatten_properties(features, include_relations=include_relations)
    return geojson
