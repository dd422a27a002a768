"""
OpenStreetMap to GeoJSON module

Modular components for:
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: Response parsing
- Tags: Tag value coercion
- Dedup: Merging repeated element observations
- Relations: Relation membership index
- Polygon: Area-vs-line classification of closed ways
- Rewind: Polygon ring winding
- GeoJSON: Feature assembly
- API client / Cache / Collector: Fetching from Overpass
"""

from .models import (
    ElementType, OSMNode, OSMWay, OSMRelation, OSMRelationMember, RelationMembership,
)
from .parser import OSMResponseParser
from .tags import parse_element_tags, normalize_tag_value
from .dedup import merge_elements, deduplicate
from .relations import build_relation_index
from .polygon import is_polygon_feature
from .rewind import rewind
from .geojson import GeoJSONAssembler, flatten_properties, osm2geojson
from .errors import (
    OverpassError, OverpassApiStatusError, OverpassQueryError, OverpassRateLimitError,
    OverpassServerError, OverpassGatewayTimeoutError,
)
from .api_client import OverpassAPIClient
from .collector import OSMCollector

__all__ = [
    "ElementType",
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "OSMRelationMember",
    "RelationMembership",
    "OSMResponseParser",
    "parse_element_tags",
    "normalize_tag_value",
    "merge_elements",
    "deduplicate",
    "build_relation_index",
    "is_polygon_feature",
    "rewind",
    "GeoJSONAssembler",
    "flatten_properties",
    "osm2geojson",
    "OverpassError",
    "OverpassApiStatusError",
    "OverpassQueryError",
    "OverpassRateLimitError",
    "OverpassServerError",
    "OverpassGatewayTimeoutError",
    "OverpassAPIClient",
    "OSMCollector",
]
