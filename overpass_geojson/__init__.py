"""
Overpass to GeoJSON converter

Turns OpenStreetMap elements (nodes, ways, relations) returned by the
Overpass API into an RFC 7946 GeoJSON FeatureCollection:
- Duplicate observations of an element are merged
- Relation memberships are indexed per member
- Closed ways become Polygons or LineStrings by tag rules
- Polygon rings are rewound to a consistent winding
"""

from .config import Config, get_config, validate_config
from .models import GeoJSONFeatureCollection, validate_feature_collection
from .osm import (
    OSMCollector, OverpassAPIClient, OverpassError, is_polygon_feature, osm2geojson,
    parse_element_tags, rewind,
)

__version__ = "1.0.0"

__all__ = [
    "Config",
    "get_config",
    "validate_config",
    "GeoJSONFeatureCollection",
    "validate_feature_collection",
    "OSMCollector",
    "OverpassAPIClient",
    "OverpassError",
    "is_polygon_feature",
    "osm2geojson",
    "parse_element_tags",
    "rewind",
]
