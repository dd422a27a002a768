"""
OSM data models

Data classes for representing OSM nodes, ways and relations as returned
by the Overpass API
"""

from typing import List, Dict, Optional, Union, Any
from dataclasses import dataclass, field
from enum import Enum


# Tag values arrive as raw strings or, after coercion, as primitives
TagValue = Union[str, bool, int, float]

META_KEYS = ("timestamp", "version", "changeset", "user", "uid")


class ElementType(str, Enum):
    """OSM element types"""
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


@dataclass
class OSMPoint:
    """A bare lat/lon pair (Overpass 'out geom' / 'out center')"""
    lat: float
    lon: float

    def to_position(self) -> List[float]:
        """Get as GeoJSON [lon, lat] position"""
        return [self.lon, self.lat]


@dataclass
class OSMBounds:
    """Bounding box of a way or relation"""
    minlat: float
    minlon: float
    maxlat: float
    maxlon: float


@dataclass
class OSMElement:
    """Fields shared by every OSM element"""
    id: int
    tags: Dict[str, TagValue] = field(default_factory=dict)
    timestamp: Optional[str] = None
    version: Optional[str] = None
    changeset: Optional[str] = None
    user: Optional[str] = None
    uid: Optional[str] = None

    type: ElementType = field(init=False)

    @property
    def key(self) -> str:
        """Feature id in the form '<type>/<id>'"""
        return f"{self.type.value}/{self.id}"

    def meta_information(self) -> Dict[str, Any]:
        """Metadata fields that are present (absent ones are omitted)"""
        meta = {}
        for name in META_KEYS:
            value = getattr(self, name)
            if value is not None:
                meta[name] = value
        return meta


@dataclass
class OSMNode(OSMElement):
    """Represents an OSM node (point)"""
    # None for "out tags" / "out ids" results
    lat: Optional[float] = None
    lon: Optional[float] = None

    def __post_init__(self):
        self.type = ElementType.NODE

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    def to_position(self) -> List[float]:
        return [self.lon, self.lat]


@dataclass
class OSMWay(OSMElement):
    """Represents an OSM way (line or polygon)"""
    nodes: List[int] = field(default_factory=list)
    geometry: Optional[List[OSMPoint]] = None  # Direct geometry from Overpass
    center: Optional[OSMPoint] = None
    bounds: Optional[OSMBounds] = None

    def __post_init__(self):
        self.type = ElementType.WAY

    def get_coordinates(self, nodes: Optional[Dict[int, OSMNode]] = None) -> List[List[float]]:
        """
        Get coordinates as [lon, lat] list

        Args:
            nodes: Node lookup used when the way carries no geometry

        Returns:
            Coordinates, with unresolvable or coordinate-less nodes skipped
        """
        # Prefer direct geometry if available (from 'out geom')
        if self.geometry:
            return [point.to_position() for point in self.geometry]
        if not nodes:
            return []
        coords = []
        for node_id in self.nodes:
            node = nodes.get(node_id)
            if node is not None and node.has_coordinates:
                coords.append(node.to_position())
        return coords


@dataclass
class OSMRelationMember:
    """A member reference inside a relation"""
    type: ElementType
    ref: int
    role: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    geometry: Optional[List[OSMPoint]] = None


@dataclass
class OSMRelation(OSMElement):
    """Represents an OSM relation"""
    members: List[OSMRelationMember] = field(default_factory=list)
    geometry: Optional[List[OSMPoint]] = None
    center: Optional[OSMPoint] = None
    bounds: Optional[OSMBounds] = None

    def __post_init__(self):
        self.type = ElementType.RELATION


@dataclass
class RelationMembership:
    """One (relation, member) edge, stored under the member"""
    role: str
    rel: int
    reltags: Dict[str, TagValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "rel": self.rel, "reltags": self.reltags}


OSMElementType = Union[OSMNode, OSMWay, OSMRelation]
