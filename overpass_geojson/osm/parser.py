"""
OSM response parser

Parses Overpass API responses into OSMNode, OSMWay and OSMRelation objects
"""

from typing import Dict, Any, List, Optional, Union
from loguru import logger

from .models import (
    ElementType, OSMBounds, OSMElement, OSMNode, OSMPoint, OSMRelation,
    OSMRelationMember, OSMWay,
)


def _meta(element: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "timestamp": element.get("timestamp"),
        "version": element.get("version"),
        "changeset": element.get("changeset"),
        "user": element.get("user"),
        "uid": element.get("uid"),
    }


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_geometry(geometry: Optional[List[Any]]) -> Optional[List[OSMPoint]]:
        """
        Parse an Overpass 'out geom' geometry list

        Entries are {lat, lon} objects; null entries (points outside the
        query bbox) are dropped. [lon, lat] pairs are accepted as well.
        """
        if geometry is None:
            return None
        points = []
        for point in geometry:
            if isinstance(point, dict):
                points.append(OSMPoint(lat=point["lat"], lon=point["lon"]))
            elif isinstance(point, (list, tuple)) and len(point) >= 2:
                points.append(OSMPoint(lat=point[1], lon=point[0]))
        return points

    @staticmethod
    def parse_point(point: Optional[Dict[str, Any]]) -> Optional[OSMPoint]:
        if not point:
            return None
        return OSMPoint(lat=point["lat"], lon=point["lon"])

    @staticmethod
    def parse_bounds(bounds: Optional[Dict[str, Any]]) -> Optional[OSMBounds]:
        if not bounds:
            return None
        return OSMBounds(
            minlat=bounds["minlat"],
            minlon=bounds["minlon"],
            maxlat=bounds["maxlat"],
            maxlon=bounds["maxlon"],
        )

    @classmethod
    def parse_element(cls, element: Dict[str, Any]) -> Optional[OSMElement]:
        """
        Parse a single Overpass element

        Args:
            element: Element dict from the 'elements' array

        Returns:
            Typed element, or None for element types that are not nodes,
            ways or relations (e.g. 'area', 'count')

        Raises:
            ValueError: If the element has no type or id
        """
        if "type" not in element or "id" not in element:
            raise ValueError(f"Overpass element without type or id: {element!r}")

        element_type = element["type"]
        tags = dict(element.get("tags") or {})

        if element_type == ElementType.NODE.value:
            return OSMNode(
                id=element["id"],
                lat=element.get("lat"),
                lon=element.get("lon"),
                tags=tags,
                **_meta(element)
            )

        if element_type == ElementType.WAY.value:
            return OSMWay(
                id=element["id"],
                nodes=list(element.get("nodes", [])),
                tags=tags,
                geometry=cls.parse_geometry(element.get("geometry")),
                center=cls.parse_point(element.get("center")),
                bounds=cls.parse_bounds(element.get("bounds")),
                **_meta(element)
            )

        if element_type == ElementType.RELATION.value:
            members = []
            for member in element.get("members", []):
                members.append(OSMRelationMember(
                    type=ElementType(member["type"]),
                    ref=member["ref"],
                    role=member.get("role", ""),
                    lat=member.get("lat"),
                    lon=member.get("lon"),
                    geometry=cls.parse_geometry(member.get("geometry")),
                ))
            return OSMRelation(
                id=element["id"],
                members=members,
                tags=tags,
                geometry=cls.parse_geometry(element.get("geometry")),
                center=cls.parse_point(element.get("center")),
                bounds=cls.parse_bounds(element.get("bounds")),
                **_meta(element)
            )

        logger.debug(f"Skipping unsupported element type: {element_type}")
        return None

    @classmethod
    def parse_elements(
        cls,
        data: Union[Dict[str, Any], List[Union[Dict[str, Any], OSMElement]]]
    ) -> List[OSMElement]:
        """
        Parse Overpass response into typed elements

        Handles both 'out body' (node references) and 'out geom' (direct
        geometry) formats. Already-parsed elements are passed through.

        Args:
            data: JSON response from Overpass API, or its 'elements' list

        Returns:
            List of elements in response order
        """
        if isinstance(data, dict):
            raw_elements = data.get("elements", [])
        elif isinstance(data, list):
            raw_elements = data
        else:
            raise ValueError(f"Expected an Overpass response or element list, got {type(data).__name__}")

        elements = []
        for raw in raw_elements:
            if isinstance(raw, OSMElement):
                elements.append(raw)
                continue
            element = cls.parse_element(raw)
            if element is not None:
                elements.append(element)

        return elements
