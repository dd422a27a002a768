"""
Ring winding normalization

Rewinds GeoJSON polygon rings so that outer rings and holes have opposite,
consistent orientations. Works in place on plain GeoJSON dicts.
"""

from typing import Any, Dict, List

Position = List[float]
Ring = List[Position]


def rewind(gj: Dict[str, Any], outer_clockwise: bool = True) -> Dict[str, Any]:
    """
    Rewind all polygon rings found in a GeoJSON object

    Recurses through FeatureCollection, Feature and GeometryCollection.
    Geometries other than Polygon and MultiPolygon are left untouched.

    Args:
        gj: GeoJSON object, modified in place
        outer_clockwise: Required direction of outer rings (holes get the opposite)

    Returns:
        The same object
    """
    if not gj:
        return gj

    gj_type = gj.get("type")

    if gj_type == "FeatureCollection":
        for feature in gj.get("features", []):
            rewind(feature, outer_clockwise)
    elif gj_type == "GeometryCollection":
        for geometry in gj.get("geometries", []):
            rewind(geometry, outer_clockwise)
    elif gj_type == "Feature":
        rewind(gj.get("geometry"), outer_clockwise)
    elif gj_type == "Polygon":
        rewind_rings(gj["coordinates"], outer_clockwise)
    elif gj_type == "MultiPolygon":
        for rings in gj["coordinates"]:
            rewind_rings(rings, outer_clockwise)

    return gj


def rewind_rings(rings: List[Ring], outer_clockwise: bool) -> None:
    """Rewind the outer ring and every hole of one polygon"""
    if not rings:
        return
    rewind_ring(rings[0], outer_clockwise)
    for ring in rings[1:]:
        rewind_ring(ring, not outer_clockwise)


def ring_signed_area(ring: Ring) -> float:
    """
    Shoelace sum of a ring; positive means clockwise

    Uses Neumaier compensated summation so long rings with large
    coordinates keep a reliable sign.
    """
    area = 0.0
    err = 0.0
    n = len(ring)
    for i in range(n):
        j = i - 1 if i > 0 else n - 1
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        k = (xi - xj) * (yj + yi)
        m = area + k
        if abs(area) >= abs(k):
            err += area - m + k
        else:
            err += k - m + area
        area = m

    return area + err


def is_clockwise(ring: Ring) -> bool:
    return ring_signed_area(ring) >= 0


def rewind_ring(ring: Ring, clockwise: bool) -> None:
    """Reverse a ring in place unless it already winds in the given direction"""
    area = ring_signed_area(ring)
    # Degenerate rings have no direction; reversing them would not be idempotent
    if area == 0:
        return
    if (area > 0) != clockwise:
        ring.reverse()
