"""
Polygon feature rules

Decides whether a closed way is meant as an area or as a line, based on
the well-known OSM tagging conventions listed at
https://wiki.openstreetmap.org/wiki/Overpass_turbo/Polygon_Features
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping

from .models import TagValue
from .tags import normalize_tag_value


@dataclass(frozen=True)
class PolygonRule:
    """Area rule for one tag key"""
    key: str
    mode: str  # "all" or "whitelist"
    values: FrozenSet[str] = field(default_factory=frozenset)

    def matches(self, value: str) -> bool:
        if self.mode == "all":
            return True
        return value in self.values


def _rule(key: str, mode: str, values: List[str] = None) -> PolygonRule:
    return PolygonRule(key=key, mode=mode, values=frozenset(values or []))


POLYGON_FEATURES: List[PolygonRule] = [
    _rule("building", "all"),
    _rule("building:part", "all"),
    _rule("landuse", "all"),
    _rule("natural", "whitelist", [
        "wood", "forest", "scrub", "heath", "grassland", "fell", "bare_rock",
        "scree", "shingle", "sand", "mud", "water", "wetland", "glacier", "bay",
        "beach", "spring", "hot_spring", "rock", "stone", "sinkhole",
    ]),
    _rule("leisure", "whitelist", [
        "park", "garden", "pitch", "golf_course", "sports_centre", "stadium",
        "swimming_pool", "track", "playground", "common", "nature_reserve",
        "recreation_ground", "dog_park", "fitness_station",
    ]),
    _rule("amenity", "whitelist", [
        "parking", "school", "college", "university", "hospital", "kindergarten",
        "grave_yard", "marketplace", "fuel", "parking_space", "parking_entrance",
        "restaurant", "cafe", "fast_food", "bicycle_parking",
    ]),
    _rule("highway", "whitelist", ["pedestrian", "services", "rest_area", "platform"]),
    _rule("historic", "whitelist", [
        "archaeological_site", "ruins", "castle", "fort", "memorial", "monument",
        "battlefield",
    ]),
    _rule("water", "all"),
    _rule("waterway", "whitelist", ["riverbank", "dock", "boatyard", "dam", "waterfall"]),
    _rule("boundary", "all"),
    _rule("man_made", "whitelist", [
        "pier", "breakwater", "groyne", "reservoir_covered", "bridge", "tower",
        "lighthouse", "windmill", "works", "watermill", "wastewater_plant",
        "water_works", "storage_tank", "silo", "telescope",
    ]),
    _rule("military", "whitelist", [
        "airfield", "bunker", "barracks", "danger_area", "range", "naval_base",
        "training_area",
    ]),
    _rule("tourism", "whitelist", [
        "attraction", "camp_site", "caravan_site", "picnic_site", "theme_park",
        "zoo", "museum", "hotel", "motel", "guest_house", "hostel",
    ]),
    _rule("shop", "all"),
    _rule("aeroway", "whitelist", [
        "aerodrome", "heliport", "terminal", "hangar", "apron", "taxiway", "runway",
    ]),
    _rule("place", "whitelist", [
        "city", "town", "village", "hamlet", "suburb", "neighbourhood", "island", "islet",
    ]),
    _rule("power", "whitelist", ["plant", "substation", "generator", "transformer"]),
    _rule("public_transport", "whitelist", ["platform", "station"]),
    _rule("office", "all"),
    _rule("area", "all"),
]

_RULES_BY_KEY: Dict[str, PolygonRule] = {rule.key: rule for rule in POLYGON_FEATURES}


def is_polygon_feature(tags: Mapping[str, TagValue]) -> bool:
    """
    Check whether a closed way with these tags is an area

    Tag values may be raw strings or coerced primitives; False counts
    as "no".

    Args:
        tags: Tags of the way

    Returns:
        True if any tag matches a polygon rule and area is not "no"
    """
    if not tags:
        return False
    if "area" in tags and normalize_tag_value(tags["area"]) == "no":
        return False

    for key, raw_value in tags.items():
        rule = _RULES_BY_KEY.get(key)
        if rule is None:
            continue
        value = normalize_tag_value(raw_value)
        if value == "no":
            continue
        if rule.matches(value):
            return True

    return False
