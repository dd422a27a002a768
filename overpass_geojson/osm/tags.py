"""
Tag value coercion

Converts raw string tag values into primitives ("yes"/"no" -> bool,
numeric text -> number) and back into comparable strings
"""

import copy
import re
from dataclasses import replace
from typing import Any, Dict, Union

from .models import OSMElement, TagValue

# Leading numeric prefix, as accepted by JavaScript's parseFloat
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def parse_tag_value(value: TagValue) -> TagValue:
    """Coerce one raw tag value to a primitive when possible"""
    if not isinstance(value, str):
        return value
    if value == "yes":
        return True
    if value == "no":
        return False
    match = _NUMBER_PREFIX.match(value)
    if match:
        text = match.group(1)
        if text.lstrip("+-").isdigit():
            return int(text)
        # float() accepts "Infinity" as well
        return float(text)
    return value


def parse_tags(tags: Dict[str, TagValue]) -> Dict[str, TagValue]:
    return {key: parse_tag_value(value) for key, value in tags.items()}


def parse_element_tags(element: Union[OSMElement, Dict[str, Any]]) -> Union[OSMElement, Dict[str, Any]]:
    """
    Return a copy of an element with its tag values coerced to primitives

    Accepts raw Overpass dicts as well as parsed OSM elements. Elements
    without tags are returned unchanged.
    """
    if isinstance(element, dict):
        if not element.get("tags"):
            return element
        parsed = copy.copy(element)
        parsed["tags"] = parse_tags(element["tags"])
        return parsed

    if not element.tags:
        return element
    return replace(element, tags=parse_tags(element.tags))


def normalize_tag_value(value: TagValue) -> str:
    """
    Map a tag value back to OSM string form

    True -> "yes", False -> "no", numbers -> decimal text. bool is
    checked before int since it is a subclass of it.
    """
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
