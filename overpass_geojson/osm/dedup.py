"""
Element deduplication

Overlapping or paginated Overpass results can contain the same element
more than once. Repeated observations of one (type, id) are collapsed
into a single canonical element.
"""

from dataclasses import fields, replace
from typing import Dict, Iterable, TypeVar

from loguru import logger

from .models import OSMElement

E = TypeVar("E", bound=OSMElement)

# Sequence fields where an empty incoming value means "not observed"
_SEQUENCE_FIELDS = ("nodes", "members")


def version_number(version) -> int:
    """Coerce a version field to int; absent or unparsable counts as 0"""
    if version is None:
        return 0
    try:
        return int(version)
    except (TypeError, ValueError):
        try:
            return int(float(version))
        except (TypeError, ValueError):
            return 0


def merge_elements(existing: E, incoming: E) -> E:
    """
    Merge two observations of the same element

    When either carries a version and the versions differ, the higher
    version wins outright (the incoming one on a numeric tie). Otherwise
    fields are merged: present incoming fields overwrite existing ones and
    tags are merged key by key, incoming winning on conflicts.

    Args:
        existing: Element seen first
        incoming: Element seen later

    Returns:
        The canonical element (may be one of the inputs)
    """
    if existing.type != incoming.type:
        raise ValueError(f"Cannot merge {existing.key} with {incoming.key}")

    if (existing.version or incoming.version) and existing.version != incoming.version:
        existing_version = version_number(existing.version)
        incoming_version = version_number(incoming.version)
        if existing_version > incoming_version:
            return existing
        return incoming

    changes = {}
    for f in fields(existing):
        if not f.init or f.name == "tags":
            continue
        value = getattr(incoming, f.name)
        if value is None:
            continue
        if f.name in _SEQUENCE_FIELDS and not value:
            continue
        changes[f.name] = value

    tags = dict(existing.tags)
    tags.update(incoming.tags)
    changes["tags"] = tags

    return replace(existing, **changes)


def deduplicate(elements: Iterable[E]) -> Dict[int, E]:
    """
    Collapse repeated elements of one type into an id -> element map

    Keeps first-seen order; later observations are merged into the
    earlier entry.
    """
    result: Dict[int, E] = {}
    duplicates = 0
    for element in elements:
        current = result.get(element.id)
        if current is not None:
            element = merge_elements(current, element)
            duplicates += 1
        result[element.id] = element

    if duplicates:
        logger.debug(f"Merged {duplicates} duplicate element observations")
    return result
