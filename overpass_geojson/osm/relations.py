"""
Relation membership index

Maps every relation member back to the relations that reference it
"""

from typing import Dict, Iterable, List

from .models import ElementType, OSMRelation, RelationMembership

RelationIndex = Dict[ElementType, Dict[int, List[RelationMembership]]]


def build_relation_index(relations: Iterable[OSMRelation]) -> RelationIndex:
    """
    Build the (member type -> member id -> memberships) lookup

    All element types are present as keys even when empty. Members are
    indexed whether or not the referenced element is part of the batch.

    Args:
        relations: Deduplicated relations

    Returns:
        Membership records in relation and member declaration order
    """
    index: RelationIndex = {element_type: {} for element_type in ElementType}

    for relation in relations:
        for member in relation.members:
            memberships = index[ElementType(member.type)].setdefault(member.ref, [])
            memberships.append(RelationMembership(
                role=member.role,
                rel=relation.id,
                reltags=relation.tags,
            ))

    return index


def memberships_for(index: RelationIndex, element_type: ElementType, element_id: int) -> List[RelationMembership]:
    """Memberships of one element (empty when it belongs to no relation)"""
    return index[element_type].get(element_id, [])
