"""Rules for deriving the inverse of a stored relationship."""

from typing import Optional

from familytree.store.models import Relationship


def is_self_loop(relationship: Relationship, inverse_type_id: Optional[str]) -> bool:
    """
    True when the inverse would be the relationship itself.
    
    Happens only for a self-inverse type on a member related to itself:
    (A, Spouse, A) mirrors to (A, Spouse, A).
    """
    return (
        inverse_type_id == relationship.relationship_type_id
        and relationship.member_id_1 == relationship.member_id_2
    )


def mirror(relationship: Relationship, inverse_type_id: str) -> tuple[str, str, str]:
    """(member_id_1, relationship_type_id, member_id_2) of the inverse row."""
    return (relationship.member_id_2, inverse_type_id, relationship.member_id_1)
