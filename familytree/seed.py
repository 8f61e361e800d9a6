"""
Default relationship types and sample members.

Seeding is idempotent: types are matched by name and only missing ones
are created.
"""

import logging
from typing import Dict, Tuple

from familytree.models import MemberPayload
from familytree.store.family_tree import FamilyTree
from familytree.store.models import Member


logger = logging.getLogger(__name__)

# (type, inverse) pairs
INVERSE_PAIRS = [
    ("Parent", "Child"),
    ("Grandparent", "Grandchild"),
    ("Aunt/Uncle", "Niece/Nephew"),
    ("Step-Parent", "Step-Child"),
    ("Parent-in-Law", "Child-in-Law"),
    ("Godparent", "Godchild"),
]

SELF_INVERSE = ["Spouse", "Sibling", "Half-Sibling", "Cousin", "Co-Wife", "Chosen Sibling"]

SAMPLE_MEMBERS = [
    MemberPayload(first_name="Ramesh", last_name="Kumar", date_of_birth="1950-03-14", is_alive=False,
                  date_of_death="2019-11-02"),
    MemberPayload(first_name="Padma", last_name="Kumar", date_of_birth="1954-07-21"),
    MemberPayload(first_name="Suresh", middle_name="R", last_name="Kumar", date_of_birth="1978-01-09"),
    MemberPayload(first_name="Lakshmi", last_name="Kumar", date_of_birth="1981-05-30"),
]


def _ensure_type(tree: FamilyTree, name: str, self_inverse: bool = False) -> Tuple[str, bool]:
    """Return (id, created) for the named type, creating it when missing."""
    existing = tree.relationship_types.get_by_name(name)
    if existing is not None:
        return existing.id, False
    return tree.add_relationship_type(name, self_inverse=self_inverse).id, True


def seed_relationship_types(tree: FamilyTree) -> Dict[str, str]:
    """
    Create the default relationship types that are not present yet.
    
    Returns: Mapping of type name to id
    """
    ids = {}
    
    for name in SELF_INVERSE:
        ids[name], created = _ensure_type(tree, name, self_inverse=True)
        if created:
            logger.info(f"Created self-inverse type: {name}")
    
    for name, inverse_name in INVERSE_PAIRS:
        ids[name], created = _ensure_type(tree, name)
        ids[inverse_name], inverse_created = _ensure_type(tree, inverse_name)
        if created or inverse_created:
            tree.relationship_types.link_inverses(ids[name], ids[inverse_name])
            logger.info(f"Linked inverse types: {name} <-> {inverse_name}")
    
    return ids


def seed_sample_family(tree: FamilyTree) -> Dict[str, Member]:
    """Add sample members with parent and spouse relationships."""
    type_ids = seed_relationship_types(tree)
    members = {p.first_name: tree.add_member(p) for p in SAMPLE_MEMBERS}
    
    tree.add_relationship(members["Ramesh"].id, type_ids["Spouse"], members["Padma"].id)
    for parent in ("Ramesh", "Padma"):
        for child in ("Suresh", "Lakshmi"):
            tree.add_relationship(members[parent].id, type_ids["Parent"], members[child].id)
    tree.add_relationship(members["Suresh"].id, type_ids["Sibling"], members["Lakshmi"].id)
    
    return members
