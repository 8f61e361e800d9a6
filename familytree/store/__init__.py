"""Store package - SQLite persistence for the family tree."""

from familytree.store.database import Database
from familytree.store.family_tree import FamilyTree
from familytree.store.models import Member, Relationship, RelationshipDetail, RelationshipType

__all__ = [
    "Database",
    "FamilyTree",
    "Member",
    "Relationship",
    "RelationshipDetail",
    "RelationshipType",
]
