"""Main FamilyTree facade combining all stores."""

from typing import List, Optional

from familytree.config import DatabaseSettings
from familytree.models import MemberPayload
from familytree.store.database import Database
from familytree.store.members import MemberStore
from familytree.store.models import Member, Relationship, RelationshipDetail, RelationshipType
from familytree.store.relationship_types import RelationshipTypeStore
from familytree.store.relationships import RelationshipStore


class FamilyTree:
    """
    Main interface for family tree operations.
    
    Combines member, relationship type, and relationship stores over one
    Database handle.
    
    Usage:
        tree = FamilyTree(DatabaseSettings(path="data/family_tree.db"))
        parent = tree.add_relationship_type("Parent")
        child = tree.add_relationship_type("Child", inverse_type_id=parent.id)
        tree.add_relationship(alice.id, parent.id, bob.id)
    """
    
    def __init__(self, config: Optional[DatabaseSettings] = None):
        self.db = Database(config)
        self.db.init_schema()
        
        # Compose stores
        self.members = MemberStore(self.db)
        self.relationship_types = RelationshipTypeStore(self.db)
        self.relationships = RelationshipStore(self.db, self.relationship_types)
    
    def ping(self) -> bool:
        return self.db.ping()
    
    # ─────────────────────────────────────────
    # Member operations (delegated)
    # ─────────────────────────────────────────
    
    def add_member(self, payload: MemberPayload) -> Member:
        return self.members.add(payload)
    
    def get_member(self, member_id: str) -> Member:
        return self.members.get(member_id)
    
    def get_all_members(self) -> List[Member]:
        return self.members.get_all()
    
    def update_member(self, member_id: str, payload: MemberPayload) -> Member:
        return self.members.update(member_id, payload)
    
    def delete_member(self, member_id: str) -> Member:
        return self.members.delete(member_id)
    
    # ─────────────────────────────────────────
    # Relationship type operations (delegated)
    # ─────────────────────────────────────────
    
    def add_relationship_type(self, name: str, inverse_type_id: Optional[str] = None,
                              self_inverse: bool = False) -> RelationshipType:
        return self.relationship_types.add(name, inverse_type_id, self_inverse)
    
    def get_relationship_type(self, type_id: str) -> RelationshipType:
        return self.relationship_types.get(type_id)
    
    def get_all_relationship_types(self) -> List[RelationshipType]:
        return self.relationship_types.get_all()
    
    def update_relationship_type(self, type_id: str, **kwargs) -> RelationshipType:
        return self.relationship_types.update(type_id, **kwargs)
    
    def delete_relationship_type(self, type_id: str) -> RelationshipType:
        return self.relationship_types.delete(type_id)
    
    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────
    
    def add_relationship(self, member_id_1: str, relationship_type_id: str,
                         member_id_2: str) -> Relationship:
        return self.relationships.create(member_id_1, relationship_type_id, member_id_2)
    
    def update_relationship(self, relationship_id: str, member_id_1: str,
                            relationship_type_id: str, member_id_2: str) -> Relationship:
        return self.relationships.update(relationship_id, member_id_1, relationship_type_id, member_id_2)
    
    def delete_relationship(self, relationship_id: str) -> Relationship:
        return self.relationships.delete(relationship_id)
    
    def get_all_relationships(self) -> List[RelationshipDetail]:
        return self.relationships.get_all()
    
    def get_member_relationships(self, member_id: str) -> List[RelationshipDetail]:
        return self.relationships.get_for_member(member_id)
