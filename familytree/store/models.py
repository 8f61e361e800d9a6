"""
Record types for the family tree store.

Models:
- Member: a person in the tree
- RelationshipType: named relation with an optional inverse type
- Relationship: directional edge "member_id_1 is <type> of member_id_2"
- RelationshipDetail: relationship joined with member and type names

These are pure data structures - NO database logic here.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Member:
    """Family member."""
    id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    date_of_birth: Optional[str] = None     # ISO YYYY-MM-DD
    date_of_death: Optional[str] = None     # ISO YYYY-MM-DD
    is_alive: bool = True
    
    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "date_of_birth": self.date_of_birth,
            "date_of_death": self.date_of_death,
            "is_alive": self.is_alive,
        }


@dataclass
class RelationshipType:
    """Relationship type such as Parent, Child or Spouse."""
    id: str
    name: str
    inverse_type_id: Optional[str] = None
    
    @property
    def is_self_inverse(self) -> bool:
        return self.inverse_type_id == self.id
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "inverse_type_id": self.inverse_type_id,
        }


@dataclass(frozen=True)
class Relationship:
    """Stored relationship row."""
    id: str
    member_id_1: str
    relationship_type_id: str
    member_id_2: str
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id_1": self.member_id_1,
            "relationship_type_id": self.relationship_type_id,
            "member_id_2": self.member_id_2,
        }


@dataclass
class RelationshipDetail:
    """Relationship enriched with member names and type name."""
    id: str
    member_id_1: str
    member1_first_name: str
    member1_last_name: str
    relationship_type_id: str
    relationship_type_name: str
    inverse_type_id: Optional[str]
    member_id_2: str
    member2_first_name: str
    member2_last_name: str
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id_1": self.member_id_1,
            "member1_first_name": self.member1_first_name,
            "member1_last_name": self.member1_last_name,
            "relationship_type_id": self.relationship_type_id,
            "relationship_type_name": self.relationship_type_name,
            "inverse_type_id": self.inverse_type_id,
            "member_id_2": self.member_id_2,
            "member2_first_name": self.member2_first_name,
            "member2_last_name": self.member2_last_name,
        }
