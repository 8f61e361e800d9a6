"""
Relationship Type Store - catalog of relationship types and their inverses.

A type may name another type as its inverse (Parent <-> Child) or itself
(Spouse, Sibling, Cousin, Co-Wife). The inverse lookup runs on a
caller-supplied connection so that it sees the caller's own transaction.
"""

import sqlite3
from typing import List, Optional

from familytree.store.database import Database, new_id
from familytree.store.errors import (
    NotFoundError,
    ReferentialConflictError,
    ValidationError,
    classify_integrity_error,
)
from familytree.store.models import RelationshipType


ENTITY = "relationship type"


class RelationshipTypeStore:
    """Storage and inverse lookup for relationship types."""
    
    def __init__(self, db: Database):
        self.db = db
    
    # =========================================================================
    # CATALOG
    # =========================================================================
    
    @staticmethod
    def inverse_of(conn: sqlite3.Connection, type_id: str) -> Optional[str]:
        """Declared inverse type id, or None if absent or the type is unknown."""
        row = conn.execute(
            "SELECT inverse_type_id FROM relationship_types WHERE id = ?",
            (type_id,)
        ).fetchone()
        return row["inverse_type_id"] if row else None
    
    # =========================================================================
    # CRUD
    # =========================================================================
    
    def add(
        self,
        name: str,
        inverse_type_id: Optional[str] = None,
        self_inverse: bool = False
    ) -> RelationshipType:
        """
        Add a relationship type.
        
        Args:
            name: Unique display name (e.g., "Parent")
            inverse_type_id: Existing type that reads as the reverse
            self_inverse: Store the new type as its own inverse
            
        Returns: The stored type
        """
        if self_inverse and inverse_type_id:
            raise ValidationError("Use either inverse_type_id or self_inverse, not both")
        
        type_id = new_id()
        if self_inverse:
            inverse_type_id = type_id
        
        try:
            with self.db.acquire() as conn:
                conn.execute(
                    "INSERT INTO relationship_types (id, name, inverse_type_id) VALUES (?, ?, ?)",
                    (type_id, name, inverse_type_id)
                )
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "add", ENTITY) from e
        return self.get(type_id)
    
    def get(self, type_id: str) -> RelationshipType:
        """Get relationship type by ID."""
        with self.db.acquire() as conn:
            row = conn.execute(
                "SELECT id, name, inverse_type_id FROM relationship_types WHERE id = ?",
                (type_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("Relationship type not found")
        return self._row_to_type(row)
    
    def get_by_name(self, name: str) -> Optional[RelationshipType]:
        """Get relationship type by exact name."""
        with self.db.acquire() as conn:
            row = conn.execute(
                "SELECT id, name, inverse_type_id FROM relationship_types WHERE name = ?",
                (name,)
            ).fetchone()
        return self._row_to_type(row) if row else None
    
    def get_all(self) -> List[RelationshipType]:
        """Get all relationship types ordered by name."""
        with self.db.acquire() as conn:
            rows = conn.execute(
                "SELECT id, name, inverse_type_id FROM relationship_types ORDER BY name"
            ).fetchall()
        return [self._row_to_type(row) for row in rows]
    
    def update(
        self,
        type_id: str,
        name: Optional[str] = None,
        inverse_type_id: Optional[str] = None,
        self_inverse: Optional[bool] = None,
        clear_inverse: bool = False
    ) -> RelationshipType:
        """
        Update a relationship type.
        
        Fields left as None keep their stored value. self_inverse=True points
        the inverse at the type itself; clear_inverse=True removes it.
        """
        if self_inverse and inverse_type_id:
            raise ValidationError("Use either inverse_type_id or self_inverse, not both")
        if clear_inverse and (self_inverse or inverse_type_id):
            raise ValidationError("Cannot clear the inverse and set it at the same time")
        if self_inverse:
            inverse_type_id = type_id
        
        try:
            with self.db.acquire() as conn:
                cursor = conn.execute("""
                    UPDATE relationship_types SET
                        name = COALESCE(?, name),
                        inverse_type_id = CASE WHEN ? THEN NULL ELSE COALESCE(?, inverse_type_id) END
                    WHERE id = ?
                """, (name, int(clear_inverse), inverse_type_id, type_id))
                updated = cursor.rowcount
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "update", ENTITY) from e
        if updated == 0:
            raise NotFoundError("Relationship type not found")
        return self.get(type_id)
    
    def delete(self, type_id: str) -> RelationshipType:
        """
        Delete a relationship type.
        
        Raises ReferentialConflictError while any relationship uses the type
        or another type names it as inverse. A self-inverse type does not
        block its own deletion.
        """
        rel_type = self.get(type_id)
        try:
            with self.db.transaction() as conn:
                rows = conn.execute(
                    "SELECT name FROM relationship_types WHERE inverse_type_id = ? AND id != ? ORDER BY name",
                    (type_id, type_id)
                ).fetchall()
                if rows:
                    names = ", ".join(row["name"] for row in rows)
                    raise ReferentialConflictError(
                        f"Cannot delete relationship type: it is the inverse of {names}. "
                        f"Clear their inverse first."
                    )
                cursor = conn.execute("DELETE FROM relationship_types WHERE id = ?", (type_id,))
                deleted = cursor.rowcount
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "delete", ENTITY) from e
        if deleted == 0:
            raise NotFoundError("Relationship type not found")
        return rel_type
    
    def link_inverses(self, type_a: str, type_b: str) -> None:
        """Make two existing types each other's inverse."""
        try:
            with self.db.transaction() as conn:
                for source, target in ((type_a, type_b), (type_b, type_a)):
                    cursor = conn.execute(
                        "UPDATE relationship_types SET inverse_type_id = ? WHERE id = ?",
                        (target, source)
                    )
                    if cursor.rowcount == 0:
                        raise NotFoundError("Relationship type not found")
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "update", ENTITY) from e
    
    @staticmethod
    def _row_to_type(row) -> RelationshipType:
        return RelationshipType(
            id=row["id"],
            name=row["name"],
            inverse_type_id=row["inverse_type_id"],
        )
