"""
Relationship Store - writes relationships together with their inverses.

Every write keeps the derived inverse row in step with the primary row:
(A, Parent, B) is stored alongside (B, Child, A) when Parent declares Child
as its inverse. Each create/update/delete runs as one transaction, so a
primary row is never committed without its inverse decision.

Reads return rows joined with member names and the type name.
"""

import logging
import sqlite3
from typing import List, Optional

from familytree.store.database import Database, new_id
from familytree.store.errors import NotFoundError, classify_integrity_error
from familytree.store.inverses import is_self_loop, mirror
from familytree.store.models import Relationship, RelationshipDetail
from familytree.store.relationship_types import RelationshipTypeStore


logger = logging.getLogger(__name__)

ENTITY = "relationship"

DETAIL_QUERY = """
    SELECT
        r.id,
        r.member_id_1,
        m1.first_name AS member1_first_name,
        m1.last_name AS member1_last_name,
        r.relationship_type_id,
        rt.name AS relationship_type_name,
        rt.inverse_type_id,
        r.member_id_2,
        m2.first_name AS member2_first_name,
        m2.last_name AS member2_last_name
    FROM relationships r
    JOIN members m1 ON r.member_id_1 = m1.id
    JOIN members m2 ON r.member_id_2 = m2.id
    JOIN relationship_types rt ON r.relationship_type_id = rt.id
"""

DETAIL_ORDER = "ORDER BY m1.first_name, rt.name, m2.first_name"


class RelationshipStore:
    """Transactional writer and reader for relationships."""
    
    def __init__(self, db: Database, types: RelationshipTypeStore):
        self.db = db
        self.types = types
    
    # =========================================================================
    # WRITES
    # =========================================================================
    
    def create(self, member_id_1: str, relationship_type_id: str, member_id_2: str) -> Relationship:
        """
        Add a relationship and, where the type declares one, its inverse.
        
        A relationship identical to a stored row (for instance the inverse
        written by an earlier call) is not stored twice; the stored row is
        returned instead.
        
        Returns: The primary relationship
        """
        try:
            with self.db.transaction() as conn:
                primary = self._find(conn, member_id_1, relationship_type_id, member_id_2)
                if primary is None:
                    primary = Relationship(
                        id=new_id(),
                        member_id_1=member_id_1,
                        relationship_type_id=relationship_type_id,
                        member_id_2=member_id_2,
                    )
                    self._insert(conn, primary.id, primary.member_id_1,
                                 primary.relationship_type_id, primary.member_id_2)
                else:
                    logger.debug(f"Relationship already stored as {primary.id}, reusing it")
                inverse_type_id = self.types.inverse_of(conn, relationship_type_id)
                self._ensure_inverse(conn, primary, inverse_type_id)
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "add", ENTITY) from e
        return primary
    
    def update(
        self,
        relationship_id: str,
        member_id_1: str,
        relationship_type_id: str,
        member_id_2: str
    ) -> Relationship:
        """
        Replace a relationship's members and type.
        
        The old inverse is removed before the new values are applied, then
        the inverse for the new values is created. This handles a change of
        type, direction or members without diffing old against new.
        """
        try:
            with self.db.transaction() as conn:
                old = self._get(conn, relationship_id)
                if old is None:
                    raise NotFoundError("Relationship not found")
                
                old_inverse_type_id = self.types.inverse_of(conn, old.relationship_type_id)
                self._remove_inverse(conn, old, old_inverse_type_id)
                
                cursor = conn.execute("""
                    UPDATE relationships
                    SET member_id_1 = ?, relationship_type_id = ?, member_id_2 = ?
                    WHERE id = ?
                """, (member_id_1, relationship_type_id, member_id_2, relationship_id))
                if cursor.rowcount == 0:
                    raise NotFoundError("Relationship not found")
                
                updated = Relationship(
                    id=relationship_id,
                    member_id_1=member_id_1,
                    relationship_type_id=relationship_type_id,
                    member_id_2=member_id_2,
                )
                new_inverse_type_id = self.types.inverse_of(conn, relationship_type_id)
                self._ensure_inverse(conn, updated, new_inverse_type_id)
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "update", ENTITY) from e
        return updated
    
    def delete(self, relationship_id: str) -> Relationship:
        """
        Delete a relationship and its inverse.
        
        An inverse that was already changed or removed independently is
        simply not matched.
        """
        with self.db.transaction() as conn:
            old = self._get(conn, relationship_id)
            if old is None:
                raise NotFoundError("Relationship not found")
            
            conn.execute("DELETE FROM relationships WHERE id = ?", (relationship_id,))
            
            inverse_type_id = self.types.inverse_of(conn, old.relationship_type_id)
            self._remove_inverse(conn, old, inverse_type_id)
        return old
    
    # =========================================================================
    # INVERSE MAINTENANCE
    # =========================================================================
    
    def _ensure_inverse(
        self,
        conn: sqlite3.Connection,
        relationship: Relationship,
        inverse_type_id: Optional[str]
    ) -> None:
        """Insert the inverse row unless it is absent by rule or already stored."""
        if not inverse_type_id:
            logger.debug(f"No inverse type defined for relationship_type_id: "
                         f"{relationship.relationship_type_id}")
            return
        
        if is_self_loop(relationship, inverse_type_id):
            logger.debug(f"Relationship type {relationship.relationship_type_id} is its own "
                         f"inverse and members are the same, skipping inverse creation")
            return
        
        subject, type_id, obj = mirror(relationship, inverse_type_id)
        if self._exists(conn, subject, type_id, obj):
            logger.debug(f"Inverse relationship already exists for {subject} as {type_id} "
                         f"of {obj}. Skipping.")
            return
        
        self._insert(conn, new_id(), subject, type_id, obj)
        logger.info(f"Created inverse relationship: {subject} is {type_id} of {obj}")
    
    def _remove_inverse(
        self,
        conn: sqlite3.Connection,
        relationship: Relationship,
        inverse_type_id: Optional[str]
    ) -> None:
        """Delete rows matching the inverse of a relationship's stored values."""
        if not inverse_type_id:
            return
        
        # the mirror of a self loop is the primary row itself
        if is_self_loop(relationship, inverse_type_id):
            logger.debug(f"Relationship type {relationship.relationship_type_id} is its own "
                         f"inverse and members are the same, skipping inverse deletion")
            return
        
        subject, type_id, obj = mirror(relationship, inverse_type_id)
        cursor = conn.execute("""
            DELETE FROM relationships
            WHERE member_id_1 = ? AND relationship_type_id = ? AND member_id_2 = ?
        """, (subject, type_id, obj))
        if cursor.rowcount:
            logger.info(f"Deleted inverse relationship for: {subject} is {type_id} of {obj}")
    
    # =========================================================================
    # ROW HELPERS
    # =========================================================================
    
    @staticmethod
    def _insert(
        conn: sqlite3.Connection,
        relationship_id: str,
        member_id_1: str,
        relationship_type_id: str,
        member_id_2: str
    ) -> None:
        conn.execute("""
            INSERT INTO relationships (id, member_id_1, relationship_type_id, member_id_2)
            VALUES (?, ?, ?, ?)
        """, (relationship_id, member_id_1, relationship_type_id, member_id_2))
    
    def _exists(self, conn: sqlite3.Connection, member_id_1: str, relationship_type_id: str,
                member_id_2: str) -> bool:
        return self._find(conn, member_id_1, relationship_type_id, member_id_2) is not None
    
    def _find(self, conn: sqlite3.Connection, member_id_1: str, relationship_type_id: str,
              member_id_2: str) -> Optional[Relationship]:
        """First row with exactly these members and type."""
        row = conn.execute("""
            SELECT id, member_id_1, relationship_type_id, member_id_2 FROM relationships
            WHERE member_id_1 = ? AND relationship_type_id = ? AND member_id_2 = ?
        """, (member_id_1, relationship_type_id, member_id_2)).fetchone()
        return self._row_to_relationship(row) if row else None
    
    def _get(self, conn: sqlite3.Connection, relationship_id: str) -> Optional[Relationship]:
        row = conn.execute(
            "SELECT id, member_id_1, relationship_type_id, member_id_2 FROM relationships WHERE id = ?",
            (relationship_id,)
        ).fetchone()
        return self._row_to_relationship(row) if row else None
    
    @staticmethod
    def _row_to_relationship(row) -> Relationship:
        return Relationship(
            id=row["id"],
            member_id_1=row["member_id_1"],
            relationship_type_id=row["relationship_type_id"],
            member_id_2=row["member_id_2"],
        )
    
    # =========================================================================
    # READS
    # =========================================================================
    
    def get_all(self) -> List[RelationshipDetail]:
        """Get all relationships with member and type names."""
        with self.db.acquire() as conn:
            rows = conn.execute(f"{DETAIL_QUERY} {DETAIL_ORDER}").fetchall()
        return [self._row_to_detail(row) for row in rows]
    
    def get_for_member(self, member_id: str) -> List[RelationshipDetail]:
        """Get relationships where the member appears on either side."""
        with self.db.acquire() as conn:
            rows = conn.execute(
                f"{DETAIL_QUERY} WHERE r.member_id_1 = ? OR r.member_id_2 = ? {DETAIL_ORDER}",
                (member_id, member_id)
            ).fetchall()
        return [self._row_to_detail(row) for row in rows]
    
    def count(self) -> int:
        return self.db.count_rows("relationships")
    
    @staticmethod
    def _row_to_detail(row) -> RelationshipDetail:
        return RelationshipDetail(**{key: row[key] for key in row.keys()})
