"""
Member Store - CRUD for the members table.

Single-statement operations; no derived writes, so no explicit transaction.
"""

import sqlite3
from typing import List

from familytree.models import MemberPayload
from familytree.store.database import Database, new_id
from familytree.store.errors import NotFoundError, classify_integrity_error
from familytree.store.models import Member


class MemberStore:
    """Storage for family members."""
    
    def __init__(self, db: Database):
        self.db = db
    
    def add(self, payload: MemberPayload) -> Member:
        """
        Add a new member with a freshly generated id.
        
        Returns: The stored member
        """
        member_id = new_id()
        try:
            with self.db.acquire() as conn:
                conn.execute("""
                    INSERT INTO members (
                        id, first_name, middle_name, last_name,
                        date_of_birth, date_of_death, is_alive
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (member_id, *self._values(payload)))
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "add", "member") from e
        return self.get(member_id)
    
    def get(self, member_id: str) -> Member:
        """Get member by ID."""
        with self.db.acquire() as conn:
            row = conn.execute(
                "SELECT * FROM members WHERE id = ?",
                (member_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("Member not found")
        return self._row_to_member(row)
    
    def get_all(self) -> List[Member]:
        """Get all members ordered by name."""
        with self.db.acquire() as conn:
            rows = conn.execute(
                "SELECT * FROM members ORDER BY first_name, last_name"
            ).fetchall()
        return [self._row_to_member(row) for row in rows]
    
    def update(self, member_id: str, payload: MemberPayload) -> Member:
        """Replace all attributes of a member."""
        try:
            with self.db.acquire() as conn:
                cursor = conn.execute("""
                    UPDATE members SET
                        first_name = ?, middle_name = ?, last_name = ?,
                        date_of_birth = ?, date_of_death = ?, is_alive = ?
                    WHERE id = ?
                """, (*self._values(payload), member_id))
                updated = cursor.rowcount
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "update", "member") from e
        if updated == 0:
            raise NotFoundError("Member not found")
        return self.get(member_id)
    
    def delete(self, member_id: str) -> Member:
        """
        Delete a member.
        
        Raises ReferentialConflictError while any relationship references
        the member; nothing is removed in that case.
        """
        member = self.get(member_id)
        try:
            with self.db.acquire() as conn:
                cursor = conn.execute("DELETE FROM members WHERE id = ?", (member_id,))
                deleted = cursor.rowcount
        except sqlite3.IntegrityError as e:
            raise classify_integrity_error(e, "delete", "member") from e
        if deleted == 0:
            raise NotFoundError("Member not found")
        return member
    
    # =========================================================================
    # HELPERS
    # =========================================================================
    
    @staticmethod
    def _values(payload: MemberPayload) -> tuple:
        return (
            payload.first_name,
            payload.middle_name,
            payload.last_name,
            payload.date_of_birth.isoformat() if payload.date_of_birth else None,
            payload.date_of_death.isoformat() if payload.date_of_death else None,
            int(payload.is_alive),
        )
    
    @staticmethod
    def _row_to_member(row) -> Member:
        """Convert database row to Member."""
        return Member(
            id=row["id"],
            first_name=row["first_name"],
            middle_name=row["middle_name"],
            last_name=row["last_name"],
            date_of_birth=row["date_of_birth"],
            date_of_death=row["date_of_death"],
            is_alive=bool(row["is_alive"]),
        )
