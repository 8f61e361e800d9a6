"""
Database handle for the family tree store.

This is a DATA LAYER component:
- Opens and releases SQLite connections (foreign keys enforced)
- Wraps multi-step writes in a single transaction
- Creates the schema

Every store receives a Database instance explicitly; there is no
module-level connection or pool.

Tables:
- members: people in the tree
- relationship_types: named relations with optional self-referencing inverse
- relationships: directional member-to-member edges
"""

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from familytree.config import DatabaseSettings
from familytree.store.errors import StoreFailureError


logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate a fresh row identifier."""
    return str(uuid.uuid4())


class Database:
    """Connection source and transaction boundary for all stores."""
    
    def __init__(self, config: Optional[DatabaseSettings] = None):
        self.config = config or DatabaseSettings()
        self.config.ensure_dirs()
        self.active_connections = 0
        self._count_lock = threading.Lock()
    
    @property
    def path(self) -> str:
        return self.config.path
    
    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                self.config.path,
                timeout=self.config.timeout,
                isolation_level=None,  # explicit BEGIN/COMMIT below
            )
        except sqlite3.Error as e:
            raise StoreFailureError(f"Could not open database: {e}") from e
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn
    
    @contextmanager
    def acquire(self) -> Iterator[sqlite3.Connection]:
        """Check out a connection; it is closed exactly once on exit."""
        conn = self._connect()
        with self._count_lock:
            self.active_connections += 1
        try:
            yield conn
        except sqlite3.IntegrityError:
            # classified by the calling store
            raise
        except sqlite3.Error as e:
            raise StoreFailureError(f"Database error: {e}") from e
        finally:
            conn.close()
            with self._count_lock:
                self.active_connections -= 1
    
    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed statements atomically.
        
        Takes the write lock up front, so concurrent writers queue for up
        to the configured timeout instead of deadlocking on lock upgrade.
        Commits on normal exit. Any exception rolls back every statement
        issued inside the block and is re-raised unchanged.
        """
        with self.acquire() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException as e:
                logger.warning(f"Rolling back transaction after {type(e).__name__}")
                try:
                    conn.execute("ROLLBACK")
                except sqlite3.Error as rollback_error:
                    # sqlite may already have rolled back, keep the original error
                    logger.error(f"Rollback failed: {rollback_error}")
                raise
            else:
                conn.execute("COMMIT")
    
    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.acquire() as conn:
                return conn.execute("SELECT 1").fetchone()[0] == 1
        except (sqlite3.Error, StoreFailureError) as e:
            logger.error(f"Database connection error: {e}")
            return False
    
    def init_schema(self):
        """Create tables and indexes if they do not exist."""
        with self.acquire() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS members (
                    id TEXT PRIMARY KEY,
                    first_name TEXT NOT NULL,
                    middle_name TEXT,
                    last_name TEXT NOT NULL,
                    date_of_birth TEXT,
                    date_of_death TEXT,
                    is_alive INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            
            conn.execute("""
                CREATE TABLE IF NOT EXISTS relationship_types (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    inverse_type_id TEXT,
                    
                    FOREIGN KEY (inverse_type_id) REFERENCES relationship_types(id)
                )
            """)
            
            # No ON DELETE CASCADE: deleting a referenced member or type must fail
            conn.execute("""
                CREATE TABLE IF NOT EXISTS relationships (
                    id TEXT PRIMARY KEY,
                    member_id_1 TEXT NOT NULL,
                    relationship_type_id TEXT NOT NULL,
                    member_id_2 TEXT NOT NULL,
                    
                    FOREIGN KEY (member_id_1) REFERENCES members(id),
                    FOREIGN KEY (relationship_type_id) REFERENCES relationship_types(id),
                    FOREIGN KEY (member_id_2) REFERENCES members(id)
                )
            """)
            
            conn.execute("CREATE INDEX IF NOT EXISTS idx_member_name ON members(first_name, last_name)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_type_inverse ON relationship_types(inverse_type_id)")
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_relationship_triple "
                "ON relationships(member_id_1, relationship_type_id, member_id_2)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_relationship_member2 ON relationships(member_id_2)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_relationship_type ON relationships(relationship_type_id)")
    
    def count_rows(self, table: str) -> int:
        """Row count for one of the known tables."""
        if table not in ("members", "relationship_types", "relationships"):
            raise ValueError(f"Unknown table: {table}")
        with self.acquire() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
