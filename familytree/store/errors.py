"""
Error taxonomy for store operations.

The API layer maps each class to an HTTP status; store code only raises.
"""

import sqlite3


class FamilyTreeError(Exception):
    """Base class for all store errors."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FamilyTreeError):
    """Input rejected before any write."""


class InvalidReferenceError(ValidationError):
    """Write names a member or relationship type that does not exist."""


class NotFoundError(FamilyTreeError):
    """Unknown identifier on get/update/delete."""


class ReferentialConflictError(FamilyTreeError):
    """Delete blocked because other rows still reference the target."""


class DuplicateError(FamilyTreeError):
    """Unique value already taken."""


class StoreFailureError(FamilyTreeError):
    """Connection or query failure not otherwise classified."""


def classify_integrity_error(
    exc: sqlite3.IntegrityError,
    action: str,
    entity: str,
) -> FamilyTreeError:
    """
    Translate a sqlite integrity violation into a store error.
    
    Args:
        exc: The raised IntegrityError
        action: "delete" for removals, anything else for inserts/updates
        entity: Human-readable name of the target ("member", "relationship type")
        
    Returns: The store error to raise in its place
    """
    text = str(exc)
    
    if "FOREIGN KEY" in text:
        if action == "delete":
            return ReferentialConflictError(
                f"Cannot delete {entity}: it is still referenced by one or more "
                f"relationships. Please delete those first."
            )
        return InvalidReferenceError(
            f"Cannot {action} {entity}: it references a member or relationship "
            f"type that does not exist."
        )
    
    if "UNIQUE" in text:
        return DuplicateError(f"Cannot {action} {entity}: {text}")
    
    return ValidationError(f"Cannot {action} {entity}: {text}")
