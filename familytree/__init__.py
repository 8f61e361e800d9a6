"""Family tree record-keeper: members, relationship types and relationships."""

__version__ = "0.1.0"
