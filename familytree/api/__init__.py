"""HTTP API package."""
from familytree.api.main import create_app

__all__ = ["create_app"]
