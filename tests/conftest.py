"""Pytest fixtures shared by store and API tests."""

import pytest
from fastapi.testclient import TestClient

from familytree.api.main import create_app
from familytree.config import DatabaseSettings, Settings
from familytree.models import MemberPayload
from familytree.store.family_tree import FamilyTree


@pytest.fixture
def db_config(tmp_path):
    """Database settings pointing at a throwaway file."""
    return DatabaseSettings(path=str(tmp_path / "family_tree.db"))


@pytest.fixture
def tree(db_config):
    """Empty FamilyTree."""
    return FamilyTree(db_config)


@pytest.fixture
def types(tree):
    """Parent/Child pair, self-inverse Spouse, and Friend with no inverse."""
    parent = tree.add_relationship_type("Parent")
    child = tree.add_relationship_type("Child")
    tree.relationship_types.link_inverses(parent.id, child.id)
    spouse = tree.add_relationship_type("Spouse", self_inverse=True)
    friend = tree.add_relationship_type("Friend")
    grandparent = tree.add_relationship_type("Grandparent")
    grandchild = tree.add_relationship_type("Grandchild", inverse_type_id=grandparent.id)
    tree.update_relationship_type(grandparent.id, inverse_type_id=grandchild.id)
    return {
        "parent": parent.id,
        "child": child.id,
        "spouse": spouse.id,
        "friend": friend.id,
        "grandparent": grandparent.id,
        "grandchild": grandchild.id,
    }


@pytest.fixture
def members(tree):
    """Members A, B and C."""
    return {
        key: tree.add_member(MemberPayload(first_name=first, last_name="Kumar")).id
        for key, first in (("a", "Anil"), ("b", "Bina"), ("c", "Chetan"))
    }


@pytest.fixture
def client(tree):
    """HTTP client over an app serving the test tree."""
    app = create_app(tree=tree, settings=Settings())
    return TestClient(app)
