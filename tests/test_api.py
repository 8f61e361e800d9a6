"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from familytree.api.main import create_app
from familytree.config import Settings
from familytree.store.errors import StoreFailureError


def create_member(client, first_name, last_name="Kumar"):
    response = client.post("/api/members", json={"first_name": first_name, "last_name": last_name})
    assert response.status_code == 201
    return response.json()["id"]


class TestHealth:
    
    def test_db_connected(self, client):
        response = client.get("/test-db")
        assert response.status_code == 200
        assert response.text == "Database connected successfully!"


class TestMembersApi:
    """Member endpoints."""
    
    def test_crud_flow(self, client):
        member_id = create_member(client, "Anil")
        
        assert client.get(f"/api/members/{member_id}").json()["first_name"] == "Anil"
        
        response = client.put(f"/api/members/{member_id}", json={
            "first_name": "Anil",
            "last_name": "Rao",
            "date_of_birth": "1970-02-01",
            "is_alive": True,
        })
        assert response.status_code == 200
        assert response.json()["last_name"] == "Rao"
        assert response.json()["date_of_birth"] == "1970-02-01"
        
        listed = client.get("/api/members").json()
        assert [m["id"] for m in listed] == [member_id]
        
        response = client.delete(f"/api/members/{member_id}")
        assert response.status_code == 200
        assert response.json()["message"] == "Member deleted successfully"
        assert client.get(f"/api/members/{member_id}").status_code == 404
    
    def test_unknown_member(self, client):
        assert client.get("/api/members/missing").status_code == 404
        assert client.delete("/api/members/missing").status_code == 404
        response = client.put("/api/members/missing", json={"first_name": "A", "last_name": "B"})
        assert response.status_code == 404
        assert response.json() == {"error": "Member not found"}
    
    def test_invalid_body(self, client):
        response = client.post("/api/members", json={"first_name": "Anil"})
        assert response.status_code == 400
        assert response.json()["details"][0]["field"].endswith("last_name")
    
    def test_delete_referenced_member(self, client, tree, types, members):
        """Deleting a member in a relationship is a conflict, nothing removed."""
        tree.add_relationship(members["a"], types["parent"], members["b"])
        
        response = client.delete(f"/api/members/{members['a']}")
        
        assert response.status_code == 409
        assert "relationships" in response.json()["error"]
        assert tree.relationships.count() == 2
        assert client.get(f"/api/members/{members['a']}").status_code == 200


class TestRelationshipTypesApi:
    """Relationship type endpoints."""
    
    def test_create_pair_and_self_inverse(self, client):
        parent = client.post("/api/relationship_types", json={"name": "Parent"}).json()
        child = client.post(
            "/api/relationship_types",
            json={"name": "Child", "inverse_type_id": parent["id"]},
        )
        assert child.status_code == 201
        assert child.json()["inverse_type_id"] == parent["id"]
        
        spouse = client.post("/api/relationship_types", json={"name": "Spouse", "self_inverse": True}).json()
        assert spouse["inverse_type_id"] == spouse["id"]
        
        names = [t["name"] for t in client.get("/api/relationship_types").json()]
        assert names == ["Child", "Parent", "Spouse"]
    
    def test_partial_update(self, client, types):
        response = client.put(f"/api/relationship_types/{types['parent']}", json={"name": "Mother/Father"})
        
        assert response.status_code == 200
        assert response.json() == {
            "id": types["parent"],
            "name": "Mother/Father",
            "inverse_type_id": types["child"],
        }
    
    def test_clear_inverse_unblocks_delete(self, client):
        """An explicit null inverse clears it; the freed type can then be deleted."""
        parent = client.post("/api/relationship_types", json={"name": "Parent"}).json()
        child = client.post(
            "/api/relationship_types",
            json={"name": "Child", "inverse_type_id": parent["id"]},
        ).json()
        
        response = client.delete(f"/api/relationship_types/{parent['id']}")
        assert response.status_code == 409
        assert "inverse of Child" in response.json()["error"]
        
        response = client.put(f"/api/relationship_types/{child['id']}", json={"inverse_type_id": None})
        assert response.status_code == 200
        assert response.json()["inverse_type_id"] is None
        
        assert client.delete(f"/api/relationship_types/{parent['id']}").status_code == 200
    
    def test_duplicate_name(self, client, types):
        response = client.post("/api/relationship_types", json={"name": "Spouse"})
        assert response.status_code == 409
    
    def test_unknown_inverse(self, client):
        response = client.post("/api/relationship_types", json={"name": "Child", "inverse_type_id": "missing"})
        assert response.status_code == 400
    
    def test_delete(self, client, types, members, tree):
        tree.add_relationship(members["a"], types["friend"], members["b"])
        
        assert client.delete(f"/api/relationship_types/{types['friend']}").status_code == 409
        
        response = client.post("/api/relationship_types", json={"name": "Cousin", "self_inverse": True})
        cousin_id = response.json()["id"]
        assert client.delete(f"/api/relationship_types/{cousin_id}").status_code == 200
        assert client.get(f"/api/relationship_types/{cousin_id}").status_code == 404


class TestRelationshipsApi:
    """Relationship endpoints and inverse maintenance over HTTP."""
    
    def test_parent_child_scenario(self, client, types, members):
        """POST {A, Parent, B} gives two rows; DELETE removes both."""
        a, b = members["a"], members["b"]
        response = client.post("/api/relationships", json={
            "member_id_1": a,
            "relationship_type_id": types["parent"],
            "member_id_2": b,
        })
        
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Relationship(s) added successfully!"
        
        rows = client.get("/api/relationships").json()
        pairs = {(r["member_id_1"], r["member_id_2"]): r["relationship_type_name"] for r in rows}
        assert pairs == {(a, b): "Parent", (b, a): "Child"}
        
        response = client.delete(f"/api/relationships/{body['relationship']['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Relationship(s) deleted successfully!"
        assert client.get("/api/relationships").json() == []
    
    def test_self_relationship_rejected(self, client, tree, types, members):
        response = client.post("/api/relationships", json={
            "member_id_1": members["a"],
            "relationship_type_id": types["spouse"],
            "member_id_2": members["a"],
        })
        
        assert response.status_code == 400
        assert tree.relationships.count() == 0
    
    def test_missing_field(self, client, types, members):
        response = client.post("/api/relationships", json={
            "member_id_1": members["a"],
            "relationship_type_id": types["spouse"],
        })
        assert response.status_code == 400
    
    def test_unknown_member(self, client, tree, types, members):
        response = client.post("/api/relationships", json={
            "member_id_1": members["a"],
            "relationship_type_id": types["parent"],
            "member_id_2": "missing",
        })
        assert response.status_code == 400
        assert tree.relationships.count() == 0
    
    def test_update(self, client, tree, types, members):
        a, b, c = members["a"], members["b"], members["c"]
        primary = tree.add_relationship(a, types["parent"], b)
        
        response = client.put(f"/api/relationships/{primary.id}", json={
            "member_id_1": a,
            "relationship_type_id": types["grandparent"],
            "member_id_2": c,
        })
        
        assert response.status_code == 200
        assert response.json() == {
            "id": primary.id,
            "member_id_1": a,
            "relationship_type_id": types["grandparent"],
            "member_id_2": c,
        }
        names = sorted(r["relationship_type_name"] for r in client.get("/api/relationships").json())
        assert names == ["Grandchild", "Grandparent"]
    
    def test_update_and_delete_unknown(self, client, types, members):
        body = {
            "member_id_1": members["a"],
            "relationship_type_id": types["parent"],
            "member_id_2": members["b"],
        }
        response = client.put("/api/relationships/missing", json=body)
        assert response.status_code == 404
        assert response.json() == {"error": "Relationship not found"}
        assert client.delete("/api/relationships/missing").status_code == 404
    
    def test_update_to_self_relationship_rejected(self, client, tree, types, members):
        primary = tree.add_relationship(members["a"], types["parent"], members["b"])
        
        response = client.put(f"/api/relationships/{primary.id}", json={
            "member_id_1": members["a"],
            "relationship_type_id": types["parent"],
            "member_id_2": members["a"],
        })
        
        assert response.status_code == 400
        stored = [(r.id, r.member_id_1, r.member_id_2) for r in tree.get_all_relationships()]
        assert (primary.id, members["a"], members["b"]) in stored
    
    def test_member_relationships(self, client, tree, types, members):
        a, b, c = members["a"], members["b"], members["c"]
        tree.add_relationship(a, types["spouse"], b)
        tree.add_relationship(b, types["friend"], c)
        
        rows = client.get(f"/api/relationships/{a}").json()
        
        assert len(rows) == 2
        assert {r["member1_first_name"] for r in rows} == {"Anil", "Bina"}


class TestServerErrors:
    """Unexpected failures become a generic 500."""
    
    def test_store_failure_hides_detail(self, tree, monkeypatch):
        def broken(*args, **kwargs):
            raise StoreFailureError("Database error: disk I/O error")
        
        monkeypatch.setattr(tree, "get_all_members", broken)
        client = TestClient(create_app(tree=tree, settings=Settings()))
        
        response = client.get("/api/members")
        
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
    
    def test_unhandled_exception(self, tree, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")
        
        monkeypatch.setattr(tree, "get_all_relationships", broken)
        client = TestClient(create_app(tree=tree, settings=Settings()), raise_server_exceptions=False)
        
        response = client.get("/api/relationships")
        
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
