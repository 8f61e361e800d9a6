"""FastAPI backend for the family tree store."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from familytree.api.errors import register_error_handlers
from familytree.config import Settings
from familytree.models import (
    MemberPayload,
    RelationshipPayload,
    RelationshipTypeCreate,
    RelationshipTypeUpdate,
)
from familytree.store.errors import ValidationError
from familytree.store.family_tree import FamilyTree


logger = logging.getLogger(__name__)

SELF_RELATIONSHIP_MESSAGE = "A member cannot be related to themselves"


def get_tree(request: Request) -> FamilyTree:
    """Dependency: the FamilyTree attached to the running app."""
    return request.app.state.tree


def create_app(tree: Optional[FamilyTree] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API.
    
    Args:
        tree: Store to serve; built from settings when omitted
        settings: Application settings; defaults to environment/.env
    """
    settings = settings or Settings()
    
    app = FastAPI(title="Family Tree API")
    app.state.tree = tree or FamilyTree(settings.database)
    logger.info(f"Serving family tree database at {app.state.tree.db.path}")
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    
    # ─────────────────────────────────────────
    # Health
    # ─────────────────────────────────────────
    
    @app.get("/test-db", response_class=PlainTextResponse)
    def test_db(tree: FamilyTree = Depends(get_tree)):
        if tree.ping():
            return "Database connected successfully!"
        return PlainTextResponse("Database connection failed", status_code=500)
    
    # ─────────────────────────────────────────
    # Members
    # ─────────────────────────────────────────
    
    @app.get("/api/members")
    def get_members(tree: FamilyTree = Depends(get_tree)):
        return [m.to_dict() for m in tree.get_all_members()]
    
    @app.get("/api/members/{member_id}")
    def get_member(member_id: str, tree: FamilyTree = Depends(get_tree)):
        return tree.get_member(member_id).to_dict()
    
    @app.post("/api/members", status_code=status.HTTP_201_CREATED)
    def add_member(payload: MemberPayload, tree: FamilyTree = Depends(get_tree)):
        return tree.add_member(payload).to_dict()
    
    @app.put("/api/members/{member_id}")
    def update_member(member_id: str, payload: MemberPayload, tree: FamilyTree = Depends(get_tree)):
        return tree.update_member(member_id, payload).to_dict()
    
    @app.delete("/api/members/{member_id}")
    def delete_member(member_id: str, tree: FamilyTree = Depends(get_tree)):
        member = tree.delete_member(member_id)
        return {"message": "Member deleted successfully", "member": member.to_dict()}
    
    # ─────────────────────────────────────────
    # Relationship types
    # ─────────────────────────────────────────
    
    @app.get("/api/relationship_types")
    def get_relationship_types(tree: FamilyTree = Depends(get_tree)):
        return [t.to_dict() for t in tree.get_all_relationship_types()]
    
    @app.get("/api/relationship_types/{type_id}")
    def get_relationship_type(type_id: str, tree: FamilyTree = Depends(get_tree)):
        return tree.get_relationship_type(type_id).to_dict()
    
    @app.post("/api/relationship_types", status_code=status.HTTP_201_CREATED)
    def add_relationship_type(payload: RelationshipTypeCreate, tree: FamilyTree = Depends(get_tree)):
        rel_type = tree.add_relationship_type(
            payload.name,
            inverse_type_id=payload.inverse_type_id,
            self_inverse=payload.self_inverse,
        )
        return rel_type.to_dict()
    
    @app.put("/api/relationship_types/{type_id}")
    def update_relationship_type(type_id: str, payload: RelationshipTypeUpdate,
                                 tree: FamilyTree = Depends(get_tree)):
        # explicit null clears the inverse, an omitted field keeps it
        clear_inverse = "inverse_type_id" in payload.model_fields_set and payload.inverse_type_id is None
        rel_type = tree.update_relationship_type(
            type_id,
            name=payload.name,
            inverse_type_id=payload.inverse_type_id,
            self_inverse=payload.self_inverse,
            clear_inverse=clear_inverse,
        )
        return rel_type.to_dict()
    
    @app.delete("/api/relationship_types/{type_id}")
    def delete_relationship_type(type_id: str, tree: FamilyTree = Depends(get_tree)):
        rel_type = tree.delete_relationship_type(type_id)
        return {"message": "Relationship type deleted successfully", "relationship_type": rel_type.to_dict()}
    
    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────
    
    @app.get("/api/relationships")
    def get_relationships(tree: FamilyTree = Depends(get_tree)):
        return [r.to_dict() for r in tree.get_all_relationships()]
    
    @app.get("/api/relationships/{member_id}")
    def get_member_relationships(member_id: str, tree: FamilyTree = Depends(get_tree)):
        return [r.to_dict() for r in tree.get_member_relationships(member_id)]
    
    @app.post("/api/relationships", status_code=status.HTTP_201_CREATED)
    def add_relationship(payload: RelationshipPayload, tree: FamilyTree = Depends(get_tree)):
        if payload.is_self_reference:
            raise ValidationError(SELF_RELATIONSHIP_MESSAGE)
        relationship = tree.add_relationship(
            payload.member_id_1, payload.relationship_type_id, payload.member_id_2
        )
        return {"message": "Relationship(s) added successfully!", "relationship": relationship.to_dict()}
    
    @app.put("/api/relationships/{relationship_id}")
    def update_relationship(relationship_id: str, payload: RelationshipPayload,
                            tree: FamilyTree = Depends(get_tree)):
        if payload.is_self_reference:
            raise ValidationError(SELF_RELATIONSHIP_MESSAGE)
        relationship = tree.update_relationship(
            relationship_id, payload.member_id_1, payload.relationship_type_id, payload.member_id_2
        )
        return relationship.to_dict()
    
    @app.delete("/api/relationships/{relationship_id}")
    def delete_relationship(relationship_id: str, tree: FamilyTree = Depends(get_tree)):
        relationship = tree.delete_relationship(relationship_id)
        return {"message": "Relationship(s) deleted successfully!", "relationship": relationship.to_dict()}
    
    return app
