from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import BadRequestError, ConflictError, NotFoundError
from storyforge.models.character import Character, Relationship
from storyforge.models.story_object import StoryObject
from storyforge.schemas.character import (
    AddRelationshipInput,
    PossessionInput,
    RemoveRelationshipInput,
    UpdateRelationshipInput,
)
from storyforge.services.access import check_access
from storyforge.services.base import ScopedService
from storyforge.services.patching import apply_patch
from storyforge.storage.doc_store import now_iso


class CharacterService(ScopedService[Character]):
    model = Character
    label = "Character"
    list_sort = [("name", 1), ("created_at", 1)]

    def delete(self, ctx: RequestContext, project_id: str, entity_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "write")
        self.load(project_id, entity_id)
        with self.store.transaction():
            others = self.store.find(
                self.collection, {"project_id": project_id, "relationships.character_id": entity_id}
            )
            for doc in others:
                kept = [r for r in doc.get("relationships", []) if r.get("character_id") != entity_id]
                self.store.update_fields(self.collection, doc["id"], {"relationships": kept, "updated_at": now_iso()})
            self.store.delete_one(self.collection, {"id": entity_id})
        return {"success": True, "id": entity_id}

    def get_relationships(self, ctx: RequestContext, project_id: str, character_id: str) -> list[Relationship]:
        return self.get_by_id(ctx, project_id, character_id).relationships

    def add_relationship(self, ctx: RequestContext, inp: AddRelationshipInput) -> Character:
        check_access(self.store, ctx, inp.project_id, "write")
        character = self.load(inp.project_id, inp.character_id)
        target_id = inp.relationship.character_id
        if target_id == character.id:
            raise BadRequestError("A character cannot have a relationship with itself")
        try:
            self.load(inp.project_id, target_id)
        except NotFoundError:
            raise NotFoundError("Related character not found") from None
        if character.relationship(target_id) is not None:
            raise ConflictError("Relationship with this character already exists")
        character.relationships.append(Relationship(**inp.relationship.model_dump()))
        return self.persist(character, ["relationships"])

    def update_relationship(self, ctx: RequestContext, inp: UpdateRelationshipInput) -> Character:
        check_access(self.store, ctx, inp.project_id, "write")
        character = self.load(inp.project_id, inp.character_id)
        existing = character.relationship(inp.target_id)
        if existing is None:
            raise NotFoundError("Relationship not found")
        updated = apply_patch(existing, inp.data)
        character.relationships = [updated if r.character_id == inp.target_id else r for r in character.relationships]
        return self.persist(character, ["relationships"])

    def remove_relationship(self, ctx: RequestContext, inp: RemoveRelationshipInput) -> Character:
        check_access(self.store, ctx, inp.project_id, "write")
        character = self.load(inp.project_id, inp.character_id)
        if character.relationship(inp.target_id) is None:
            raise NotFoundError("Relationship not found")
        character.relationships = [r for r in character.relationships if r.character_id != inp.target_id]
        return self.persist(character, ["relationships"])

    def add_possession(self, ctx: RequestContext, inp: PossessionInput) -> Character:
        check_access(self.store, ctx, inp.project_id, "write")
        character = self.load(inp.project_id, inp.character_id)
        obj = self.store.get(StoryObject.COLLECTION, inp.object_id)
        if obj is None or obj.get("project_id") != inp.project_id:
            raise NotFoundError("Object not found")
        if inp.object_id in character.possessions:
            return character
        character.possessions.append(inp.object_id)
        return self.persist(character, ["possessions"])

    def remove_possession(self, ctx: RequestContext, inp: PossessionInput) -> Character:
        check_access(self.store, ctx, inp.project_id, "write")
        character = self.load(inp.project_id, inp.character_id)
        if inp.object_id not in character.possessions:
            raise NotFoundError("Possession not found")
        character.possessions = [p for p in character.possessions if p != inp.object_id]
        return self.persist(character, ["possessions"])
