from __future__ import annotations

from pydantic import Field

from storyforge.models.character import (
    CharacterAttributes,
    CharacterRole,
    RelationshipFamily,
    RelationshipStatus,
    RelationshipType,
)
from storyforge.schemas.common import Input, ObjectId, Patch


class RelationshipInput(Input):
    character_id: ObjectId
    relationship_type: RelationshipType
    relationship_family: RelationshipFamily = "Other"
    relationship_status: RelationshipStatus = "Neutral"
    notes: str = ""


class RelationshipPatch(Patch):
    relationship_type: RelationshipType | None = None
    relationship_family: RelationshipFamily | None = None
    relationship_status: RelationshipStatus | None = None
    notes: str | None = None


class CharacterFields(Input):
    name: str = Field(min_length=1, max_length=100)
    role: CharacterRole | None = None
    short_description: str = ""
    detailed_background: str = ""
    attributes: CharacterAttributes = Field(default_factory=CharacterAttributes)
    plot_involvement: list[ObjectId] = Field(default_factory=list)
    image_url: str | None = None
    notes: str | None = None


class CharacterCreate(CharacterFields):
    project_id: str


class CharacterPatch(Patch):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    role: CharacterRole | None = None
    short_description: str | None = None
    detailed_background: str | None = None
    attributes: CharacterAttributes | None = None
    plot_involvement: list[ObjectId] | None = None
    image_url: str | None = None
    notes: str | None = None


class CharacterUpdateInput(Input):
    project_id: str
    id: str
    data: CharacterPatch


class AddRelationshipInput(Input):
    project_id: str
    character_id: str
    relationship: RelationshipInput


class UpdateRelationshipInput(Input):
    project_id: str
    character_id: str
    target_id: str
    data: RelationshipPatch


class RemoveRelationshipInput(Input):
    project_id: str
    character_id: str
    target_id: str


class PossessionInput(Input):
    project_id: str
    character_id: str
    object_id: str
