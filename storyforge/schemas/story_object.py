from __future__ import annotations

from pydantic import Field

from storyforge.models.story_object import ObjectProperties, ObjectType
from storyforge.schemas.common import Input, ObjectId, Patch


class ObjectFields(Input):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    type: ObjectType
    significance: str = ""
    properties: ObjectProperties = Field(default_factory=ObjectProperties)
    history: str = ""
    location: ObjectId | None = None
    owner: ObjectId | None = None
    image_url: str | None = None
    notes: str | None = None


class ObjectCreate(ObjectFields):
    project_id: str


class ObjectPatch(Patch):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    type: ObjectType | None = None
    significance: str | None = None
    properties: ObjectProperties | None = None
    history: str | None = None
    location: ObjectId | None = None
    owner: ObjectId | None = None
    image_url: str | None = None
    notes: str | None = None


class ObjectUpdateInput(Input):
    project_id: str
    id: str
    data: ObjectPatch
