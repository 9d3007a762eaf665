from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub

ObjectType = Literal["Item", "Artifact", "Vehicle", "Weapon", "Tool", "Clothing", "Other"]


class PhysicalProperties(Sub):
    size: str = ""
    material: str = ""
    appearance: str = ""


class MagicalProperties(Sub):
    powers: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    origin: str = ""


class ObjectProperties(Sub):
    physical: PhysicalProperties = Field(default_factory=PhysicalProperties)
    magical: MagicalProperties = Field(default_factory=MagicalProperties)


class StoryObject(Record):
    COLLECTION: ClassVar[str] = "objects"

    project_id: str
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    type: ObjectType
    significance: str = ""
    properties: ObjectProperties = Field(default_factory=ObjectProperties)
    history: str = ""
    location: str | None = None
    owner: str | None = None
    image_url: str | None = None
    notes: str | None = None
