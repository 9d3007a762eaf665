from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub

CharacterRole = Literal["Protagonist", "Antagonist", "Supporting", "Minor"]
RelationshipType = Literal["Friend", "Enemy", "Family", "Romantic", "Mentor", "Colleague", "Other"]
RelationshipFamily = Literal["Parent", "Child", "Sibling", "Spouse", "Other"]
RelationshipStatus = Literal["Strong", "Friendly", "Neutral", "Complex", "Hostile", "Unknown"]


class PhysicalAttributes(Sub):
    age: int | None = Field(default=None, ge=0)
    height: str = ""
    build: str = ""
    hair_color: str = ""
    eye_color: str = ""
    distinguishing_features: list[str] = Field(default_factory=list)


class PersonalityAttributes(Sub):
    traits: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    fears: list[str] = Field(default_factory=list)
    desires: list[str] = Field(default_factory=list)


class BackgroundAttributes(Sub):
    birthplace: str = ""
    family: str = ""
    education: str = ""
    occupation: str = ""
    significant_events: list[str] = Field(default_factory=list)


class CharacterAttributes(Sub):
    physical: PhysicalAttributes = Field(default_factory=PhysicalAttributes)
    personality: PersonalityAttributes = Field(default_factory=PersonalityAttributes)
    background: BackgroundAttributes = Field(default_factory=BackgroundAttributes)
    motivation: str = ""
    arc: str = ""


class Relationship(Sub):
    character_id: str
    relationship_type: RelationshipType
    relationship_family: RelationshipFamily = "Other"
    relationship_status: RelationshipStatus = "Neutral"
    notes: str = ""


class Character(Record):
    COLLECTION: ClassVar[str] = "characters"

    project_id: str
    name: str = Field(min_length=1, max_length=100)
    role: CharacterRole | None = None
    short_description: str = ""
    detailed_background: str = ""
    attributes: CharacterAttributes = Field(default_factory=CharacterAttributes)
    relationships: list[Relationship] = Field(default_factory=list)
    plot_involvement: list[str] = Field(default_factory=list)
    possessions: list[str] = Field(default_factory=list)
    image_url: str | None = None
    notes: str | None = None

    def relationship(self, target_id: str) -> Relationship | None:
        return next((r for r in self.relationships if r.character_id == target_id), None)
