from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub
from storyforge.storage.doc_store import now_iso

Genre = Literal[
    "fantasy",
    "science fiction",
    "mystery",
    "adventure",
    "historical fiction",
    "realistic fiction",
    "horror",
    "comedy",
    "drama",
    "fairy tale",
    "fable",
    "superhero",
]
Audience = Literal["children", "middle grade", "young adult", "adult"]
NarrativeType = Literal["Short Story", "Novel", "Screenplay", "Comic", "Poem"]
ProjectStatus = Literal["Draft", "In Progress", "Completed", "Archived"]
Tone = Literal["Serious", "Humorous", "Educational", "Dramatic", "Neutral", "Uplifting"]
Style = Literal["Descriptive", "Dialogue-heavy", "Action-oriented", "Poetic", "Neutral"]
LengthUnit = Literal["Words", "Pages", "Chapters"]
CollaboratorRole = Literal["Editor", "Viewer", "Contributor"]


class TargetLength(Sub):
    type: LengthUnit = "Words"
    value: int = Field(default=0, ge=0)


class ProjectMetadata(Sub):
    created_with_template: bool = False
    template_id: str | None = None
    tags: list[str] = Field(default_factory=list)


class Collaborator(Sub):
    user_id: str
    role: CollaboratorRole = "Viewer"
    added_at: str = Field(default_factory=now_iso)


class Project(Record):
    COLLECTION: ClassVar[str] = "projects"

    owner_id: str
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=2000)
    genre: Genre
    target_audience: Audience
    narrative_type: NarrativeType
    tone: Tone = "Neutral"
    style: Style = "Neutral"
    target_length: TargetLength = Field(default_factory=TargetLength)
    status: ProjectStatus = "Draft"
    collaborators: list[Collaborator] = Field(default_factory=list)
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    completion_date: str | None = None
    is_public: bool = False

    def collaborator(self, user_id: str) -> Collaborator | None:
        return next((c for c in self.collaborators if c.user_id == user_id), None)
