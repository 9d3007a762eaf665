from __future__ import annotations

from pydantic import Field

from storyforge.models.project import (
    Audience,
    CollaboratorRole,
    Genre,
    NarrativeType,
    ProjectMetadata,
    ProjectStatus,
    Style,
    TargetLength,
    Tone,
)
from storyforge.schemas.common import Input, ObjectId, Patch


class ProjectCreate(Input):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=2000)
    genre: Genre
    target_audience: Audience
    narrative_type: NarrativeType
    tone: Tone = "Neutral"
    style: Style = "Neutral"
    target_length: TargetLength = Field(default_factory=TargetLength)
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    is_public: bool = False


class ProjectPatch(Patch):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    genre: Genre | None = None
    target_audience: Audience | None = None
    narrative_type: NarrativeType | None = None
    tone: Tone | None = None
    style: Style | None = None
    target_length: TargetLength | None = None
    status: ProjectStatus | None = None
    metadata: ProjectMetadata | None = None
    completion_date: str | None = None
    is_public: bool | None = None


class ProjectUpdateInput(Input):
    id: str
    data: ProjectPatch


class CollaboratorInput(Input):
    user_id: ObjectId
    role: CollaboratorRole = "Viewer"


class AddCollaboratorInput(Input):
    project_id: str
    collaborator: CollaboratorInput


class RemoveCollaboratorInput(Input):
    project_id: str
    collaborator_id: str


class RoleBody(Input):
    role: CollaboratorRole


class UpdateCollaboratorRoleInput(RoleBody):
    project_id: str
    collaborator_id: str
