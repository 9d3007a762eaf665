from __future__ import annotations

from pydantic import Field

from storyforge.models.chapter import AIGenerated, ChapterStatus
from storyforge.schemas.common import Input, ObjectId, Patch


class ChapterFields(Input):
    title: str = Field(min_length=1, max_length=100)
    position: int | None = Field(default=None, ge=0)
    synopsis: str = Field(default="", max_length=1000)
    content: str = ""
    status: ChapterStatus = "Draft"
    characters: list[ObjectId] = Field(default_factory=list)
    settings: list[ObjectId] = Field(default_factory=list)
    plotlines: list[ObjectId] = Field(default_factory=list)
    objects: list[ObjectId] = Field(default_factory=list)
    notes: str | None = None
    ai_generated: AIGenerated = Field(default_factory=AIGenerated)


class ChapterCreate(ChapterFields):
    project_id: str


class ChapterPatch(Patch):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    position: int | None = Field(default=None, ge=0)
    synopsis: str | None = Field(default=None, max_length=1000)
    content: str | None = None
    status: ChapterStatus | None = None
    characters: list[ObjectId] | None = None
    settings: list[ObjectId] | None = None
    plotlines: list[ObjectId] | None = None
    objects: list[ObjectId] | None = None
    notes: str | None = None
    ai_generated: AIGenerated | None = None


class ChapterUpdateInput(Input):
    project_id: str
    id: str
    data: ChapterPatch


class ContentBody(Input):
    content: str


class UpdateContentInput(ContentBody):
    project_id: str
    id: str


class EditBody(Input):
    changes: str = Field(min_length=1)


class AddEditInput(EditBody):
    project_id: str
    id: str


class ChapterPosition(Input):
    id: str
    position: int = Field(ge=0)


class ChapterOrder(Input):
    chapters: list[ChapterPosition] = Field(min_length=1)


class ReorderChaptersInput(ChapterOrder):
    project_id: str
