from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub
from storyforge.storage.doc_store import now_iso

ChapterStatus = Literal["Draft", "Revised", "Final", "Needs Review"]


def word_count(content: str) -> int:
    """Number of non-empty whitespace-delimited tokens."""
    return len(content.split()) if content else 0


class ChapterEdit(Sub):
    timestamp: str = Field(default_factory=now_iso)
    user_id: str
    changes: str


class AIGenerated(Sub):
    is_generated: bool = False
    generated_timestamp: str | None = None
    prompt: str | None = None
    model: str | None = None


class Chapter(Record):
    COLLECTION: ClassVar[str] = "chapters"

    project_id: str
    title: str = Field(min_length=1, max_length=100)
    position: int = Field(ge=0)
    synopsis: str = Field(default="", max_length=1000)
    content: str = ""
    status: ChapterStatus = "Draft"
    word_count: int = 0
    characters: list[str] = Field(default_factory=list)
    settings: list[str] = Field(default_factory=list)
    plotlines: list[str] = Field(default_factory=list)
    objects: list[str] = Field(default_factory=list)
    notes: str | None = None
    ai_generated: AIGenerated = Field(default_factory=AIGenerated)
    edits: list[ChapterEdit] = Field(default_factory=list)

    def recount(self) -> None:
        self.word_count = word_count(self.content)
