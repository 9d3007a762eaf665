from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub
from storyforge.storage.doc_store import now_iso

AITask = Literal["character", "plot", "setting", "chapter", "editorial", "image"]


class TokenUsage(Sub):
    prompt: int = 0
    completion: int = 0
    total: int = 0


class GenerationMetadata(Sub):
    model: str = ""
    timestamp: str = Field(default_factory=now_iso)
    token_usage: TokenUsage = Field(default_factory=TokenUsage)


class AIGeneration(Record):
    COLLECTION: ClassVar[str] = "ai_generations"

    project_id: str
    user_id: str
    task: AITask
    prompt: str = ""
    request_params: dict[str, Any] = Field(default_factory=dict)
    response_content: str = ""
    metadata: GenerationMetadata = Field(default_factory=GenerationMetadata)
    is_saved: bool = False
    parent_id: str | None = None
