from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from storyforge.storage.doc_store import new_id, now_iso


class Record(BaseModel):
    """A stored document. The same model is the response shape, minus ``PRIVATE`` fields."""

    COLLECTION: ClassVar[str] = ""
    PRIVATE: ClassVar[frozenset[str]] = frozenset()

    model_config = ConfigDict(extra="ignore", validate_assignment=False)

    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    def to_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def public(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude=set(self.PRIVATE))

    @classmethod
    def from_doc(cls, doc: dict[str, Any]):
        return cls.model_validate(doc)


class Sub(BaseModel):
    model_config = ConfigDict(extra="ignore")
