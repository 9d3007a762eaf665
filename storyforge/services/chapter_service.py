from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import BadRequestError, ConflictError
from storyforge.models.chapter import Chapter, ChapterEdit
from storyforge.schemas.chapter import (
    AddEditInput,
    ChapterCreate,
    ChapterPatch,
    ReorderChaptersInput,
    UpdateContentInput,
)
from storyforge.services.access import check_access
from storyforge.services.base import ScopedService, build
from storyforge.services.patching import apply_patch, patch_changes
from storyforge.storage.doc_store import now_iso

METADATA_EDIT = "Updated chapter metadata"
CONTENT_EDIT = "Updated chapter content"


class ChapterService(ScopedService[Chapter]):
    model = Chapter
    label = "Chapter"
    list_sort = [("position", 1)]

    def _position_taken(self, project_id: str, position: int, exclude_id: str | None = None) -> bool:
        flt: dict[str, Any] = {"project_id": project_id, "position": position}
        if exclude_id:
            flt["id"] = {"$ne": exclude_id}
        return self.store.find_one(self.collection, flt) is not None

    def create(self, ctx: RequestContext, inp: ChapterCreate) -> Chapter:
        check_access(self.store, ctx, inp.project_id, "write")
        data = inp.model_dump(mode="json")
        with self.store.transaction():
            if data.get("position") is None:
                last = self.store.find(self.collection, {"project_id": inp.project_id}, sort=[("position", -1)])
                data["position"] = last[0]["position"] + 1 if last else 0
            elif self._position_taken(inp.project_id, data["position"]):
                raise ConflictError(f"Position {data['position']} is already used by another chapter")
            chapter = build(Chapter, data)
            chapter.recount()
            self.store.insert(self.collection, chapter.to_doc())
        return chapter

    def update(self, ctx: RequestContext, project_id: str, entity_id: str, patch: ChapterPatch) -> Chapter:
        user_id = ctx.require_user()
        check_access(self.store, ctx, project_id, "write")
        with self.store.transaction():
            current = self.load(project_id, entity_id)
            if patch.position is not None and patch.position != current.position:
                if self._position_taken(project_id, patch.position, exclude_id=entity_id):
                    raise ConflictError(f"Position {patch.position} is already used by another chapter")
            chapter = apply_patch(current, patch)
            chapter.recount()
            chapter.edits.append(ChapterEdit(user_id=user_id, changes=METADATA_EDIT))
            fields = set(patch_changes(patch)) | {"word_count", "edits"}
            return self.persist(chapter, fields)

    def update_content(self, ctx: RequestContext, inp: UpdateContentInput) -> Chapter:
        user_id = ctx.require_user()
        check_access(self.store, ctx, inp.project_id, "write")
        chapter = self.load(inp.project_id, inp.id)
        chapter.content = inp.content
        chapter.recount()
        chapter.edits.append(ChapterEdit(user_id=user_id, changes=CONTENT_EDIT))
        return self.persist(chapter, ["content", "word_count", "edits"])

    def add_edit(self, ctx: RequestContext, inp: AddEditInput) -> Chapter:
        user_id = ctx.require_user()
        check_access(self.store, ctx, inp.project_id, "write")
        chapter = self.load(inp.project_id, inp.id)
        chapter.edits.append(ChapterEdit(user_id=user_id, changes=inp.changes))
        return self.persist(chapter, ["edits"])

    def delete(self, ctx: RequestContext, project_id: str, entity_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "write")
        with self.store.transaction():
            chapter = self.load(project_id, entity_id)
            self.store.delete_one(self.collection, {"id": entity_id})
            later = self.store.find(
                self.collection,
                {"project_id": project_id, "position": {"$gt": chapter.position}},
                sort=[("position", 1)],
            )
            for doc in later:
                self.store.update_fields(self.collection, doc["id"], {"position": doc["position"] - 1})
        return {"success": True, "id": entity_id}

    def reorder(self, ctx: RequestContext, inp: ReorderChaptersInput) -> list[Chapter]:
        """Move chapters to new positions as one unit; any failure leaves every chapter untouched."""
        check_access(self.store, ctx, inp.project_id, "write")
        ids = [c.id for c in inp.chapters]
        if len(set(ids)) != len(ids):
            raise BadRequestError("Each chapter may appear only once")
        with self.store.transaction():
            stamp = now_iso()
            for item in inp.chapters:
                self.load(inp.project_id, item.id)
                self.store.update_fields(self.collection, item.id, {"position": item.position, "updated_at": stamp})
            docs = self.store.find(self.collection, {"project_id": inp.project_id}, sort=[("position", 1)])
            positions = [d["position"] for d in docs]
            if len(set(positions)) != len(positions):
                raise ConflictError("Reordering would give two chapters the same position")
        return [Chapter.from_doc(d) for d in docs]
