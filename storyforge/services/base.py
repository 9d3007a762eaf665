from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storyforge.context import RequestContext
from storyforge.errors import NotFoundError, from_pydantic
from storyforge.models.base import Record
from storyforge.services.access import check_access
from storyforge.services.patching import apply_patch, patch_changes
from storyforge.storage.doc_store import DocStore, Sort, now_iso

R = TypeVar("R", bound=Record)


def build(model: type[R], data: dict[str, Any]) -> R:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise from_pydantic(exc) from exc


class ScopedService(Generic[R]):
    """CRUD for a record type that belongs to one Project."""

    model: type[R]
    label = "Resource"
    list_sort: Sort = [("created_at", 1)]

    def __init__(self, store: DocStore) -> None:
        self.store = store

    @property
    def collection(self) -> str:
        return self.model.COLLECTION

    def load(self, project_id: str, entity_id: str) -> R:
        doc = self.store.get(self.collection, entity_id)
        if doc is None or doc.get("project_id") != project_id:
            raise NotFoundError(f"{self.label} not found")
        return self.model.from_doc(doc)

    def persist(self, entity: R, fields: Iterable[str]) -> R:
        """Write only ``fields`` (plus ``updated_at``) back to the stored document."""
        entity.updated_at = now_iso()
        dumped = entity.to_doc()
        changed = {name: dumped[name] for name in set(fields) | {"updated_at"}}
        doc = self.store.update_fields(self.collection, entity.id, changed)
        if doc is None:
            raise NotFoundError(f"{self.label} not found")
        return self.model.from_doc(doc)

    def create(self, ctx: RequestContext, inp: BaseModel) -> R:
        data = inp.model_dump(mode="json")
        check_access(self.store, ctx, data["project_id"], "write")
        entity = build(self.model, self.prepare_create(ctx, data))
        self.store.insert(self.collection, entity.to_doc())
        return entity

    def prepare_create(self, ctx: RequestContext, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def list(self, ctx: RequestContext, project_id: str) -> list[R]:
        check_access(self.store, ctx, project_id, "read")
        docs = self.store.find(self.collection, {"project_id": project_id}, sort=self.list_sort)
        return [self.model.from_doc(d) for d in docs]

    def get_by_id(self, ctx: RequestContext, project_id: str, entity_id: str) -> R:
        check_access(self.store, ctx, project_id, "read")
        return self.load(project_id, entity_id)

    def update(self, ctx: RequestContext, project_id: str, entity_id: str, patch: BaseModel) -> R:
        check_access(self.store, ctx, project_id, "write")
        current = self.load(project_id, entity_id)
        updated = apply_patch(current, patch)
        return self.persist(updated, patch_changes(patch).keys())

    def delete(self, ctx: RequestContext, project_id: str, entity_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "write")
        self.load(project_id, entity_id)
        self.store.delete_one(self.collection, {"id": entity_id})
        return {"success": True, "id": entity_id}
