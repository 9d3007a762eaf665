from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import BadRequestError, NotFoundError
from storyforge.jobs.export_worker import enqueue_export
from storyforge.models.chapter import Chapter
from storyforge.models.export import Export, ExportJob
from storyforge.schemas.export import ExportCreate
from storyforge.services.access import check_access
from storyforge.services.base import ScopedService, build
from storyforge.storage.doc_store import DocStore, now_iso


class ExportService(ScopedService[Export]):
    model = Export
    label = "Export"
    list_sort = [("created_at", -1)]

    def __init__(self, store: DocStore, delay_s: float = 5.0) -> None:
        super().__init__(store)
        self.delay_s = delay_s

    def create(self, ctx: RequestContext, inp: ExportCreate) -> Export:
        user_id = ctx.require_user()
        check_access(self.store, ctx, inp.project_id, "read")
        data = inp.model_dump(mode="json")
        chapters = self.store.find(Chapter.COLLECTION, {"project_id": inp.project_id}, sort=[("position", 1)])
        known = {c["id"] for c in chapters}
        requested = data["configuration"]["include_chapters"]
        if requested:
            missing = [cid for cid in requested if cid not in known]
            if missing:
                raise NotFoundError(f"Chapter not found: {missing[0]}")
        else:
            data["configuration"]["include_chapters"] = [c["id"] for c in chapters]
        export = build(Export, {**data, "user_id": user_id, "status": "Pending"})
        with self.store.transaction():
            self.store.insert(self.collection, export.to_doc())
            enqueue_export(self.store, export, self.delay_s)
        return export

    def download(self, ctx: RequestContext, project_id: str, export_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "read")
        export = self.load(project_id, export_id)
        if export.status != "Completed" or not export.file_url:
            raise BadRequestError(f"Export is not ready for download (status: {export.status})")
        doc = self.store.increment(self.collection, export_id, "download_count")
        if doc is None:
            raise NotFoundError("Export not found")
        self.store.update_fields(self.collection, export_id, {"updated_at": now_iso()})
        return {"url": export.file_url, "download_count": doc["download_count"]}

    def delete(self, ctx: RequestContext, project_id: str, entity_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "write")
        self.load(project_id, entity_id)
        with self.store.transaction():
            self.store.delete_many(ExportJob.COLLECTION, {"export_id": entity_id, "status": {"$in": ["Pending", "Running"]}})
            self.store.delete_one(self.collection, {"id": entity_id})
        return {"success": True, "id": entity_id}
