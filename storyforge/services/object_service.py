from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.models.character import Character
from storyforge.models.story_object import StoryObject
from storyforge.services.access import check_access
from storyforge.services.base import ScopedService
from storyforge.storage.doc_store import now_iso


class ObjectService(ScopedService[StoryObject]):
    model = StoryObject
    label = "Object"
    list_sort = [("name", 1)]

    def delete(self, ctx: RequestContext, project_id: str, entity_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "write")
        self.load(project_id, entity_id)
        with self.store.transaction():
            owners = self.store.find(Character.COLLECTION, {"project_id": project_id, "possessions": entity_id})
            for doc in owners:
                kept = [p for p in doc.get("possessions", []) if p != entity_id]
                self.store.update_fields(Character.COLLECTION, doc["id"], {"possessions": kept, "updated_at": now_iso()})
            self.store.delete_one(self.collection, {"id": entity_id})
        return {"success": True, "id": entity_id}
