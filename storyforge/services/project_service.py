from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import BadRequestError, ConflictError, NotFoundError
from storyforge.logs import get_logger
from storyforge.models import (
    AIGeneration,
    Chapter,
    Character,
    Export,
    ExportJob,
    Plot,
    Project,
    Setting,
    StoryObject,
    User,
)
from storyforge.models.project import Collaborator
from storyforge.schemas.project import (
    AddCollaboratorInput,
    ProjectCreate,
    ProjectPatch,
    RemoveCollaboratorInput,
    UpdateCollaboratorRoleInput,
)
from storyforge.services.access import check_access
from storyforge.services.base import build
from storyforge.services.patching import apply_patch, patch_changes
from storyforge.storage.doc_store import DocStore, now_iso

logger = get_logger(__name__)

CHILD_COLLECTIONS = (
    Character.COLLECTION,
    Plot.COLLECTION,
    Chapter.COLLECTION,
    Setting.COLLECTION,
    StoryObject.COLLECTION,
    Export.COLLECTION,
    ExportJob.COLLECTION,
    AIGeneration.COLLECTION,
)


class ProjectService:
    def __init__(self, store: DocStore) -> None:
        self.store = store

    def _collaborators(self, project: Project) -> list[dict[str, Any]]:
        return [c.model_dump(mode="json") for c in project.collaborators]

    def _save_collaborators(self, project: Project) -> Project:
        doc = self.store.update_fields(
            Project.COLLECTION,
            project.id,
            {"collaborators": self._collaborators(project), "updated_at": now_iso()},
        )
        return Project.from_doc(doc)

    def create(self, ctx: RequestContext, inp: ProjectCreate) -> Project:
        user_id = ctx.require_user()
        project = build(Project, {**inp.model_dump(mode="json"), "owner_id": user_id, "status": "Draft"})
        self.store.insert(Project.COLLECTION, project.to_doc())
        logger.info("project created | project_id=%s owner=%s", project.id, user_id)
        return project

    def list_mine(self, ctx: RequestContext) -> list[Project]:
        user_id = ctx.require_user()
        docs = self.store.find(
            Project.COLLECTION,
            {"$or": [{"owner_id": user_id}, {"collaborators.user_id": user_id}]},
            sort=[("updated_at", -1)],
        )
        return [Project.from_doc(d) for d in docs]

    def get_by_id(self, ctx: RequestContext, project_id: str) -> Project:
        return check_access(self.store, ctx, project_id, "read")

    def update(self, ctx: RequestContext, project_id: str, patch: ProjectPatch) -> Project:
        project = check_access(self.store, ctx, project_id, "write")
        updated = apply_patch(project, patch)
        changes = updated.to_doc()
        fields = {name: changes[name] for name in patch_changes(patch)}
        fields["updated_at"] = now_iso()
        return Project.from_doc(self.store.update_fields(Project.COLLECTION, project_id, fields))

    def delete(self, ctx: RequestContext, project_id: str) -> dict[str, Any]:
        check_access(self.store, ctx, project_id, "owner")
        removed: dict[str, int] = {}
        with self.store.transaction():
            for collection in CHILD_COLLECTIONS:
                removed[collection] = self.store.delete_many(collection, {"project_id": project_id})
            self.store.delete_one(Project.COLLECTION, {"id": project_id})
        logger.info("project deleted | project_id=%s removed=%s", project_id, removed)
        return {"success": True, "id": project_id}

    def add_collaborator(self, ctx: RequestContext, inp: AddCollaboratorInput) -> list[dict[str, Any]]:
        project = check_access(self.store, ctx, inp.project_id, "owner")
        target = inp.collaborator.user_id
        if target == project.owner_id:
            raise BadRequestError("The project owner cannot be added as a collaborator")
        if self.store.get(User.COLLECTION, target) is None:
            raise NotFoundError("User not found")
        if project.collaborator(target) is not None:
            raise ConflictError("User is already a collaborator")
        project.collaborators.append(Collaborator(user_id=target, role=inp.collaborator.role))
        return self._collaborators(self._save_collaborators(project))

    def remove_collaborator(self, ctx: RequestContext, inp: RemoveCollaboratorInput) -> list[dict[str, Any]]:
        project = check_access(self.store, ctx, inp.project_id, "owner")
        if project.collaborator(inp.collaborator_id) is None:
            raise NotFoundError("Collaborator not found")
        project.collaborators = [c for c in project.collaborators if c.user_id != inp.collaborator_id]
        return self._collaborators(self._save_collaborators(project))

    def update_collaborator_role(self, ctx: RequestContext, inp: UpdateCollaboratorRoleInput) -> list[dict[str, Any]]:
        project = check_access(self.store, ctx, inp.project_id, "owner")
        collaborator = project.collaborator(inp.collaborator_id)
        if collaborator is None:
            raise NotFoundError("Collaborator not found")
        collaborator.role = inp.role
        return self._collaborators(self._save_collaborators(project))
