"""Project-level authorization checks shared by every project-scoped service."""

from __future__ import annotations

from typing import Literal

from storyforge.context import RequestContext
from storyforge.errors import ForbiddenError, NotFoundError
from storyforge.models.project import Project
from storyforge.storage.doc_store import DocStore

Level = Literal["read", "write", "owner"]


def load_project(store: DocStore, project_id: str) -> Project:
    doc = store.get(Project.COLLECTION, project_id)
    if doc is None:
        raise NotFoundError("Project not found")
    return Project.from_doc(doc)


def is_owner(project: Project, user_id: str) -> bool:
    return project.owner_id == user_id


def can_read(project: Project, user_id: str) -> bool:
    return is_owner(project, user_id) or project.collaborator(user_id) is not None


def can_write(project: Project, user_id: str) -> bool:
    if is_owner(project, user_id):
        return True
    collaborator = project.collaborator(user_id)
    return collaborator is not None and collaborator.role == "Editor"


def check_access(store: DocStore, ctx: RequestContext, project_id: str, level: Level = "read") -> Project:
    """Load the project and make sure the caller may act on it at ``level``.

    Raises Unauthorized for anonymous callers, NotFound for a missing project and
    Forbidden when the caller lacks the required role. Nothing is cached.
    """
    user_id = ctx.require_user()
    project = load_project(store, project_id)
    if level == "owner":
        allowed = is_owner(project, user_id)
    elif level == "write":
        allowed = can_write(project, user_id)
    else:
        allowed = can_read(project, user_id)
    if not allowed:
        action = {"read": "view", "write": "modify", "owner": "manage"}[level]
        raise ForbiddenError(f"You do not have permission to {action} this project")
    return project
