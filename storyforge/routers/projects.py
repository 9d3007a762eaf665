from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.project import (
    AddCollaboratorInput,
    CollaboratorInput,
    ProjectCreate,
    ProjectPatch,
    RemoveCollaboratorInput,
    RoleBody,
    UpdateCollaboratorRoleInput,
)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.projects.list_mine(ctx))


@router.post("", status_code=201)
def create_project(
    body: ProjectCreate,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.projects.create(ctx, body))


@router.get("/{project_id}")
def get_project(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.projects.get_by_id(ctx, project_id))


@router.patch("/{project_id}")
def update_project(
    project_id: str,
    body: ProjectPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.projects.update(ctx, project_id, body))


@router.delete("/{project_id}")
def delete_project(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return s.projects.delete(ctx, project_id)


@router.post("/{project_id}/collaborators", status_code=201)
def add_collaborator(
    project_id: str,
    body: CollaboratorInput,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = AddCollaboratorInput(project_id=project_id, collaborator=body)
    return to_wire(s.projects.add_collaborator(ctx, inp))


@router.patch("/{project_id}/collaborators/{user_id}")
def update_collaborator_role(
    project_id: str,
    user_id: str,
    body: RoleBody,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = UpdateCollaboratorRoleInput(project_id=project_id, collaborator_id=user_id, role=body.role)
    return to_wire(s.projects.update_collaborator_role(ctx, inp))


@router.delete("/{project_id}/collaborators/{user_id}")
def remove_collaborator(
    project_id: str,
    user_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = RemoveCollaboratorInput(project_id=project_id, collaborator_id=user_id)
    return to_wire(s.projects.remove_collaborator(ctx, inp))
