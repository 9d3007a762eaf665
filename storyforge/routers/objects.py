from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.story_object import ObjectCreate, ObjectFields, ObjectPatch

router = APIRouter(prefix="/api/projects/{project_id}/objects", tags=["objects"])


@router.get("")
def list_objects(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.objects.list(ctx, project_id))


@router.post("", status_code=201)
def create_object(
    project_id: str,
    body: ObjectFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = ObjectCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.objects.create(ctx, inp))


@router.get("/{object_id}")
def get_object(project_id: str, object_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.objects.get_by_id(ctx, project_id, object_id))


@router.patch("/{object_id}")
def update_object(
    project_id: str,
    object_id: str,
    body: ObjectPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.objects.update(ctx, project_id, object_id, body))


@router.delete("/{object_id}")
def delete_object(
    project_id: str,
    object_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.objects.delete(ctx, project_id, object_id)
