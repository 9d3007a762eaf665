from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.setting import SettingCreate, SettingFields, SettingPatch

router = APIRouter(prefix="/api/projects/{project_id}/settings", tags=["settings"])


@router.get("")
def list_settings(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.story_settings.list(ctx, project_id))


@router.post("", status_code=201)
def create_setting(
    project_id: str,
    body: SettingFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = SettingCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.story_settings.create(ctx, inp))


@router.get("/{setting_id}")
def get_setting(
    project_id: str,
    setting_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.story_settings.get_by_id(ctx, project_id, setting_id))


@router.patch("/{setting_id}")
def update_setting(
    project_id: str,
    setting_id: str,
    body: SettingPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.story_settings.update(ctx, project_id, setting_id, body))


@router.delete("/{setting_id}")
def delete_setting(
    project_id: str,
    setting_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.story_settings.delete(ctx, project_id, setting_id)
