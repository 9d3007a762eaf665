from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.export import ExportCreate, ExportFields

router = APIRouter(prefix="/api/projects/{project_id}/exports", tags=["exports"])


@router.get("")
def list_exports(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.exports.list(ctx, project_id))


@router.post("", status_code=202)
def create_export(
    project_id: str,
    body: ExportFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = ExportCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.exports.create(ctx, inp))


@router.get("/{export_id}")
def get_export(project_id: str, export_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.exports.get_by_id(ctx, project_id, export_id))


@router.post("/{export_id}/download")
def download_export(
    project_id: str,
    export_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.exports.download(ctx, project_id, export_id)


@router.delete("/{export_id}")
def delete_export(
    project_id: str,
    export_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.exports.delete(ctx, project_id, export_id)
