from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.ai import CharacterRequest, GenerateContentBody, ImageRequest, PlotRequest

router = APIRouter(prefix="/api", tags=["ai"])


@router.post("/ai/generate")
async def generate_content(
    body: GenerateContentBody,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(await s.ai.generate_content(ctx, body.root))


@router.post("/ai/character")
async def generate_character(
    body: CharacterRequest,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(await s.ai.generate_character(ctx, body))


@router.post("/ai/plot")
async def generate_plot(
    body: PlotRequest,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(await s.ai.generate_plot(ctx, body))


@router.post("/ai/image")
async def generate_image(
    body: ImageRequest,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(await s.ai.generate_image(ctx, body))


@router.get("/projects/{project_id}/ai/generations")
def list_generations(
    project_id: str,
    saved_only: bool = False,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.ai.list_by_project(ctx, project_id, saved_only))


@router.get("/ai/generations/{generation_id}")
def get_generation(generation_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.ai.get_by_id(ctx, generation_id))


@router.post("/ai/generations/{generation_id}/save")
def save_generation(generation_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.ai.save_generation(ctx, generation_id))


@router.post("/ai/generations/{generation_id}/toggle-saved")
def toggle_saved(generation_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.ai.toggle_saved(ctx, generation_id))


@router.delete("/ai/generations/{generation_id}")
def delete_generation(generation_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return s.ai.delete(ctx, generation_id)
