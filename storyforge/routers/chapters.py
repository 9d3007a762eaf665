from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.chapter import (
    AddEditInput,
    ChapterCreate,
    ChapterFields,
    ChapterOrder,
    ChapterPatch,
    ContentBody,
    EditBody,
    ReorderChaptersInput,
    UpdateContentInput,
)

router = APIRouter(prefix="/api/projects/{project_id}/chapters", tags=["chapters"])


@router.get("")
def list_chapters(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.chapters.list(ctx, project_id))


@router.post("", status_code=201)
def create_chapter(
    project_id: str,
    body: ChapterFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = ChapterCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.chapters.create(ctx, inp))


@router.post("/reorder")
def reorder_chapters(
    project_id: str,
    body: ChapterOrder,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = ReorderChaptersInput(project_id=project_id, chapters=body.chapters)
    return to_wire(s.chapters.reorder(ctx, inp))


@router.get("/{chapter_id}")
def get_chapter(
    project_id: str,
    chapter_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.chapters.get_by_id(ctx, project_id, chapter_id))


@router.patch("/{chapter_id}")
def update_chapter(
    project_id: str,
    chapter_id: str,
    body: ChapterPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.chapters.update(ctx, project_id, chapter_id, body))


@router.delete("/{chapter_id}")
def delete_chapter(
    project_id: str,
    chapter_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.chapters.delete(ctx, project_id, chapter_id)


@router.put("/{chapter_id}/content")
def update_content(
    project_id: str,
    chapter_id: str,
    body: ContentBody,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = UpdateContentInput(project_id=project_id, id=chapter_id, content=body.content)
    return to_wire(s.chapters.update_content(ctx, inp))


@router.post("/{chapter_id}/edits", status_code=201)
def add_edit(
    project_id: str,
    chapter_id: str,
    body: EditBody,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = AddEditInput(project_id=project_id, id=chapter_id, changes=body.changes)
    return to_wire(s.chapters.add_edit(ctx, inp))
