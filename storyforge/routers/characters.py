from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.character import (
    AddRelationshipInput,
    CharacterCreate,
    CharacterFields,
    CharacterPatch,
    PossessionInput,
    RelationshipInput,
    RelationshipPatch,
    RemoveRelationshipInput,
    UpdateRelationshipInput,
)

router = APIRouter(prefix="/api/projects/{project_id}/characters", tags=["characters"])


@router.get("")
def list_characters(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.characters.list(ctx, project_id))


@router.post("", status_code=201)
def create_character(
    project_id: str,
    body: CharacterFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = CharacterCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.characters.create(ctx, inp))


@router.get("/{character_id}")
def get_character(
    project_id: str,
    character_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.characters.get_by_id(ctx, project_id, character_id))


@router.patch("/{character_id}")
def update_character(
    project_id: str,
    character_id: str,
    body: CharacterPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.characters.update(ctx, project_id, character_id, body))


@router.delete("/{character_id}")
def delete_character(
    project_id: str,
    character_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.characters.delete(ctx, project_id, character_id)


@router.get("/{character_id}/relationships")
def get_relationships(
    project_id: str,
    character_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.characters.get_relationships(ctx, project_id, character_id))


@router.post("/{character_id}/relationships", status_code=201)
def add_relationship(
    project_id: str,
    character_id: str,
    body: RelationshipInput,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = AddRelationshipInput(project_id=project_id, character_id=character_id, relationship=body)
    return to_wire(s.characters.add_relationship(ctx, inp))


@router.patch("/{character_id}/relationships/{target_id}")
def update_relationship(
    project_id: str,
    character_id: str,
    target_id: str,
    body: RelationshipPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = UpdateRelationshipInput(project_id=project_id, character_id=character_id, target_id=target_id, data=body)
    return to_wire(s.characters.update_relationship(ctx, inp))


@router.delete("/{character_id}/relationships/{target_id}")
def remove_relationship(
    project_id: str,
    character_id: str,
    target_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = RemoveRelationshipInput(project_id=project_id, character_id=character_id, target_id=target_id)
    return to_wire(s.characters.remove_relationship(ctx, inp))


@router.put("/{character_id}/possessions/{object_id}")
def add_possession(
    project_id: str,
    character_id: str,
    object_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = PossessionInput(project_id=project_id, character_id=character_id, object_id=object_id)
    return to_wire(s.characters.add_possession(ctx, inp))


@router.delete("/{character_id}/possessions/{object_id}")
def remove_possession(
    project_id: str,
    character_id: str,
    object_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = PossessionInput(project_id=project_id, character_id=character_id, object_id=object_id)
    return to_wire(s.characters.remove_possession(ctx, inp))
