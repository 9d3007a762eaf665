from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.auth import ChangePasswordInput
from storyforge.schemas.user import PreferencesPatch, ProfilePatch

router = APIRouter(prefix="/api/users/me", tags=["users"])


@router.get("")
def get_profile(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.users.get_profile(ctx))


@router.patch("")
def update_profile(
    body: ProfilePatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.users.update_profile(ctx, body))


@router.post("/password")
def change_password(
    body: ChangePasswordInput,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.users.change_password(ctx, body)


@router.get("/preferences")
def get_preferences(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.users.get_preferences(ctx))


@router.patch("/preferences")
def update_preferences(
    body: PreferencesPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.users.update_preferences(ctx, body))
