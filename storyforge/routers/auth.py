from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.auth import (
    ChangePasswordInput,
    ForgotPasswordInput,
    LoginInput,
    RegisterInput,
    ResetPasswordInput,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(body: RegisterInput, s: Services = Depends(get_services)):
    return to_wire(s.auth.register(body))


@router.post("/login")
def login(body: LoginInput, s: Services = Depends(get_services)):
    return to_wire(s.auth.login(body))


@router.get("/me")
def me(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.auth.get_profile(ctx))


@router.post("/refresh")
def refresh(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return s.auth.refresh_token(ctx)


@router.post("/change-password")
def change_password(
    body: ChangePasswordInput,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return s.auth.change_password(ctx, body)


@router.post("/forgot-password")
def forgot_password(body: ForgotPasswordInput, s: Services = Depends(get_services)):
    return s.auth.forgot_password(body)


@router.post("/reset-password")
def reset_password(body: ResetPasswordInput, s: Services = Depends(get_services)):
    return s.auth.reset_password(body)


@router.post("/logout")
def logout(s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return s.auth.logout(ctx)
