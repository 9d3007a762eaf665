from __future__ import annotations

from pydantic import Field

from storyforge.models.user import EMAIL_PATTERN
from storyforge.schemas.common import Input


class RegisterInput(Input):
    username: str = Field(min_length=3, max_length=30)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)
    first_name: str = ""
    last_name: str = ""
    age: int | None = Field(default=None, ge=5, le=120)


class LoginInput(Input):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)


class ChangePasswordInput(Input):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ForgotPasswordInput(Input):
    email: str = Field(pattern=EMAIL_PATTERN)


class ResetPasswordInput(Input):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)
