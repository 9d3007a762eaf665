from __future__ import annotations

from pydantic import Field

from storyforge.models.user import EMAIL_PATTERN, ReadingLevel, Theme
from storyforge.schemas.common import Patch


class ProfilePatch(Patch):
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    username: str | None = Field(default=None, min_length=3, max_length=30)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    age: int | None = Field(default=None, ge=5, le=120)
    avatar: str | None = None


class PreferencesPatch(Patch):
    theme: Theme | None = None
    font_size: int | None = Field(default=None, ge=8, le=32)
    reading_level: ReadingLevel | None = None
    notification_settings: dict[str, bool] | None = None
