from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Theme = Literal["light", "dark", "system"]
ReadingLevel = Literal["elementary", "middle grade", "young adult", "adult"]


def _default_notifications() -> dict[str, bool]:
    return {"email": True, "app": True}


class UserPreferences(Sub):
    theme: Theme = "light"
    font_size: int = Field(default=16, ge=8, le=32)
    reading_level: ReadingLevel = "middle grade"
    notification_settings: dict[str, bool] = Field(default_factory=_default_notifications)


class User(Record):
    COLLECTION: ClassVar[str] = "users"
    PRIVATE: ClassVar[frozenset[str]] = frozenset({"password_hash", "reset_token_hash", "reset_token_expires"})

    username: str = Field(min_length=3, max_length=30)
    email: str = Field(pattern=EMAIL_PATTERN)
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    age: int | None = Field(default=None, ge=5, le=120)
    avatar: str | None = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    last_login: str | None = None
    reset_token_hash: str | None = None
    reset_token_expires: str | None = None
