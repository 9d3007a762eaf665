from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub

SettingType = Literal["Location", "World", "Environment", "Building", "Region", "Planet"]


class SettingDetails(Sub):
    geography: str = ""
    climate: str = ""
    architecture: str = ""
    culture: str = ""
    history: str = ""
    government: str = ""
    economy: str = ""
    technology: str = ""


class MapCoordinates(Sub):
    x: float = 0
    y: float = 0


class SettingMap(Sub):
    image_url: str | None = None
    coordinates: MapCoordinates | None = None


class Setting(Record):
    COLLECTION: ClassVar[str] = "settings"

    project_id: str
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    type: SettingType
    details: SettingDetails = Field(default_factory=SettingDetails)
    map: SettingMap = Field(default_factory=SettingMap)
    related_settings: list[str] = Field(default_factory=list)
    characters: list[str] = Field(default_factory=list)
    objects: list[str] = Field(default_factory=list)
    image_url: str | None = None
    notes: str | None = None
