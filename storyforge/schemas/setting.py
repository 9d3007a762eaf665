from __future__ import annotations

from pydantic import Field

from storyforge.models.setting import SettingDetails, SettingMap, SettingType
from storyforge.schemas.common import Input, ObjectId, Patch


class SettingFields(Input):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    type: SettingType
    details: SettingDetails = Field(default_factory=SettingDetails)
    map: SettingMap = Field(default_factory=SettingMap)
    related_settings: list[ObjectId] = Field(default_factory=list)
    characters: list[ObjectId] = Field(default_factory=list)
    objects: list[ObjectId] = Field(default_factory=list)
    image_url: str | None = None
    notes: str | None = None


class SettingCreate(SettingFields):
    project_id: str


class SettingPatch(Patch):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    type: SettingType | None = None
    details: SettingDetails | None = None
    map: SettingMap | None = None
    related_settings: list[ObjectId] | None = None
    characters: list[ObjectId] | None = None
    objects: list[ObjectId] | None = None
    image_url: str | None = None
    notes: str | None = None


class SettingUpdateInput(Input):
    project_id: str
    id: str
    data: SettingPatch
