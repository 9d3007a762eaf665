from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, RootModel

from storyforge.models.project import Audience, Genre
from storyforge.schemas.common import Input

FilterLevel = Literal["strict", "standard", "relaxed"]
FocusArea = Literal["pacing", "character", "plot", "dialogue", "description"]
DesiredLength = Literal["short", "medium", "long"]
NarrativeImportance = Literal["protagonist", "antagonist", "supporting", "minor"]
ImageSize = Literal["256x256", "512x512", "1024x1024"]


class FormatOptions(Input):
    as_json: bool | None = None
    markdown_level: int | None = Field(default=None, ge=0, le=3)
    include_reasoning: bool | None = None


class GenerationBase(Input):
    project_id: str
    genre: Genre | None = None
    audience: Audience | None = None
    filter_level: FilterLevel | None = None
    format_options: FormatOptions | None = None
    max_tokens: int | None = Field(default=None, ge=1, le=4096)
    temperature: float | None = Field(default=None, ge=0, le=2)
    parent_id: str | None = None


class CharacterRequest(GenerationBase):
    task: Literal["character"] = "character"
    name: str | None = None
    role: str | None = None
    age_range: str | None = None
    key_traits: list[str] | None = None
    related_characters: list[str] | None = None
    narrative_importance: NarrativeImportance | None = None


class PlotRequest(GenerationBase):
    task: Literal["plot"] = "plot"
    plot_points: list[str] | None = None
    characters: list[str] | None = None
    setting: str | None = None
    conflict_type: str | None = None
    desired_length: DesiredLength | None = None


class SettingRequest(GenerationBase):
    task: Literal["setting"] = "setting"
    location_type: str | None = None
    time_period: str | None = None
    mood: str | None = None
    key_features: list[str] | None = None


class ChapterRequest(GenerationBase):
    task: Literal["chapter"] = "chapter"
    title: str | None = None
    characters_present: list[str] | None = None
    setting: str | None = None
    previous_chapter_summary: str | None = None
    goals: list[str] | None = None
    word_count: int | None = Field(default=None, ge=1)


class EditorialRequest(GenerationBase):
    task: Literal["editorial"] = "editorial"
    content: str = Field(min_length=1)
    focus_areas: list[FocusArea] | None = None


GenerateContentInput = Annotated[
    Union[CharacterRequest, PlotRequest, SettingRequest, ChapterRequest, EditorialRequest],
    Field(discriminator="task"),
]


class ImageRequest(Input):
    project_id: str
    prompt: str = Field(min_length=1, max_length=1000)
    size: ImageSize = "1024x1024"


class GenerationIdInput(Input):
    generation_id: str


class GenerateContentBody(RootModel[GenerateContentInput]):
    pass


class GenerationListInput(Input):
    project_id: str
    saved_only: bool = False
