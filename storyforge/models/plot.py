from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub
from storyforge.storage.doc_store import new_id

PlotType = Literal["Main Plot", "Subplot", "Character Arc"]
PlotStructure = Literal[
    "Three-Act",
    "Hero's Journey",
    "Save the Cat",
    "Seven-Point",
    "Freytag's Pyramid",
    "Fichtean Curve",
    "Custom",
]
PlotStatus = Literal["Planned", "In Progress", "Completed", "Abandoned"]
ElementType = Literal[
    "Setup",
    "Inciting Incident",
    "Rising Action",
    "Midpoint",
    "Complications",
    "Crisis",
    "Climax",
    "Resolution",
    "Custom",
]


class PlotElement(Sub):
    id: str = Field(default_factory=new_id)
    type: ElementType
    description: str = Field(min_length=1)
    order: int = Field(ge=0)
    characters: list[str] = Field(default_factory=list)
    settings: list[str] = Field(default_factory=list)
    objects: list[str] = Field(default_factory=list)


class Plot(Record):
    COLLECTION: ClassVar[str] = "plots"

    project_id: str
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    type: PlotType
    structure: PlotStructure = "Three-Act"
    importance: int = Field(default=3, ge=1, le=5)
    status: PlotStatus = "Planned"
    elements: list[PlotElement] = Field(default_factory=list)
    related_plots: list[str] = Field(default_factory=list)
    notes: str | None = None

    def sort_elements(self) -> None:
        self.elements.sort(key=lambda e: e.order)
