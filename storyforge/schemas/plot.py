from __future__ import annotations

from pydantic import Field

from storyforge.models.plot import ElementType, PlotStatus, PlotStructure, PlotType
from storyforge.schemas.common import Input, ObjectId, Patch


class PlotPointInput(Input):
    type: ElementType
    description: str = Field(min_length=1)
    order: int | None = Field(default=None, ge=0)
    characters: list[ObjectId] = Field(default_factory=list)
    settings: list[ObjectId] = Field(default_factory=list)
    objects: list[ObjectId] = Field(default_factory=list)


class PlotPointPatch(Patch):
    type: ElementType | None = None
    description: str | None = Field(default=None, min_length=1)
    order: int | None = Field(default=None, ge=0)
    characters: list[ObjectId] | None = None
    settings: list[ObjectId] | None = None
    objects: list[ObjectId] | None = None


class PlotFields(Input):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    type: PlotType
    structure: PlotStructure = "Three-Act"
    importance: int = Field(default=3, ge=1, le=5)
    status: PlotStatus = "Planned"
    elements: list[PlotPointInput] = Field(default_factory=list)
    related_plots: list[ObjectId] = Field(default_factory=list)
    notes: str | None = None


class PlotCreate(PlotFields):
    project_id: str


class PlotPatch(Patch):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    type: PlotType | None = None
    structure: PlotStructure | None = None
    importance: int | None = Field(default=None, ge=1, le=5)
    status: PlotStatus | None = None
    related_plots: list[ObjectId] | None = None
    notes: str | None = None


class PlotUpdateInput(Input):
    project_id: str
    id: str
    data: PlotPatch


class AddPlotPointInput(Input):
    project_id: str
    plot_id: str
    point: PlotPointInput


class UpdatePlotPointInput(Input):
    project_id: str
    plot_id: str
    point_id: str
    data: PlotPointPatch


class DeletePlotPointInput(Input):
    project_id: str
    plot_id: str
    point_id: str


class PointOrder(Input):
    id: str
    order: int = Field(ge=0)


class PointOrderList(Input):
    points: list[PointOrder] = Field(min_length=1)


class ReorderPlotPointsInput(PointOrderList):
    project_id: str
    plot_id: str
