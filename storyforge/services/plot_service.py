from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import BadRequestError, NotFoundError
from storyforge.models.plot import Plot, PlotElement
from storyforge.schemas.plot import (
    AddPlotPointInput,
    DeletePlotPointInput,
    ReorderPlotPointsInput,
    UpdatePlotPointInput,
)
from storyforge.services.access import check_access
from storyforge.services.base import ScopedService
from storyforge.services.patching import apply_patch


def _next_order(elements: list[PlotElement]) -> int:
    return max((e.order for e in elements), default=-1) + 1


class PlotService(ScopedService[Plot]):
    model = Plot
    label = "Plot"

    def prepare_create(self, ctx: RequestContext, data: dict[str, Any]) -> dict[str, Any]:
        elements: list[dict[str, Any]] = []
        next_order = max((e["order"] for e in data.get("elements", []) if e.get("order") is not None), default=-1) + 1
        for element in data.get("elements", []):
            if element.get("order") is None:
                element = {**element, "order": next_order}
                next_order += 1
            elements.append(element)
        elements.sort(key=lambda e: e["order"])
        return {**data, "elements": elements}

    def _point(self, plot: Plot, point_id: str) -> PlotElement:
        for element in plot.elements:
            if element.id == point_id:
                return element
        raise NotFoundError("Plot point not found")

    def add_plot_point(self, ctx: RequestContext, inp: AddPlotPointInput) -> Plot:
        check_access(self.store, ctx, inp.project_id, "write")
        plot = self.load(inp.project_id, inp.plot_id)
        data = inp.point.model_dump()
        if data.get("order") is None:
            data["order"] = _next_order(plot.elements)
        plot.elements.append(PlotElement(**data))
        plot.sort_elements()
        return self.persist(plot, ["elements"])

    def update_plot_point(self, ctx: RequestContext, inp: UpdatePlotPointInput) -> Plot:
        check_access(self.store, ctx, inp.project_id, "write")
        plot = self.load(inp.project_id, inp.plot_id)
        updated = apply_patch(self._point(plot, inp.point_id), inp.data)
        plot.elements = [updated if e.id == inp.point_id else e for e in plot.elements]
        plot.sort_elements()
        return self.persist(plot, ["elements"])

    def delete_plot_point(self, ctx: RequestContext, inp: DeletePlotPointInput) -> Plot:
        check_access(self.store, ctx, inp.project_id, "write")
        plot = self.load(inp.project_id, inp.plot_id)
        self._point(plot, inp.point_id)
        plot.elements = [e for e in plot.elements if e.id != inp.point_id]
        return self.persist(plot, ["elements"])

    def reorder_plot_points(self, ctx: RequestContext, inp: ReorderPlotPointsInput) -> Plot:
        check_access(self.store, ctx, inp.project_id, "write")
        ids = [p.id for p in inp.points]
        if len(set(ids)) != len(ids):
            raise BadRequestError("Each plot point may appear only once")
        with self.store.transaction():
            plot = self.load(inp.project_id, inp.plot_id)
            orders = {p.id: p.order for p in inp.points}
            for point_id in orders:
                self._point(plot, point_id)
            for element in plot.elements:
                if element.id in orders:
                    element.order = orders[element.id]
            plot.sort_elements()
            return self.persist(plot, ["elements"])
