from __future__ import annotations

from fastapi import APIRouter, Depends

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.procedures import to_wire
from storyforge.schemas.plot import (
    AddPlotPointInput,
    DeletePlotPointInput,
    PlotCreate,
    PlotFields,
    PlotPatch,
    PlotPointInput,
    PlotPointPatch,
    PointOrderList,
    ReorderPlotPointsInput,
    UpdatePlotPointInput,
)

router = APIRouter(prefix="/api/projects/{project_id}/plots", tags=["plots"])


@router.get("")
def list_plots(project_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.plots.list(ctx, project_id))


@router.post("", status_code=201)
def create_plot(
    project_id: str,
    body: PlotFields,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = PlotCreate(**body.model_dump(), project_id=project_id)
    return to_wire(s.plots.create(ctx, inp))


@router.get("/{plot_id}")
def get_plot(project_id: str, plot_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return to_wire(s.plots.get_by_id(ctx, project_id, plot_id))


@router.patch("/{plot_id}")
def update_plot(
    project_id: str,
    plot_id: str,
    body: PlotPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    return to_wire(s.plots.update(ctx, project_id, plot_id, body))


@router.delete("/{plot_id}")
def delete_plot(project_id: str, plot_id: str, s: Services = Depends(get_services), ctx: RequestContext = Depends(get_context)):
    return s.plots.delete(ctx, project_id, plot_id)


@router.post("/{plot_id}/points", status_code=201)
def add_plot_point(
    project_id: str,
    plot_id: str,
    body: PlotPointInput,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = AddPlotPointInput(project_id=project_id, plot_id=plot_id, point=body)
    return to_wire(s.plots.add_plot_point(ctx, inp))


@router.post("/{plot_id}/points/reorder")
def reorder_plot_points(
    project_id: str,
    plot_id: str,
    body: PointOrderList,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = ReorderPlotPointsInput(project_id=project_id, plot_id=plot_id, points=body.points)
    return to_wire(s.plots.reorder_plot_points(ctx, inp))


@router.patch("/{plot_id}/points/{point_id}")
def update_plot_point(
    project_id: str,
    plot_id: str,
    point_id: str,
    body: PlotPointPatch,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = UpdatePlotPointInput(project_id=project_id, plot_id=plot_id, point_id=point_id, data=body)
    return to_wire(s.plots.update_plot_point(ctx, inp))


@router.delete("/{plot_id}/points/{point_id}")
def delete_plot_point(
    project_id: str,
    plot_id: str,
    point_id: str,
    s: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    inp = DeletePlotPointInput(project_id=project_id, plot_id=plot_id, point_id=point_id)
    return to_wire(s.plots.delete_plot_point(ctx, inp))
