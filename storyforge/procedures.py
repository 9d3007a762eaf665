"""The procedure registry: every operation the API offers, keyed by ``<resource>.<action>``.

The RPC adapter dispatches straight from this table and the schema listing is
generated from it. Handlers take ``(services, ctx, input)`` and delegate to a service.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Literal

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from storyforge.context import RequestContext
from storyforge.deps import Services
from storyforge.errors import from_pydantic
from storyforge.models.base import Record
from storyforge.schemas import ai, chapter, character, export, plot, project, setting, story_object, user
from storyforge.schemas import auth as auth_schema
from storyforge.schemas.common import IdInput, ProjectIdInput, ProjectScopedId

Kind = Literal["query", "mutation"]
Handler = Callable[[Services, RequestContext, Any], Any]


def to_wire(value: Any) -> Any:
    if isinstance(value, Record):
        return value.public()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class Procedure:
    name: str
    kind: Kind
    handler: Handler
    input_model: type[BaseModel] | None = None
    auth: bool = True

    def parse(self, raw: Any) -> Any:
        if self.input_model is None:
            return None
        try:
            return self.input_model.model_validate(raw if raw is not None else {})
        except PydanticValidationError as exc:
            raise from_pydantic(exc) from exc

    async def call(self, services: Services, ctx: RequestContext, raw: Any) -> Any:
        inp = self.parse(raw)
        if self.auth:
            ctx.require_user()
        if inspect.iscoroutinefunction(self.handler):
            result = await self.handler(services, ctx, inp)
        else:
            result = await run_in_threadpool(self.handler, services, ctx, inp)
            if inspect.isawaitable(result):
                result = await result
        return to_wire(result)

    def input_schema(self) -> dict[str, Any] | None:
        return self.input_model.model_json_schema() if self.input_model is not None else None


PROCEDURES: dict[str, Procedure] = {}


def register(name: str, kind: Kind, input_model: type[BaseModel] | None = None, auth: bool = True):
    def decorator(fn: Handler) -> Handler:
        if name in PROCEDURES:
            raise ValueError(f"duplicate procedure: {name}")
        PROCEDURES[name] = Procedure(name=name, kind=kind, handler=fn, input_model=input_model, auth=auth)
        return fn

    return decorator


def query(name: str, input_model: type[BaseModel] | None = None, auth: bool = True):
    return register(name, "query", input_model, auth)


def mutation(name: str, input_model: type[BaseModel] | None = None, auth: bool = True):
    return register(name, "mutation", input_model, auth)


# auth

@mutation("auth.register", auth_schema.RegisterInput, auth=False)
def _register(s: Services, ctx: RequestContext, i: auth_schema.RegisterInput):
    return s.auth.register(i)


@mutation("auth.login", auth_schema.LoginInput, auth=False)
def _login(s: Services, ctx: RequestContext, i: auth_schema.LoginInput):
    return s.auth.login(i)


@query("auth.getProfile")
def _auth_profile(s: Services, ctx: RequestContext, i: None):
    return s.auth.get_profile(ctx)


@mutation("auth.refreshToken")
def _refresh(s: Services, ctx: RequestContext, i: None):
    return s.auth.refresh_token(ctx)


@mutation("auth.changePassword", auth_schema.ChangePasswordInput)
def _auth_change_password(s: Services, ctx: RequestContext, i: auth_schema.ChangePasswordInput):
    return s.auth.change_password(ctx, i)


@mutation("auth.forgotPassword", auth_schema.ForgotPasswordInput, auth=False)
def _forgot(s: Services, ctx: RequestContext, i: auth_schema.ForgotPasswordInput):
    return s.auth.forgot_password(i)


@mutation("auth.resetPassword", auth_schema.ResetPasswordInput, auth=False)
def _reset(s: Services, ctx: RequestContext, i: auth_schema.ResetPasswordInput):
    return s.auth.reset_password(i)


@mutation("auth.logout")
def _logout(s: Services, ctx: RequestContext, i: None):
    return s.auth.logout(ctx)


# user

@query("user.getProfile")
def _user_profile(s: Services, ctx: RequestContext, i: None):
    return s.users.get_profile(ctx)


@mutation("user.updateProfile", user.ProfilePatch)
def _update_profile(s: Services, ctx: RequestContext, i: user.ProfilePatch):
    return s.users.update_profile(ctx, i)


@mutation("user.changePassword", auth_schema.ChangePasswordInput)
def _user_change_password(s: Services, ctx: RequestContext, i: auth_schema.ChangePasswordInput):
    return s.users.change_password(ctx, i)


@query("user.getPreferences")
def _get_preferences(s: Services, ctx: RequestContext, i: None):
    return s.users.get_preferences(ctx)


@mutation("user.updatePreferences", user.PreferencesPatch)
def _update_preferences(s: Services, ctx: RequestContext, i: user.PreferencesPatch):
    return s.users.update_preferences(ctx, i)


# project

@mutation("project.create", project.ProjectCreate)
def _project_create(s: Services, ctx: RequestContext, i: project.ProjectCreate):
    return s.projects.create(ctx, i)


@query("project.list")
def _project_list(s: Services, ctx: RequestContext, i: None):
    return s.projects.list_mine(ctx)


@query("project.getById", IdInput)
def _project_get(s: Services, ctx: RequestContext, i: IdInput):
    return s.projects.get_by_id(ctx, i.id)


@mutation("project.update", project.ProjectUpdateInput)
def _project_update(s: Services, ctx: RequestContext, i: project.ProjectUpdateInput):
    return s.projects.update(ctx, i.id, i.data)


@mutation("project.delete", IdInput)
def _project_delete(s: Services, ctx: RequestContext, i: IdInput):
    return s.projects.delete(ctx, i.id)


@mutation("project.addCollaborator", project.AddCollaboratorInput)
def _add_collaborator(s: Services, ctx: RequestContext, i: project.AddCollaboratorInput):
    return s.projects.add_collaborator(ctx, i)


@mutation("project.removeCollaborator", project.RemoveCollaboratorInput)
def _remove_collaborator(s: Services, ctx: RequestContext, i: project.RemoveCollaboratorInput):
    return s.projects.remove_collaborator(ctx, i)


@mutation("project.updateCollaboratorRole", project.UpdateCollaboratorRoleInput)
def _collaborator_role(s: Services, ctx: RequestContext, i: project.UpdateCollaboratorRoleInput):
    return s.projects.update_collaborator_role(ctx, i)


# project-scoped resources sharing the create/list/getById/update/delete shape

def _register_crud(resource: str, attr: str, create_model: type[BaseModel], update_model: type[BaseModel]) -> None:
    def service(s: Services):
        return getattr(s, attr)

    mutation(f"{resource}.create", create_model)(lambda s, ctx, i: service(s).create(ctx, i))
    query(f"{resource}.list", ProjectIdInput)(lambda s, ctx, i: service(s).list(ctx, i.project_id))
    query(f"{resource}.getById", ProjectScopedId)(lambda s, ctx, i: service(s).get_by_id(ctx, i.project_id, i.id))
    mutation(f"{resource}.update", update_model)(lambda s, ctx, i: service(s).update(ctx, i.project_id, i.id, i.data))
    mutation(f"{resource}.delete", ProjectScopedId)(lambda s, ctx, i: service(s).delete(ctx, i.project_id, i.id))


_register_crud("character", "characters", character.CharacterCreate, character.CharacterUpdateInput)
_register_crud("plot", "plots", plot.PlotCreate, plot.PlotUpdateInput)
_register_crud("chapter", "chapters", chapter.ChapterCreate, chapter.ChapterUpdateInput)
_register_crud("setting", "story_settings", setting.SettingCreate, setting.SettingUpdateInput)
_register_crud("object", "objects", story_object.ObjectCreate, story_object.ObjectUpdateInput)


# character

@query("character.getRelationships", ProjectScopedId)
def _relationships(s: Services, ctx: RequestContext, i: ProjectScopedId):
    return s.characters.get_relationships(ctx, i.project_id, i.id)


@mutation("character.addRelationship", character.AddRelationshipInput)
def _add_relationship(s: Services, ctx: RequestContext, i: character.AddRelationshipInput):
    return s.characters.add_relationship(ctx, i)


@mutation("character.updateRelationship", character.UpdateRelationshipInput)
def _update_relationship(s: Services, ctx: RequestContext, i: character.UpdateRelationshipInput):
    return s.characters.update_relationship(ctx, i)


@mutation("character.removeRelationship", character.RemoveRelationshipInput)
def _remove_relationship(s: Services, ctx: RequestContext, i: character.RemoveRelationshipInput):
    return s.characters.remove_relationship(ctx, i)


@mutation("character.addPossession", character.PossessionInput)
def _add_possession(s: Services, ctx: RequestContext, i: character.PossessionInput):
    return s.characters.add_possession(ctx, i)


@mutation("character.removePossession", character.PossessionInput)
def _remove_possession(s: Services, ctx: RequestContext, i: character.PossessionInput):
    return s.characters.remove_possession(ctx, i)


# plot

@mutation("plot.addPlotPoint", plot.AddPlotPointInput)
def _add_point(s: Services, ctx: RequestContext, i: plot.AddPlotPointInput):
    return s.plots.add_plot_point(ctx, i)


@mutation("plot.updatePlotPoint", plot.UpdatePlotPointInput)
def _update_point(s: Services, ctx: RequestContext, i: plot.UpdatePlotPointInput):
    return s.plots.update_plot_point(ctx, i)


@mutation("plot.deletePlotPoint", plot.DeletePlotPointInput)
def _delete_point(s: Services, ctx: RequestContext, i: plot.DeletePlotPointInput):
    return s.plots.delete_plot_point(ctx, i)


@mutation("plot.reorderPlotPoints", plot.ReorderPlotPointsInput)
def _reorder_points(s: Services, ctx: RequestContext, i: plot.ReorderPlotPointsInput):
    return s.plots.reorder_plot_points(ctx, i)


# chapter

@mutation("chapter.updateContent", chapter.UpdateContentInput)
def _update_content(s: Services, ctx: RequestContext, i: chapter.UpdateContentInput):
    return s.chapters.update_content(ctx, i)


@mutation("chapter.reorder", chapter.ReorderChaptersInput)
def _reorder_chapters(s: Services, ctx: RequestContext, i: chapter.ReorderChaptersInput):
    return s.chapters.reorder(ctx, i)


@mutation("chapter.addEdit", chapter.AddEditInput)
def _add_edit(s: Services, ctx: RequestContext, i: chapter.AddEditInput):
    return s.chapters.add_edit(ctx, i)


# export

@mutation("export.create", export.ExportCreate)
def _export_create(s: Services, ctx: RequestContext, i: export.ExportCreate):
    return s.exports.create(ctx, i)


@query("export.list", ProjectIdInput)
def _export_list(s: Services, ctx: RequestContext, i: ProjectIdInput):
    return s.exports.list(ctx, i.project_id)


@query("export.getById", ProjectScopedId)
def _export_get(s: Services, ctx: RequestContext, i: ProjectScopedId):
    return s.exports.get_by_id(ctx, i.project_id, i.id)


@mutation("export.download", ProjectScopedId)
def _export_download(s: Services, ctx: RequestContext, i: ProjectScopedId):
    return s.exports.download(ctx, i.project_id, i.id)


@mutation("export.delete", ProjectScopedId)
def _export_delete(s: Services, ctx: RequestContext, i: ProjectScopedId):
    return s.exports.delete(ctx, i.project_id, i.id)


# ai

@mutation("ai.generateContent", ai.GenerateContentBody)
async def _generate_content(s: Services, ctx: RequestContext, i: ai.GenerateContentBody):
    return await s.ai.generate_content(ctx, i.root)


@mutation("ai.generateCharacter", ai.CharacterRequest)
async def _generate_character(s: Services, ctx: RequestContext, i: ai.CharacterRequest):
    return await s.ai.generate_character(ctx, i)


@mutation("ai.generatePlot", ai.PlotRequest)
async def _generate_plot(s: Services, ctx: RequestContext, i: ai.PlotRequest):
    return await s.ai.generate_plot(ctx, i)


@mutation("ai.generateImage", ai.ImageRequest)
async def _generate_image(s: Services, ctx: RequestContext, i: ai.ImageRequest):
    return await s.ai.generate_image(ctx, i)


@mutation("ai.saveGeneration", ai.GenerationIdInput)
def _save_generation(s: Services, ctx: RequestContext, i: ai.GenerationIdInput):
    return s.ai.save_generation(ctx, i.generation_id)


@mutation("ai.toggleSaved", ai.GenerationIdInput)
def _toggle_saved(s: Services, ctx: RequestContext, i: ai.GenerationIdInput):
    return s.ai.toggle_saved(ctx, i.generation_id)


@query("ai.listByProject", ai.GenerationListInput)
def _list_generations(s: Services, ctx: RequestContext, i: ai.GenerationListInput):
    return s.ai.list_by_project(ctx, i.project_id, i.saved_only)


@query("ai.getById", ai.GenerationIdInput)
def _get_generation(s: Services, ctx: RequestContext, i: ai.GenerationIdInput):
    return s.ai.get_by_id(ctx, i.generation_id)


@mutation("ai.delete", ai.GenerationIdInput)
def _delete_generation(s: Services, ctx: RequestContext, i: ai.GenerationIdInput):
    return s.ai.delete(ctx, i.generation_id)
