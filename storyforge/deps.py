from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from storyforge.config import Settings
from storyforge.context import RequestContext
from storyforge.jobs.export_worker import ExportWorker
from storyforge.services.ai_service import AIService
from storyforge.services.auth_service import AuthService
from storyforge.services.chapter_service import ChapterService
from storyforge.services.character_service import CharacterService
from storyforge.services.export_service import ExportService
from storyforge.services.llm_gateway import LLMGateway
from storyforge.services.object_service import ObjectService
from storyforge.services.plot_service import PlotService
from storyforge.services.project_service import ProjectService
from storyforge.services.setting_service import SettingService
from storyforge.services.user_service import UserService
from storyforge.storage.doc_store import DocStore


@dataclass
class Services:
    store: DocStore
    settings: Settings
    auth: AuthService
    users: UserService
    projects: ProjectService
    characters: CharacterService
    plots: PlotService
    chapters: ChapterService
    story_settings: SettingService
    objects: ObjectService
    exports: ExportService
    ai: AIService
    worker: ExportWorker


def build_services(store: DocStore, settings: Settings, gateway: LLMGateway | None = None) -> Services:
    auth = AuthService(store, settings)
    return Services(
        store=store,
        settings=settings,
        auth=auth,
        users=UserService(store, auth),
        projects=ProjectService(store),
        characters=CharacterService(store),
        plots=PlotService(store),
        chapters=ChapterService(store),
        story_settings=SettingService(store),
        objects=ObjectService(store),
        exports=ExportService(store, delay_s=settings.export_delay_s),
        ai=AIService(store, gateway or LLMGateway.from_settings(settings)),
        worker=ExportWorker(store, poll_interval_s=settings.export_poll_interval_s),
    )


def bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_context(request: Request, services: Services = Depends(get_services)) -> RequestContext:
    return services.auth.authenticate(bearer_token(request.headers.get("Authorization")))
