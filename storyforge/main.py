"""StoryForge API application.

``create_app`` wires settings, the document store, services and routers into a
FastAPI app. uvicorn serves it in factory mode:
``uvicorn storyforge.main:create_app --factory``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storyforge.config import Settings
from storyforge.deps import build_services
from storyforge.errors import InternalError, StoryForgeError, ValidationError, field_messages
from storyforge.logs import get_logger, init_logging
from storyforge.routers import (
    ai,
    auth,
    chapters,
    characters,
    exports,
    health,
    objects,
    plots,
    projects,
    rpc,
    schema,
    settings,
    users,
)
from storyforge.services.llm_gateway import LLMGateway
from storyforge.storage.connection import open_store_with_retry

logger = get_logger(__name__)


def _error_response(exc: StoryForgeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status, content={"error": exc.to_dict()})


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoryForgeError)
    async def handle_storyforge_error(request: Request, exc: StoryForgeError):
        if exc.status >= 500:
            logger.error("request failed | path=%s | code=%s | message=%s", request.url.path, exc.code, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError("Invalid input", field_messages(list(exc.errors()))))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("unhandled error | path=%s", request.url.path)
        return _error_response(InternalError("Internal server error"))


def create_app(cfg: Settings | None = None, gateway: LLMGateway | None = None) -> FastAPI:
    cfg = cfg or Settings.load()
    init_logging(cfg.log_level, cfg.log_format)

    store = open_store_with_retry(
        cfg.data_dir,
        attempts=cfg.store_connect_attempts,
        base_s=cfg.store_connect_backoff_s,
        max_s=cfg.store_connect_backoff_max_s,
    )
    services = build_services(store, cfg, gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if cfg.export_worker_enabled:
            services.worker.start()
        try:
            yield
        finally:
            await services.worker.stop()

    app = FastAPI(title="StoryForge API", lifespan=lifespan)
    app.state.settings = cfg
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(schema.router)
    app.include_router(rpc.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(projects.router)
    app.include_router(characters.router)
    app.include_router(plots.router)
    app.include_router(chapters.router)
    app.include_router(settings.router)
    app.include_router(objects.router)
    app.include_router(exports.router)
    app.include_router(ai.router)

    logger.info("app created | data_dir=%s | ai_provider=%s", cfg.data_dir, cfg.ai_provider)
    return app

