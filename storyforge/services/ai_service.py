from __future__ import annotations

from typing import Any

from starlette.concurrency import run_in_threadpool

from storyforge.context import RequestContext
from storyforge.errors import InternalError, NotFoundError
from storyforge.logs import get_logger
from storyforge.models.ai import AIGeneration
from storyforge.schemas.ai import CharacterRequest, GenerationBase, ImageRequest, PlotRequest
from storyforge.services.access import check_access
from storyforge.services.llm_gateway import LLMError, LLMGateway
from storyforge.services.prompts import MAX_TOKENS, TEMPERATURE, build_messages
from storyforge.storage.doc_store import DocStore, now_iso

logger = get_logger(__name__)


class AIService:
    def __init__(self, store: DocStore, gateway: LLMGateway) -> None:
        self.store = store
        self.gateway = gateway

    def _load(self, generation_id: str) -> AIGeneration:
        doc = self.store.get(AIGeneration.COLLECTION, generation_id)
        if doc is None:
            raise NotFoundError("Generation not found")
        return AIGeneration.from_doc(doc)

    def _check_parent(self, project_id: str, parent_id: str | None) -> None:
        if parent_id is None:
            return
        doc = self.store.get(AIGeneration.COLLECTION, parent_id)
        if doc is None or doc.get("project_id") != project_id:
            raise NotFoundError("Parent generation not found")

    def _record(
        self,
        user_id: str,
        req: GenerationBase | ImageRequest,
        task: str,
        prompt: str,
        content: str,
        model: str,
        usage: dict[str, int],
    ) -> AIGeneration:
        generation = AIGeneration(
            project_id=req.project_id,
            user_id=user_id,
            task=task,
            prompt=prompt,
            request_params=req.model_dump(mode="json", exclude_none=True, exclude={"project_id", "parent_id"}),
            response_content=content,
            metadata={"model": model, "timestamp": now_iso(), "token_usage": usage},
            parent_id=getattr(req, "parent_id", None),
        )
        self.store.insert(AIGeneration.COLLECTION, generation.to_doc())
        return generation

    def _authorize(self, ctx: RequestContext, project_id: str, parent_id: str | None = None) -> str:
        user_id = ctx.require_user()
        check_access(self.store, ctx, project_id, "write")
        self._check_parent(project_id, parent_id)
        return user_id

    async def generate_content(self, ctx: RequestContext, req: GenerationBase) -> dict[str, Any]:
        user_id = await run_in_threadpool(self._authorize, ctx, req.project_id, req.parent_id)
        task = req.task
        messages = build_messages(req)
        temperature = req.temperature if req.temperature is not None else TEMPERATURE[task]
        max_tokens = req.max_tokens if req.max_tokens is not None else MAX_TOKENS[task]
        try:
            out = await self.gateway.chat_complete(messages, temperature, max_tokens)
        except LLMError as exc:
            logger.error("ai generation failed | task=%s project_id=%s error=%s", task, req.project_id, exc)
            raise InternalError("Failed to generate AI content", cause=exc) from exc
        generation = await run_in_threadpool(
            self._record, user_id, req, task, messages[-1]["content"], out["text"], out["model"], out["usage"]
        )
        logger.info("ai generation stored | id=%s task=%s tokens=%s", generation.id, task, out["usage"]["total"])
        return {
            "id": generation.id,
            "content": generation.response_content,
            "metadata": generation.metadata.model_dump(mode="json"),
        }

    async def generate_character(self, ctx: RequestContext, req: CharacterRequest) -> dict[str, Any]:
        return await self.generate_content(ctx, req)

    async def generate_plot(self, ctx: RequestContext, req: PlotRequest) -> dict[str, Any]:
        return await self.generate_content(ctx, req)

    async def generate_image(self, ctx: RequestContext, req: ImageRequest) -> dict[str, Any]:
        user_id = await run_in_threadpool(self._authorize, ctx, req.project_id)
        try:
            out = await self.gateway.generate_image(req.prompt, req.size)
        except LLMError as exc:
            logger.error("ai image generation failed | project_id=%s error=%s", req.project_id, exc)
            raise InternalError("Failed to generate image", cause=exc) from exc
        no_usage = {"prompt": 0, "completion": 0, "total": 0}
        generation = await run_in_threadpool(self._record, user_id, req, "image", req.prompt, out["url"], out["model"], no_usage)
        return {"id": generation.id, "url": out["url"], "metadata": generation.metadata.model_dump(mode="json")}

    def _set_saved(self, ctx: RequestContext, generation_id: str, saved: bool | None) -> AIGeneration:
        ctx.require_user()
        generation = self._load(generation_id)
        check_access(self.store, ctx, generation.project_id, "write")
        value = (not generation.is_saved) if saved is None else saved
        doc = self.store.update_fields(AIGeneration.COLLECTION, generation_id, {"is_saved": value, "updated_at": now_iso()})
        if doc is None:
            raise NotFoundError("Generation not found")
        return AIGeneration.from_doc(doc)

    def save_generation(self, ctx: RequestContext, generation_id: str) -> AIGeneration:
        return self._set_saved(ctx, generation_id, True)

    def toggle_saved(self, ctx: RequestContext, generation_id: str) -> AIGeneration:
        return self._set_saved(ctx, generation_id, None)

    def list_by_project(self, ctx: RequestContext, project_id: str, saved_only: bool = False) -> list[AIGeneration]:
        check_access(self.store, ctx, project_id, "read")
        flt: dict[str, Any] = {"project_id": project_id}
        if saved_only:
            flt["is_saved"] = True
        docs = self.store.find(AIGeneration.COLLECTION, flt, sort=[("created_at", -1)])
        return [AIGeneration.from_doc(d) for d in docs]

    def get_by_id(self, ctx: RequestContext, generation_id: str) -> AIGeneration:
        ctx.require_user()
        generation = self._load(generation_id)
        check_access(self.store, ctx, generation.project_id, "read")
        return generation

    def delete(self, ctx: RequestContext, generation_id: str) -> dict[str, Any]:
        ctx.require_user()
        generation = self._load(generation_id)
        check_access(self.store, ctx, generation.project_id, "write")
        self.store.delete_one(AIGeneration.COLLECTION, {"id": generation_id})
        return {"success": True, "id": generation_id}
