"""Procedure-call adapter over HTTP.

``POST /api/rpc`` takes ``{"procedure": ..., "input": ...}`` or a list of them
and answers each with ``{"result": {"data": ...}}`` or ``{"error": {...}}``.
Queries may also be issued as ``GET /api/rpc/<procedure>?input=<json>``.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storyforge.context import RequestContext
from storyforge.deps import Services, get_context, get_services
from storyforge.errors import BadRequestError, InternalError, NotFoundError, StoryForgeError
from storyforge.logs import get_logger
from storyforge.procedures import PROCEDURES

logger = get_logger(__name__)

router = APIRouter(prefix="/api/rpc", tags=["rpc"])


def _failure(exc: StoryForgeError) -> tuple[int, dict[str, Any]]:
    return exc.status, {"error": exc.to_dict()}


async def invoke(
    services: Services,
    ctx: RequestContext,
    name: Any,
    raw: Any,
    via_get: bool = False,
) -> tuple[int, dict[str, Any]]:
    if not isinstance(name, str) or not name:
        return _failure(BadRequestError("Missing procedure name"))
    proc = PROCEDURES.get(name)
    if proc is None:
        return _failure(NotFoundError(f"Unknown procedure: {name}"))
    if via_get and proc.kind != "query":
        return _failure(BadRequestError(f"{name} is a mutation and must be called with POST"))
    try:
        data = await proc.call(services, ctx, raw)
    except StoryForgeError as exc:
        logger.info("procedure rejected | procedure=%s | code=%s | message=%s", name, exc.code, exc.message)
        return _failure(exc)
    except Exception:
        logger.exception("procedure failed | procedure=%s", name)
        return _failure(InternalError("Internal server error"))
    return 200, {"result": {"data": data}}


@router.post("")
async def call_procedures(
    request: Request,
    services: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    try:
        body = await request.json()
    except ValueError:
        status, payload = _failure(BadRequestError("Request body must be JSON"))
        return JSONResponse(status_code=status, content=payload)

    if isinstance(body, list):
        results = []
        for item in body:
            if not isinstance(item, dict):
                results.append(_failure(BadRequestError("Batch items must be objects"))[1])
                continue
            _, payload = await invoke(services, ctx, item.get("procedure"), item.get("input"))
            results.append(payload)
        return JSONResponse(status_code=200, content=results)

    if not isinstance(body, dict):
        status, payload = _failure(BadRequestError("Request body must be an object or a list"))
        return JSONResponse(status_code=status, content=payload)

    status, payload = await invoke(services, ctx, body.get("procedure"), body.get("input"))
    return JSONResponse(status_code=status, content=payload)


@router.get("/{procedure}")
async def call_query(
    procedure: str,
    input: str | None = None,
    services: Services = Depends(get_services),
    ctx: RequestContext = Depends(get_context),
):
    raw = None
    if input:
        try:
            raw = json.loads(input)
        except ValueError:
            status, payload = _failure(BadRequestError("input must be JSON"))
            return JSONResponse(status_code=status, content=payload)
    status, payload = await invoke(services, ctx, procedure, raw, via_get=True)
    return JSONResponse(status_code=status, content=payload)
