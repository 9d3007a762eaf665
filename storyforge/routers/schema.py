from fastapi import APIRouter

from storyforge.errors import NotFoundError
from storyforge.procedures import PROCEDURES

router = APIRouter(prefix="/api/schema", tags=["schema"])


def _describe(name: str) -> dict:
    proc = PROCEDURES[name]
    return {"name": proc.name, "kind": proc.kind, "auth": proc.auth, "input": proc.input_schema()}


@router.get("/procedures")
def list_procedures():
    return {"procedures": [_describe(name) for name in sorted(PROCEDURES)]}


@router.get("/procedures/{name}")
def procedure_schema(name: str):
    if name not in PROCEDURES:
        raise NotFoundError(f"Unknown procedure: {name}")
    return _describe(name)
