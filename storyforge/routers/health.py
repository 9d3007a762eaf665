from fastapi import APIRouter

from storyforge import __version__

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health():
    return {"ok": True, "version": __version__}
