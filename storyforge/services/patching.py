from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storyforge.errors import from_pydantic

M = TypeVar("M", bound=BaseModel)


def deep_merge(base: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def patch_changes(patch: BaseModel) -> dict[str, Any]:
    return patch.model_dump(mode="json", exclude_unset=True, exclude_none=True)


def apply_patch(entity: M, patch: BaseModel) -> M:
    """Return a copy of ``entity`` with the fields the caller set on ``patch`` merged in.

    Omitted fields stay untouched, nested groups merge key by key and lists are replaced.
    The merged result is validated against the entity's own model.
    """
    changes = patch_changes(patch)
    if not changes:
        return entity.model_copy(deep=True)
    merged = deep_merge(entity.model_dump(mode="json"), changes)
    try:
        return type(entity).model_validate(merged)
    except PydanticValidationError as exc:
        raise from_pydantic(exc) from exc
