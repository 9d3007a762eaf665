from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

ObjectId = Annotated[str, StringConstraints(pattern=r"^[0-9a-f]{32}$")]


class Input(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Patch(Input):
    """Every field optional; only the fields a caller sets are applied."""


class IdInput(Input):
    id: str


class ProjectIdInput(Input):
    project_id: str


class ProjectScopedId(Input):
    project_id: str
    id: str
