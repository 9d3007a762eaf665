from __future__ import annotations

from pydantic import Field

from storyforge.models.export import ExportConfiguration, ExportFormat
from storyforge.schemas.common import Input


class ExportFields(Input):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    format: ExportFormat
    configuration: ExportConfiguration = Field(default_factory=ExportConfiguration)


class ExportCreate(ExportFields):
    project_id: str
