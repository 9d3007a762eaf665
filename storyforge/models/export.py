from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from storyforge.models.base import Record, Sub
from storyforge.storage.doc_store import now_iso

ExportFormat = Literal["pdf", "epub", "docx", "markdown", "html"]
ExportStatus = Literal["Pending", "Processing", "Completed", "Failed"]
PageSize = Literal["A4", "A5", "Letter", "Legal", "Custom"]
JobStatus = Literal["Pending", "Running", "Done", "Failed"]


class ExportConfiguration(Sub):
    include_chapters: list[str] = Field(default_factory=list)
    include_title_page: bool = True
    include_table_of_contents: bool = True
    include_character_list: bool = False
    include_setting_descriptions: bool = False
    custom_css: str | None = None
    template_id: str | None = None
    page_size: PageSize = "A4"
    font_family: str = "Times New Roman"
    font_size: int = Field(default=12, ge=6, le=72)


class Export(Record):
    COLLECTION: ClassVar[str] = "exports"

    project_id: str
    user_id: str
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    format: ExportFormat
    configuration: ExportConfiguration = Field(default_factory=ExportConfiguration)
    status: ExportStatus = "Pending"
    file_url: str | None = None
    error_message: str | None = None
    completed_at: str | None = None
    file_size: int | None = None
    download_count: int = 0


class ExportJob(Record):
    """Background work item that drives one Export through its status machine."""

    COLLECTION: ClassVar[str] = "export_jobs"

    export_id: str
    project_id: str
    status: JobStatus = "Pending"
    attempts: int = 0
    run_after: str = Field(default_factory=now_iso)
    started_at: str | None = None
    finished_at: str | None = None
    error: str | None = None
