from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

from storyforge.logs import get_logger
from storyforge.models.chapter import Chapter
from storyforge.models.export import Export, ExportJob
from storyforge.storage.doc_store import DocStore, now_iso

logger = get_logger(__name__)

PLACEHOLDER_URL = "https://placeholder.url/{id}.{format}"


def enqueue_export(store: DocStore, export: Export, delay_s: float = 0.0) -> ExportJob:
    run_after = datetime.now(timezone.utc) + timedelta(seconds=max(0.0, delay_s))
    job = ExportJob(
        export_id=export.id,
        project_id=export.project_id,
        run_after=run_after.isoformat(timespec="microseconds"),
    )
    store.insert(ExportJob.COLLECTION, job.to_doc())
    logger.info("export job queued | job_id=%s export_id=%s delay=%.1fs", job.id, export.id, delay_s)
    return job


class ExportWorker:
    """Polls export job records and drives each Export Pending -> Processing -> Completed | Failed."""

    def __init__(self, store: DocStore, poll_interval_s: float = 1.0) -> None:
        self.store = store
        self.poll_interval_s = poll_interval_s
        self._task: asyncio.Task | None = None

    def recover(self) -> int:
        """Return jobs left Running by a previous process to the queue."""
        stale = self.store.find(ExportJob.COLLECTION, {"status": "Running"})
        for doc in stale:
            self.store.update_fields(ExportJob.COLLECTION, doc["id"], {"status": "Pending", "updated_at": now_iso()})
        if stale:
            logger.warning("recovered interrupted export jobs | count=%d", len(stale))
        return len(stale)

    def claim_due(self) -> list[ExportJob]:
        now = now_iso()
        claimed: list[ExportJob] = []
        with self.store.transaction():
            due = self.store.find(
                ExportJob.COLLECTION,
                {"status": "Pending", "run_after": {"$lte": now}},
                sort=[("run_after", 1)],
            )
            for doc in due:
                updated = self.store.update_fields(
                    ExportJob.COLLECTION,
                    doc["id"],
                    {"status": "Running", "attempts": doc.get("attempts", 0) + 1, "started_at": now, "updated_at": now},
                )
                claimed.append(ExportJob.from_doc(updated))
        return claimed

    def _finish_job(self, job: ExportJob, status: str, error: str | None = None) -> None:
        stamp = now_iso()
        self.store.update_fields(
            ExportJob.COLLECTION,
            job.id,
            {"status": status, "error": error, "finished_at": stamp, "updated_at": stamp},
        )
        if status == "Done":
            logger.info("export job done | job_id=%s export_id=%s", job.id, job.export_id)
        else:
            logger.info("export job failed | job_id=%s export_id=%s error=%s", job.id, job.export_id, error)

    def _render_size(self, export: Export) -> int:
        ids = export.configuration.include_chapters
        if not ids:
            return 0
        docs = self.store.find(
            Chapter.COLLECTION,
            {"project_id": export.project_id, "id": {"$in": ids}},
            sort=[("position", 1)],
        )
        return sum(len((d.get("title", "") + "\n" + d.get("content", "")).encode("utf-8")) for d in docs)

    def process(self, job: ExportJob) -> str:
        doc = self.store.get(Export.COLLECTION, job.export_id)
        if doc is None:
            self._finish_job(job, "Failed", "Export no longer exists")
            return "Failed"
        export = Export.from_doc(doc)
        if self.store.update_fields(Export.COLLECTION, export.id, {"status": "Processing", "updated_at": now_iso()}) is None:
            self._finish_job(job, "Failed", "Export no longer exists")
            return "Failed"
        try:
            size = self._render_size(export)
        except Exception as exc:
            logger.exception("export rendering failed | export_id=%s", export.id)
            self.store.update_fields(
                Export.COLLECTION,
                export.id,
                {"status": "Failed", "error_message": str(exc), "updated_at": now_iso()},
            )
            self._finish_job(job, "Failed", str(exc))
            return "Failed"
        stamp = now_iso()
        completed: dict[str, Any] = {
            "status": "Completed",
            "file_url": PLACEHOLDER_URL.format(id=export.id, format=export.format),
            "file_size": size,
            "completed_at": stamp,
            "error_message": None,
            "updated_at": stamp,
        }
        if self.store.update_fields(Export.COLLECTION, export.id, completed) is None:
            self._finish_job(job, "Failed", "Export no longer exists")
            return "Failed"
        self._finish_job(job, "Done")
        return "Done"

    def _abort(self, job: ExportJob, error: str) -> None:
        self.store.update_fields(
            Export.COLLECTION,
            job.export_id,
            {"status": "Failed", "error_message": error, "updated_at": now_iso()},
        )
        self._finish_job(job, "Failed", error)

    def run_once(self) -> int:
        jobs = self.claim_due()
        for job in jobs:
            try:
                self.process(job)
            except Exception as exc:
                logger.exception("export job crashed | job_id=%s export_id=%s", job.id, job.export_id)
                try:
                    self._abort(job, str(exc) or type(exc).__name__)
                except Exception:
                    # left Running; recover() requeues it on the next start
                    logger.exception("could not mark export job failed | job_id=%s", job.id)
        return len(jobs)

    async def run_forever(self) -> None:
        await asyncio.to_thread(self.recover)
        while True:
            try:
                await asyncio.to_thread(self.run_once)
            except Exception:
                logger.exception("export worker iteration failed")
            await asyncio.sleep(self.poll_interval_s)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())
            logger.info("export worker started | poll_interval=%.2fs", self.poll_interval_s)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("export worker stopped")
