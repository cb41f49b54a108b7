import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from buildingmap import DatasetLoader
from buildingmap.render import generate_glb

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    result: Optional[dict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task: Optional[asyncio.Task] = field(default=None, repr=False)


def _safe_name(name: str) -> str:
    """Derive a filename-safe string from a display name."""
    return (
        name.lower()
        .replace(" ", "-")
        .replace(",", "")
        .replace("'", "")
        .replace("/", "-")
    )


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    async def run_render(self, job: Job, loader: DatasetLoader, name: str) -> None:
        """Load the dataset (once) and render it, updating *job* with progress."""
        try:
            job.status = JobStatus.running
            job.progress = 5.0
            job.message = "Loading buildings..."

            dataset = await loader.load()
            output_filename = f"{_safe_name(name)}.glb"

            def _update_progress(pct: float, msg: str) -> None:
                job.progress = pct
                job.message = msg

            glb_path = await asyncio.to_thread(
                generate_glb,
                dataset,
                output_filename,
                progress_callback=_update_progress,
            )

            job.progress = 100.0
            job.message = "Render complete"
            job.status = JobStatus.completed
            job.result = {
                "glb_path": glb_path,
                "model_url": f"/output/{output_filename}",
                "buildings": dataset.num_rows,
            }

        except Exception as exc:
            logger.exception("Render failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            job.message = f"Render failed: {exc}"


# Singleton instance used across the application
job_manager = JobManager()
