import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from buildingmap import DatasetLoader

from backend.dataset import get_loader
from backend.jobs import job_manager
from backend.models import JobResponse, RenderRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/render", tags=["render"])


@router.post("", response_model=JobResponse)
async def start_render(request: RenderRequest, loader: DatasetLoader = Depends(get_loader)):
    """Start a GLB render of the building dataset.

    The heavy lifting runs in a background task; the caller receives a
    job ID immediately and can poll ``/status/{job_id}`` for progress.
    """
    job = job_manager.create_job()
    job.task = asyncio.create_task(job_manager.run_render(job, loader, request.name))

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )


@router.get("/status/{job_id}", response_model=JobResponse)
async def get_render_status(job_id: str):
    """Poll the status of a running or completed render job."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )
