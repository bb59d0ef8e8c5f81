"""Video job submit / status / cancel routes."""
from __future__ import annotations

from litestar import get, post
from litestar.exceptions import NotFoundException

from karigar.videogen import build_request
from schemas.media import VideoRequest
from webui.backend.deps import ConfigDep, ProviderDep
from webui.backend.job_manager import job_manager
from webui.backend.models import JobCreated, JobStatus


@post("/api/videos")
async def create_video_job(data: VideoRequest, provider: ProviderDep, config: ConfigDep) -> JobCreated:
    # Photo size/type are checked here so bad uploads fail before a job exists
    job = build_request(data, config)
    return JobCreated(job_id=job_manager.submit(job, provider, config))


@get("/api/videos/{job_id:str}")
async def get_video_job(job_id: str) -> JobStatus:
    status = job_manager.status(job_id)
    if status is None:
        raise NotFoundException(f"Job {job_id!r} not found")
    return status


@post("/api/videos/{job_id:str}/cancel")
async def cancel_video_job(job_id: str) -> dict:
    if not job_manager.cancel(job_id):
        raise NotFoundException(f"Job {job_id!r} not found")
    return {"ok": True, "job_id": job_id}
