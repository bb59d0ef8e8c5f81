"""Pydantic request/response models specific to the Karigar Web API.

Flow inputs and outputs live in the top-level ``schemas`` package.
"""
from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel


class JobStatus(BaseModel):
    job_id: str
    state: Literal["queued", "running", "done", "cancelled", "failed"]
    started_at: float | None = None
    finished_at: float | None = None
    # Server-side proxy path for the finished video; the provider URI stays private
    content_url: str | None = None
    mime_type: str | None = None
    error: str | None = None


class JobCreated(BaseModel):
    job_id: str


class ErrorDetail(BaseModel):
    error: str
    field: Optional[str] = None


class ConfigPayload(BaseModel):
    gemini_api_key: str = ""
    output_dir: str = "output"
    text_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-4.0-fast-generate-001"
    image_edit_model: str = "gemini-2.5-flash-image-preview"
    video_model: str = "veo-2.0-generate-001"
    poll_interval: float = 5.0
    video_timeout: float | None = 600.0
