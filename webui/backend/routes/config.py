"""Config read/write routes."""
from __future__ import annotations

from pathlib import Path

from litestar import get, post
from litestar.datastructures import State

from karigar.config import Config
from webui.backend.models import ConfigPayload


@get("/api/config")
async def get_config() -> ConfigPayload:
    cfg = Config.load()
    return ConfigPayload(
        # Secret keys are masked to first/last 4 chars
        gemini_api_key=_mask(cfg.gemini_api_key),
        output_dir=str(cfg.output_dir),
        text_model=cfg.text_model,
        image_model=cfg.image_model,
        image_edit_model=cfg.image_edit_model,
        video_model=cfg.video_model,
        poll_interval=cfg.poll_interval,
        video_timeout=cfg.video_timeout,
    )


@post("/api/config")
async def save_config(data: ConfigPayload, state: State) -> dict:
    cfg = Config.load()
    # Only update secrets if the user sent a non-masked value
    if data.gemini_api_key and "…" not in data.gemini_api_key:
        cfg.gemini_api_key = data.gemini_api_key
    cfg.output_dir = Path(data.output_dir)
    cfg.text_model = data.text_model
    cfg.image_model = data.image_model
    cfg.image_edit_model = data.image_edit_model
    cfg.video_model = data.video_model
    cfg.poll_interval = data.poll_interval
    cfg.video_timeout = data.video_timeout
    cfg.save()
    # Rebuild config and provider on next request
    state.config = None
    state.provider = None
    return {"ok": True}


def _mask(value: str) -> str:
    if not value:
        return ""
    return value[:4] + "…" + value[-4:] if len(value) > 8 else "…"
