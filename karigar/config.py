"""Settings and API key management."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR = Path.home() / ".karigar"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Models
TEXT_MODEL = "gemini-2.5-flash"
IMAGE_MODEL = "imagen-4.0-fast-generate-001"
# Used instead of IMAGE_MODEL when the artisan supplies a reference photo
IMAGE_EDIT_MODEL = "gemini-2.5-flash-image-preview"
VIDEO_MODEL = "veo-2.0-generate-001"

# Video generation
VIDEO_DURATION = 5          # seconds, CLI default
POLL_INTERVAL = 5.0         # seconds between operation status checks
POLL_BACKOFF = 1.0          # 1.0 = fixed interval
POLL_MAX_INTERVAL = 30.0
VIDEO_TIMEOUT = 600.0       # give up on a Veo job after 10 minutes

# Uploads
MAX_IMAGE_BYTES = 4 * 1024 * 1024
MAX_MEDIA_BYTES = 20 * 1024 * 1024  # inline request limit for audio/video

# Story translation fan-out
TRANSLATE_WORKERS = 4

QR_CODE_API = "https://api.qrserver.com/v1/create-qr-code/"
QR_CODE_SIZE = 200


@dataclass
class Config:
    gemini_api_key: str = ""
    output_dir: Path = field(default_factory=lambda: Path("output"))
    text_model: str = TEXT_MODEL
    image_model: str = IMAGE_MODEL
    image_edit_model: str = IMAGE_EDIT_MODEL
    video_model: str = VIDEO_MODEL
    poll_interval: float = POLL_INTERVAL
    poll_backoff: float = POLL_BACKOFF
    poll_max_interval: float = POLL_MAX_INTERVAL
    video_timeout: float | None = VIDEO_TIMEOUT
    translate_workers: int = TRANSLATE_WORKERS
    max_image_bytes: int = MAX_IMAGE_BYTES
    max_media_bytes: int = MAX_MEDIA_BYTES

    @classmethod
    def load(cls) -> "Config":
        """Load config from env vars then config file."""
        cfg = cls()

        # Env var takes priority
        gemini_key = os.environ.get("GEMINI_API_KEY", "") or os.environ.get("GOOGLE_API_KEY", "")

        if CONFIG_FILE.exists():
            try:
                data = json.loads(CONFIG_FILE.read_text(encoding="utf-8-sig"))
                if not gemini_key:
                    gemini_key = data.get("gemini_api_key", "")
                if out := data.get("output_dir"):
                    cfg.output_dir = Path(out)
                for key in ("text_model", "image_model", "image_edit_model", "video_model"):
                    if value := data.get(key):
                        setattr(cfg, key, value)
                if data.get("poll_interval") is not None:
                    cfg.poll_interval = float(data["poll_interval"])
                if data.get("poll_backoff") is not None:
                    cfg.poll_backoff = float(data["poll_backoff"])
                if data.get("poll_max_interval") is not None:
                    cfg.poll_max_interval = float(data["poll_max_interval"])
                if "video_timeout" in data:
                    timeout = data["video_timeout"]
                    cfg.video_timeout = float(timeout) if timeout is not None else None
                if data.get("translate_workers"):
                    cfg.translate_workers = int(data["translate_workers"])
                for key in ("max_image_bytes", "max_media_bytes"):
                    if data.get(key):
                        setattr(cfg, key, int(data[key]))
            except (json.JSONDecodeError, OSError, TypeError, ValueError):
                pass

        cfg.gemini_api_key = gemini_key
        return cfg

    def save(self) -> None:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        data = {
            "gemini_api_key": self.gemini_api_key,
            "output_dir": str(self.output_dir),
            "text_model": self.text_model,
            "image_model": self.image_model,
            "image_edit_model": self.image_edit_model,
            "video_model": self.video_model,
            "poll_interval": self.poll_interval,
            "poll_backoff": self.poll_backoff,
            "poll_max_interval": self.poll_max_interval,
            "video_timeout": self.video_timeout,
            "translate_workers": self.translate_workers,
            "max_image_bytes": self.max_image_bytes,
            "max_media_bytes": self.max_media_bytes,
        }
        CONFIG_FILE.write_text(json.dumps(data, indent=2))
