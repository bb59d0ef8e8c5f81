"""Litestar ASGI application: Karigar Web API."""
from __future__ import annotations

import asyncio
import logging
import os

from litestar import Litestar, Request, Response
from litestar.config.cors import CORSConfig
from litestar.datastructures import State
from litestar.di import Provide
from litestar.logging import LoggingConfig

from karigar.config import Config
from karigar.errors import InputValidationError, KarigarError
from karigar.provider import ModelProvider
from webui.backend.deps import provide_config, provide_model
from webui.backend.job_manager import job_manager
from webui.backend.models import ErrorDetail
from webui.backend.routes.config import get_config, save_config
from webui.backend.routes.flows import (
    authenticate,
    chat_turn,
    create_image,
    create_stories,
    price,
    sales_strategy,
)
from webui.backend.routes.jobs import cancel_video_job, create_video_job, get_video_job
from webui.backend.routes.outputs import download_video
from webui.backend.routes.stream import stream_video_job

log = logging.getLogger(__name__)

# Comma-separated list of browser origins allowed to call the API
CORS_ORIGINS = [o.strip() for o in os.environ.get("KARIGAR_CORS_ORIGINS", "*").split(",") if o.strip()]


def _on_startup() -> None:
    """Capture the running event loop for thread-safe queue operations."""
    loop = asyncio.get_event_loop()
    job_manager.set_event_loop(loop)


def _karigar_error_handler(request: Request, exc: KarigarError) -> Response:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    field = exc.field if isinstance(exc, InputValidationError) else None
    return Response(
        content=ErrorDetail(error=exc.message, field=field).model_dump(),
        status_code=exc.status_code,
    )


def create_app(
    provider: ModelProvider | None = None,
    config: Config | None = None,
    cors_origins: list[str] | None = None,
) -> Litestar:
    """Build the API app. ``provider`` and ``config`` are built lazily when omitted."""
    return Litestar(
        route_handlers=[
            get_config,
            save_config,
            create_image,
            create_stories,
            price,
            authenticate,
            sales_strategy,
            chat_turn,
            create_video_job,
            get_video_job,
            cancel_video_job,
            stream_video_job,
            download_video,
        ],
        dependencies={
            "provider": Provide(provide_model, sync_to_thread=False),
            "config": Provide(provide_config, sync_to_thread=False),
        },
        state=State({"provider": provider, "config": config}),
        exception_handlers={KarigarError: _karigar_error_handler},
        cors_config=CORSConfig(
            allow_origins=cors_origins or CORS_ORIGINS,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        ),
        on_startup=[_on_startup],
        logging_config=LoggingConfig(
            loggers={
                "karigar": {"level": "INFO", "handlers": ["queue_listener"]},
                "webui": {"level": "INFO", "handlers": ["queue_listener"]},
            }
        ),
    )


app = create_app()
