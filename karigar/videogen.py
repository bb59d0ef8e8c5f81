"""Short social-media video generation (Veo) with operation polling.

A video job is submitted once and then re-checked until the provider marks it
done::

    SUBMITTED -> POLLING (repeats) -> DONE_OK | DONE_ERROR

Polling waits ``PollPolicy.interval`` seconds between checks (fixed by
default, optionally growing by ``backoff``), stops at ``timeout`` and can be
cancelled at any point through a ``threading.Event``. Provider errors are
never retried.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from schemas.media import VideoRequest

from .config import Config
from .errors import GenerationCancelled, GenerationTimeout, MissingOutputError, ProviderError
from .media import load_image
from .provider import GenerationOperation, GenerationRequest, ModelProvider, OutputPart

log = logging.getLogger(__name__)


@dataclass
class PollPolicy:
    interval: float = 5.0
    backoff: float = 1.0
    max_interval: float = 30.0
    timeout: float | None = 600.0

    @classmethod
    def from_config(cls, config: Config) -> "PollPolicy":
        return cls(
            interval=config.poll_interval,
            backoff=config.poll_backoff,
            max_interval=max(config.poll_max_interval, config.poll_interval),
            timeout=config.video_timeout,
        )

    def next_interval(self, current: float) -> float:
        return min(current * self.backoff, self.max_interval)


@dataclass
class VideoResult:
    uri: str
    mime_type: str
    credential: str = ""

    @property
    def signed_uri(self) -> str:
        """The URI with the API key appended as a query parameter.

        Anyone holding this URL can use the key. Prefer fetching ``uri``
        server-side with the key in a header.
        """
        if not self.credential:
            return self.uri
        sep = "&" if "?" in self.uri else "?"
        return f"{self.uri}{sep}key={self.credential}"


def wait_for_operation(
    provider: ModelProvider,
    operation: GenerationOperation,
    policy: PollPolicy | None = None,
    cancel: threading.Event | None = None,
    progress_cb: Callable[[str], None] | None = None,
) -> GenerationOperation:
    """Re-check ``operation`` until it is done. Returns the terminal operation."""
    policy = policy or PollPolicy()
    cancel = cancel or threading.Event()
    deadline = None if policy.timeout is None else time.monotonic() + policy.timeout
    interval = policy.interval
    checks = 0

    while not operation.done:
        if cancel.is_set():
            raise GenerationCancelled(f"Video generation cancelled after {checks} status checks.")
        if deadline is not None and time.monotonic() >= deadline:
            raise GenerationTimeout(f"Video generation did not finish within {policy.timeout:.0f}s.")

        operation = provider.check_operation(operation)
        checks += 1
        log.debug("Operation %s check %d: done=%s", operation.name, checks, operation.done)
        if operation.done:
            break

        if progress_cb:
            progress_cb(f"  Still generating (check {checks})...")

        wait = interval
        if deadline is not None:
            wait = max(0.0, min(wait, deadline - time.monotonic()))
        if cancel.wait(wait):
            raise GenerationCancelled(f"Video generation cancelled after {checks} status checks.")
        interval = policy.next_interval(interval)

    log.info("Operation %s finished after %d status checks", operation.name, checks)
    return operation


def extract_media(operation: GenerationOperation) -> OutputPart:
    """Pick the generated media out of a finished operation."""
    if operation.error:
        log.error("Veo generation failed: %s", operation.error)
        raise ProviderError(operation.error)
    part = operation.first_media()
    if part is None:
        raise MissingOutputError("Failed to find the generated video")
    return part


def build_request(request: VideoRequest, config: Config) -> GenerationRequest:
    """Validate a VideoRequest and turn it into a provider request."""
    reference = None
    if request.photo_data_uri:
        reference = load_image(request.photo_data_uri, config.max_image_bytes, field="photo_data_uri")
    return GenerationRequest(
        prompt=request.prompt,
        reference=reference,
        duration_seconds=request.duration_seconds,
        aspect_ratio=request.resolved_aspect_ratio(),
        person_generation=request.resolved_person_generation(),
    )


def generate_short_video(
    request: VideoRequest,
    provider: ModelProvider,
    config: Config,
    policy: PollPolicy | None = None,
    cancel: threading.Event | None = None,
    progress_cb: Callable[[str], None] | None = None,
) -> VideoResult:
    """Generate a short video for social media from a prompt and optional photo."""
    return run_video_job(build_request(request, config), provider, config, policy, cancel, progress_cb)


def run_video_job(
    job: GenerationRequest,
    provider: ModelProvider,
    config: Config,
    policy: PollPolicy | None = None,
    cancel: threading.Event | None = None,
    progress_cb: Callable[[str], None] | None = None,
) -> VideoResult:
    """Submit an already validated request and wait for its video."""
    if cancel is not None and cancel.is_set():
        raise GenerationCancelled("Video generation cancelled before the job was submitted.")
    if progress_cb:
        progress_cb(f"  Video gen: {config.video_model} - Submitting job...")
    operation = provider.submit_video(job)

    if not operation.done and progress_cb:
        progress_cb("  Video gen: Job submitted, waiting for completion (can take a minute)...")
    operation = wait_for_operation(
        provider,
        operation,
        policy=policy or PollPolicy.from_config(config),
        cancel=cancel,
        progress_cb=progress_cb,
    )

    part = extract_media(operation)
    log.info("Veo video URI: %s", part.media_uri)
    return VideoResult(
        uri=part.media_uri,
        mime_type=part.mime_type or "video/mp4",
        credential=config.gemini_api_key,
    )
