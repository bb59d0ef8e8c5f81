"""Video job lifecycle: submit, cancel, poll, SSE streaming."""
from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from typing import AsyncIterator

from karigar.config import Config
from karigar.errors import GenerationCancelled
from karigar.provider import GenerationRequest, ModelProvider
from karigar.videogen import PollPolicy, run_video_job

from .models import JobStatus

log = logging.getLogger(__name__)


class JobManager:
    def __init__(self, max_finished: int = 100) -> None:
        self._jobs: dict[str, dict] = {}
        self._queues: dict[str, asyncio.Queue] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        # Finished jobs kept for status/download; older ones are dropped first
        self.max_finished = max_finished

    def set_event_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(
        self,
        request: GenerationRequest,
        provider: ModelProvider,
        config: Config,
        policy: PollPolicy | None = None,
    ) -> str:
        """Start a video job in a background thread. Returns the job_id immediately."""
        self._evict_finished()
        job_id = str(uuid.uuid4())[:8]
        queue: asyncio.Queue = asyncio.Queue()
        self._queues[job_id] = queue
        self._jobs[job_id] = {
            "state": "queued",
            "started_at": None,
            "finished_at": None,
            "result": None,
            "error": None,
            "_cancel": threading.Event(),
        }

        loop = self._loop or asyncio.get_event_loop()

        def _push(msg: dict) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, msg)

        def _progress(text: str) -> None:
            _push({"type": "log", "text": text, "ts": time.time()})

        thread = threading.Thread(
            target=self._run_job,
            args=(job_id, request, provider, config, policy, _progress, _push),
            daemon=True,
        )
        thread.start()
        return job_id

    def cancel(self, job_id: str) -> bool:
        job = self._jobs.get(job_id)
        if not job:
            return False
        job["_cancel"].set()
        if job["state"] in ("queued", "running"):
            job["state"] = "cancelled"
        return True

    def status(self, job_id: str) -> JobStatus | None:
        job = self._jobs.get(job_id)
        if not job:
            return None
        result = job["result"]
        return JobStatus(
            job_id=job_id,
            state=job["state"],
            started_at=job["started_at"],
            finished_at=job["finished_at"],
            content_url=f"/api/videos/{job_id}/content" if result else None,
            mime_type=result.mime_type if result else None,
            error=job["error"],
        )

    def result(self, job_id: str):
        """The finished VideoResult, or None."""
        job = self._jobs.get(job_id)
        return job["result"] if job else None

    async def stream(self, job_id: str) -> AsyncIterator[dict]:
        """Yield SSE message dicts until the job reaches a final state."""
        queue = self._queues.get(job_id)
        if queue is None:
            return
        while True:
            msg = await queue.get()
            yield msg
            if msg.get("type") == "status":
                break

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _evict_finished(self) -> None:
        finished = [
            job_id for job_id, job in self._jobs.items()
            if job["state"] in ("done", "failed", "cancelled") and job["finished_at"] is not None
        ]
        for job_id in finished[: max(0, len(finished) - self.max_finished)]:
            log.debug("Evicting finished job %s", job_id)
            self._jobs.pop(job_id, None)
            self._queues.pop(job_id, None)

    def _run_job(
        self,
        job_id: str,
        request: GenerationRequest,
        provider: ModelProvider,
        config: Config,
        policy: PollPolicy | None,
        progress_cb,
        push_raw,
    ) -> None:
        job = self._jobs[job_id]
        if job["_cancel"].is_set():
            job["finished_at"] = time.time()
            push_raw({"type": "status", "state": "cancelled"})
            return
        job["state"] = "running"
        job["started_at"] = time.time()
        try:
            result = run_video_job(
                request,
                provider,
                config,
                policy=policy,
                cancel=job["_cancel"],
                progress_cb=progress_cb,
            )
            job["result"] = result
            job["state"] = "done"
            job["finished_at"] = time.time()
            push_raw({"type": "status", "state": "done", "content_url": f"/api/videos/{job_id}/content"})

        except GenerationCancelled as exc:
            log.info("Job %s cancelled", job_id)
            job["state"] = "cancelled"
            job["error"] = str(exc)
            job["finished_at"] = time.time()
            push_raw({"type": "status", "state": "cancelled"})

        except Exception as exc:
            log.exception("Job %s failed", job_id)
            job["state"] = "failed"
            job["error"] = str(exc)
            job["finished_at"] = time.time()
            push_raw({"type": "status", "state": "failed", "error": str(exc)})


# Singleton
job_manager = JobManager()
