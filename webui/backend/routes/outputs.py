"""Generated video download route.

The provider only serves the file to requests carrying the API key, so the
server fetches it and streams it on. The key never reaches the client.
"""
from __future__ import annotations

from litestar import get
from litestar.exceptions import NotFoundException
from litestar.response import Stream

from karigar.media import get_extension_for_mime
from karigar.utils.gemini_client import iter_media
from webui.backend.deps import ConfigDep
from webui.backend.job_manager import job_manager


@get("/api/videos/{job_id:str}/content")
async def download_video(job_id: str, config: ConfigDep) -> Stream:
    result = job_manager.result(job_id)
    if result is None:
        raise NotFoundException(f"No finished video for job {job_id!r}")
    extension = get_extension_for_mime(result.mime_type, ".mp4")
    return Stream(
        iter_media(result.uri, config.gemini_api_key),
        media_type=result.mime_type,
        headers={"Content-Disposition": f'inline; filename="karigar_{job_id}{extension}"'},
    )
