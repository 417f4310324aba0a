"""Upload orchestration: merge metadata, stream the file, report progress."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from remote_upload.clients.youtube import YouTubeClient
from remote_upload.core.config import UploadSettings
from remote_upload.schemas import UploadRequest
from remote_upload.services.metadata import load_upload_defaults, merge_metadata
from remote_upload.utils.console import progress_percent, write_progress

logger = logging.getLogger(__name__)


class VideoUploader:
    """Send one local video to YouTube and return the id it was given."""

    def __init__(
        self,
        youtube: YouTubeClient,
        settings: UploadSettings,
        *,
        defaults_path: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._youtube = youtube
        self._settings = settings
        self._defaults_path = defaults_path or settings.defaults_path
        self._stream = stream

    def build_request(self, file_path: str | Path, metadata_override: Mapping[str, Any]) -> UploadRequest:
        defaults = load_upload_defaults(self._defaults_path)
        return UploadRequest(
            file_path=Path(file_path),
            metadata=merge_metadata(defaults, metadata_override),
        )

    async def upload(self, file_path: str | Path, metadata_override: Mapping[str, Any]) -> str:
        """Upload ``file_path`` and return the remote video id.

        Errors from the API or the transport are logged and re-raised; there is no retry.
        """
        file_size = os.path.getsize(file_path)
        request = self.build_request(file_path, metadata_override)

        def _report(bytes_sent: int) -> None:
            write_progress(progress_percent(bytes_sent, file_size), self._stream)

        print("Starting Upload", file=self._stream)
        try:
            video_id = await asyncio.to_thread(
                self._youtube.insert_video,
                request,
                chunk_size=self._settings.chunk_size_bytes,
                notify_subscribers=self._settings.notify_subscribers,
                on_progress=_report,
            )
        except Exception as exc:
            logger.error("Upload of %s failed: %s", request.file_path, exc)
            raise

        _report(file_size)
        print("\n Finished Upload", file=self._stream)
        logger.info("Uploaded %s as video %s", request.file_path, video_id)
        return video_id


__all__ = ["VideoUploader"]
