"""
Wait for YouTube to finish processing an uploaded video and its thumbnail.

Two loops run back to back: the processing-status loop, whose delay follows the
server's own time-left estimate, then the thumbnail loop, which polls on a fixed
interval until the high-resolution thumbnail can be fetched.
"""

from __future__ import annotations

import asyncio
import http.client
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TextIO

import httpx
import httplib2
from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError

from remote_upload.clients.youtube import YouTubeClient
from remote_upload.core.config import UploadSettings
from remote_upload.schemas import ProcessingStatus, UploadSession
from remote_upload.utils.console import Spinner

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_POLL_ERRORS = (
    HttpError,
    TransportError,
    httplib2.HttpLib2Error,
    http.client.HTTPException,
    OSError,
)


def _time_left_ms(video: Optional[Dict[str, Any]]) -> Optional[int]:
    progress = ((video or {}).get("processingDetails") or {}).get("processingProgress") or {}
    raw = progress.get("timeLeftMs")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _thumbnail_url(video: Optional[Dict[str, Any]]) -> Optional[str]:
    thumbnails = ((video or {}).get("snippet") or {}).get("thumbnails") or {}
    return (thumbnails.get("high") or {}).get("url")


class ProcessingPoller:
    """Block until an uploaded video is processed and its thumbnail is served."""

    def __init__(
        self,
        youtube: YouTubeClient,
        settings: UploadSettings,
        *,
        sleep: Sleep = asyncio.sleep,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._youtube = youtube
        self._settings = settings
        self._sleep = sleep
        self._transport = transport
        self._stream = stream

    async def await_ready(self, remote_id: str) -> UploadSession:
        upload = UploadSession(remote_id=remote_id)
        spinner = Spinner(tick_ms=self._settings.spinner_tick_ms, stream=self._stream).start()
        try:
            await self._wait_for_processing(upload)
            await self._wait_for_thumbnail(upload)
        finally:
            await spinner.stop()
        return upload

    async def _wait_for_processing(self, upload: UploadSession) -> None:
        interval_ms = self._settings.processing_poll_ms
        while True:
            await self._sleep(interval_ms / 1000)
            try:
                video = await self._youtube.get_video(upload.remote_id)
            except _POLL_ERRORS as exc:
                logger.warning("Processing status check failed, will retry: %s", exc)
                continue

            status = ((video or {}).get("processingDetails") or {}).get("processingStatus")
            if status == ProcessingStatus.SUCCEEDED.value:
                upload.processing_status = ProcessingStatus.SUCCEEDED
                return

            # timeLeftMs is absent until processing actually starts.
            interval_ms = _time_left_ms(video) or interval_ms
            logger.debug("Video %s status=%s, next check in %sms", upload.remote_id, status, interval_ms)

    async def _wait_for_thumbnail(self, upload: UploadSession) -> None:
        async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
            while True:
                await self._sleep(self._settings.thumbnail_poll_ms / 1000)
                try:
                    video = await self._youtube.get_video(upload.remote_id)
                except _POLL_ERRORS as exc:
                    logger.warning("Thumbnail lookup failed, will retry: %s", exc)
                    continue

                url = _thumbnail_url(video)
                if not url:
                    # TODO: keep polling until the URL shows up, bounded by a timeout.
                    logger.info("No thumbnail URL reported for %s yet; not waiting for it.", upload.remote_id)
                    return

                try:
                    response = await client.get(url)
                except httpx.HTTPError as exc:
                    logger.warning("Thumbnail fetch failed, will retry: %s", exc)
                    continue

                if response.is_success:
                    upload.thumbnail_ready = True
                    return
                logger.debug("Thumbnail not served yet (HTTP %s)", response.status_code)


__all__ = ["ProcessingPoller"]
