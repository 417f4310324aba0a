"""YouTube Data API v3 client wrapper."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from remote_upload.schemas import UploadRequest

ProgressCallback = Callable[[int], None]


class YouTubeClient:
    """Insert videos and read their processing state."""

    def __init__(self, credentials: Optional[Credentials] = None, *, http: Any = None) -> None:
        if credentials is None and http is None:
            raise ValueError("YouTubeClient needs credentials or an authorized http object.")
        self._credentials = credentials
        self._http = http

    def _service(self) -> Any:
        auth = {"http": self._http} if self._http is not None else {"credentials": self._credentials}
        return build("youtube", "v3", cache_discovery=False, **auth)

    def insert_video(
        self,
        request: UploadRequest,
        *,
        chunk_size: int,
        notify_subscribers: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """Stream ``request.file_path`` to ``videos.insert`` and return the new id.

        Blocking; the file is sent in ``chunk_size`` pieces and ``on_progress`` gets
        the byte count confirmed after each one.
        """
        service = self._service()
        media = MediaFileUpload(str(request.file_path), chunksize=chunk_size, resumable=True)
        insert = service.videos().insert(
            part=request.parts,
            notifySubscribers=notify_subscribers,
            body=request.metadata,
            media_body=media,
        )

        response = None
        while response is None:
            status, response = insert.next_chunk()
            if status is not None and on_progress is not None:
                on_progress(status.resumable_progress)

        return response["id"]

    async def get_video(self, video_id: str) -> Optional[Dict[str, Any]]:
        """Fetch processing details and snippet for a single video."""

        def _execute_list() -> Optional[Dict[str, Any]]:
            response = (
                self._service()
                .videos()
                .list(part="processingDetails,snippet", id=video_id)
                .execute()
            )
            items = response.get("items") or []
            return items[0] if items else None

        return await asyncio.to_thread(_execute_list)


__all__ = ["ProgressCallback", "YouTubeClient"]
