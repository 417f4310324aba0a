"""Schemas describing an upload and its server-side processing state."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field


# videos.insert rejects an empty part list.
DEFAULT_PARTS = "snippet,status"


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"


class UploadRequest(BaseModel):
    """A local file plus the metadata sections sent with the insert call."""

    file_path: Path
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Top-level sections such as 'snippet' and 'status'.",
    )

    @property
    def parts(self) -> str:
        return ",".join(self.metadata.keys()) or DEFAULT_PARTS


class UploadSession(BaseModel):
    """Tracks an accepted upload until YouTube has finished with it."""

    remote_id: str
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    thumbnail_ready: bool = False


__all__ = ["DEFAULT_PARTS", "ProcessingStatus", "UploadRequest", "UploadSession"]
