"""Public schema exports."""

from .upload import DEFAULT_PARTS, ProcessingStatus, UploadRequest, UploadSession

__all__ = [
    "DEFAULT_PARTS",
    "ProcessingStatus",
    "UploadRequest",
    "UploadSession",
]
