"""Service layer exports."""

from .consent import ConsentFlow
from .metadata import UploadDefaultsError, load_upload_defaults, merge_metadata
from .processing import ProcessingPoller
from .session import AuthorizedSession, SessionManager
from .uploader import VideoUploader

__all__ = [
    "AuthorizedSession",
    "ConsentFlow",
    "ProcessingPoller",
    "SessionManager",
    "UploadDefaultsError",
    "VideoUploader",
    "load_upload_defaults",
    "merge_metadata",
]
