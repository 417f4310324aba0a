"""Expose constructed client wrappers."""

from .callback_server import OAuthCallbackListener
from .google_auth import GoogleOAuthClient
from .secret_store import SecretCipher, SecretStore
from .youtube import YouTubeClient

__all__ = [
    "GoogleOAuthClient",
    "OAuthCallbackListener",
    "SecretCipher",
    "SecretStore",
    "YouTubeClient",
]
