"""
Factory functions providing the shared clients and services for one CLI run.
"""

from functools import lru_cache

from remote_upload.clients import (
    GoogleOAuthClient,
    OAuthCallbackListener,
    SecretCipher,
    SecretStore,
)
from remote_upload.core.config import get_settings
from remote_upload.services import ConsentFlow, SessionManager
from remote_upload.utils.prompts import Prompter


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_prompter() -> Prompter:
    """Provide the console prompter."""
    return Prompter()


@lru_cache()
def get_secret_cipher() -> SecretCipher:
    """Provide symmetric encryption for the secret store."""
    settings = _settings()
    secret = settings.secret_store.encryption_secret or settings.google.client_secret
    return SecretCipher(secret=secret)


@lru_cache()
def get_secret_store() -> SecretStore:
    """Provide the local encrypted secret store."""
    settings = _settings()
    return SecretStore(settings.secret_store.db_path, get_secret_cipher())


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(settings.google, settings.oauth)


def get_consent_flow() -> ConsentFlow:
    """Build the interactive consent flow with a fresh callback listener."""
    settings = _settings()
    return ConsentFlow(
        oauth_client=get_google_oauth_client(),
        listener=OAuthCallbackListener.from_settings(settings.oauth),
        prompter=get_prompter(),
    )


def get_session_manager() -> SessionManager:
    """Build the session manager used at startup."""
    settings = _settings()
    return SessionManager(
        oauth_client=get_google_oauth_client(),
        consent_flow=get_consent_flow(),
        google_settings=settings.google,
    )


__all__ = [
    "get_consent_flow",
    "get_google_oauth_client",
    "get_prompter",
    "get_secret_cipher",
    "get_secret_store",
    "get_session_manager",
]
