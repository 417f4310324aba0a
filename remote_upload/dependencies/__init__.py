"""Expose dependency helpers for the CLI."""

from .clients import (
    get_consent_flow,
    get_google_oauth_client,
    get_prompter,
    get_secret_cipher,
    get_secret_store,
    get_session_manager,
)

__all__ = [
    "get_consent_flow",
    "get_google_oauth_client",
    "get_prompter",
    "get_secret_cipher",
    "get_secret_store",
    "get_session_manager",
]
