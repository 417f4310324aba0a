"""
Decides at startup whether a stored refresh token still works or consent is needed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
from google.oauth2.credentials import Credentials

from remote_upload.clients.google_auth import GoogleOAuthClient, OAuthTokenExchangeError
from remote_upload.clients.youtube import YouTubeClient
from remote_upload.core.config import GoogleSettings
from remote_upload.models.oauth import Credential
from remote_upload.services.consent import ConsentFlow

logger = logging.getLogger(__name__)


def _naive_utc_expiry(expires_in: int) -> datetime:
    # google-auth compares expiry against a naive UTC clock.
    return datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(seconds=expires_in)


class AuthorizedSession:
    """Authorized handle for the YouTube API.

    Token state stays private; callers only see the refresh token they must persist
    and a client bound to the credentials.
    """

    def __init__(self, credential: Credential, google_settings: GoogleSettings, scopes: tuple[str, ...]) -> None:
        self._credential = credential
        self._credentials = Credentials(
            token=credential.access_token,
            refresh_token=credential.refresh_token,
            token_uri=GoogleOAuthClient.TOKEN_URL,
            client_id=google_settings.client_id,
            client_secret=google_settings.client_secret,
            scopes=list(scopes),
            expiry=_naive_utc_expiry(credential.expires_in),
        )

    @property
    def refresh_token(self) -> str:
        return self._credential.refresh_token

    def youtube(self) -> YouTubeClient:
        return YouTubeClient(self._credentials)


class SessionManager:
    """Turn an optional stored refresh token into an ``AuthorizedSession``."""

    def __init__(
        self,
        oauth_client: GoogleOAuthClient,
        consent_flow: ConsentFlow,
        google_settings: GoogleSettings,
    ) -> None:
        self._oauth = oauth_client
        self._consent = consent_flow
        self._google = google_settings

    async def ensure_authorized(self, stored_refresh_token: Optional[str] = None) -> AuthorizedSession:
        """Reuse ``stored_refresh_token`` when Google still accepts it, else run consent.

        Nothing is persisted here; save ``session.refresh_token`` afterwards.
        """
        credential: Optional[Credential] = None
        if stored_refresh_token:
            credential = await self._try_refresh(stored_refresh_token)

        if credential is None:
            credential = await self._consent.authorize()

        return AuthorizedSession(credential, self._google, self._oauth.scopes)

    async def _try_refresh(self, refresh_token: str) -> Optional[Credential]:
        # Network failures are treated like a revoked token: fall through to consent.
        try:
            return await self._oauth.refresh_token(refresh_token)
        except (OAuthTokenExchangeError, httpx.HTTPError) as exc:
            logger.info("Stored refresh token rejected, starting consent: %s", exc)
            return None


__all__ = ["AuthorizedSession", "SessionManager"]
