"""
Google OAuth utilities.

These helpers cover the installed-app flow: building the consent URL, exchanging the
authorization code, refreshing access tokens and looking up granted scopes.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import FrozenSet, Optional
from urllib.parse import urlencode

import httpx

from remote_upload.core.config import GoogleSettings, OAuthSettings
from remote_upload.models.oauth import Credential


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint returns an error."""


class OAuthTokenInfoError(Exception):
    """Raised when the tokeninfo endpoint cannot describe an access token."""


class GoogleOAuthClient:
    """Build Google authorization URLs and talk to the token endpoints."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    TOKENINFO_URL = "https://www.googleapis.com/oauth2/v3/tokeninfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._transport = transport

    @property
    def scopes(self) -> tuple[str, ...]:
        return self._oauth.scopes

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=10.0, transport=self._transport)

    def build_authorization_url(self, access_type: str = "offline") -> str:
        """Construct the Google OAuth consent URL.

        ``prompt=consent`` makes Google issue a refresh token even when the user has
        approved this client before.
        """
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": self._oauth.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self._oauth.scopes),
            "access_type": access_type,
            "prompt": "consent",
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> Credential:
        """Exchange an authorization code for an access/refresh token pair."""
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": self._oauth.redirect_uri,
            "grant_type": "authorization_code",
        }

        async with self._http() as client:
            response = await client.post(self.TOKEN_URL, data=payload)

        if response.status_code != HTTPStatus.OK:
            raise OAuthTokenExchangeError(response.text)

        token_payload = response.json()
        access_token = token_payload.get("access_token")
        refresh_token = token_payload.get("refresh_token")
        expires_in = token_payload.get("expires_in")

        if not access_token or not refresh_token or not expires_in:
            raise OAuthTokenExchangeError("Incomplete token payload returned from Google.")

        return Credential(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(expires_in),
        )

    async def refresh_token(self, refresh_token: str) -> Credential:
        """Refresh the access token using a stored refresh token.

        Google may rotate the refresh token; the returned credential carries whichever
        one is current.
        """
        payload = {
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        async with self._http() as client:
            response = await client.post(self.TOKEN_URL, data=payload)

        if response.status_code != HTTPStatus.OK:
            raise OAuthTokenExchangeError(response.text)

        token_payload = response.json()
        access_token = token_payload.get("access_token")
        expires_in = token_payload.get("expires_in")

        if not access_token or not expires_in:
            raise OAuthTokenExchangeError("Incomplete refresh payload returned from Google.")

        return Credential(
            access_token=access_token,
            refresh_token=token_payload.get("refresh_token") or refresh_token,
            expires_in=int(expires_in),
        )

    async def fetch_granted_scopes(self, access_token: str) -> FrozenSet[str]:
        """Return the scopes the user actually granted to ``access_token``."""
        async with self._http() as client:
            response = await client.get(
                self.TOKENINFO_URL, params={"access_token": access_token}
            )

        if response.status_code != HTTPStatus.OK:
            raise OAuthTokenInfoError(response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise OAuthTokenInfoError("Token info response was not JSON.") from exc

        scope = payload.get("scope") if isinstance(payload, dict) else None
        if scope is None:
            raise OAuthTokenInfoError("Token info response did not include a scope list.")
        return frozenset(scope.split())


__all__ = [
    "GoogleOAuthClient",
    "OAuthTokenExchangeError",
    "OAuthTokenInfoError",
]
