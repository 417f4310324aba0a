try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from remote_upload.clients.google_auth import OAuthTokenExchangeError
from remote_upload.clients.youtube import YouTubeClient
from remote_upload.models.oauth import Credential
from remote_upload.services.session import SessionManager


class DummyOAuthClient:
    scopes = ("scope-a", "scope-b")

    def __init__(self, *, refresh_result=None) -> None:
        self._refresh_result = refresh_result
        self.refresh_calls: list[str] = []

    async def refresh_token(self, refresh_token: str) -> Credential:
        self.refresh_calls.append(refresh_token)
        if isinstance(self._refresh_result, Exception):
            raise self._refresh_result
        return self._refresh_result


class CountingConsentFlow:
    def __init__(self) -> None:
        self.calls = 0

    async def authorize(self) -> Credential:
        self.calls += 1
        return Credential(access_token="fresh-access", refresh_token="fresh-refresh", expires_in=3600)


@pytest.mark.asyncio
async def test_valid_stored_token_skips_consent(google_settings) -> None:
    oauth_client = DummyOAuthClient(
        refresh_result=Credential(access_token="a", refresh_token="stored", expires_in=3600)
    )
    consent = CountingConsentFlow()

    session = await SessionManager(oauth_client, consent, google_settings).ensure_authorized("stored")

    assert consent.calls == 0
    assert oauth_client.refresh_calls == ["stored"]
    assert session.refresh_token == "stored"
    assert isinstance(session.youtube(), YouTubeClient)


@pytest.mark.asyncio
async def test_rotated_refresh_token_is_exposed(google_settings) -> None:
    oauth_client = DummyOAuthClient(
        refresh_result=Credential(access_token="a", refresh_token="rotated", expires_in=3600)
    )

    session = await SessionManager(oauth_client, CountingConsentFlow(), google_settings).ensure_authorized("stored")

    assert session.refresh_token == "rotated"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [OAuthTokenExchangeError("invalid_grant"), httpx.ConnectError("no network")],
)
async def test_rejected_or_unreachable_refresh_runs_consent_once(google_settings, failure) -> None:
    oauth_client = DummyOAuthClient(refresh_result=failure)
    consent = CountingConsentFlow()

    session = await SessionManager(oauth_client, consent, google_settings).ensure_authorized("stale")

    assert consent.calls == 1
    assert session.refresh_token == "fresh-refresh"


@pytest.mark.asyncio
@pytest.mark.parametrize("stored", [None, ""])
async def test_missing_token_runs_consent_without_refresh(google_settings, stored) -> None:
    oauth_client = DummyOAuthClient()
    consent = CountingConsentFlow()

    session = await SessionManager(oauth_client, consent, google_settings).ensure_authorized(stored)

    assert consent.calls == 1
    assert oauth_client.refresh_calls == []
    assert session.refresh_token == "fresh-refresh"


@pytest.mark.asyncio
async def test_session_credentials_carry_expiry(google_settings) -> None:
    oauth_client = DummyOAuthClient(
        refresh_result=Credential(access_token="a", refresh_token="stored", expires_in=3600)
    )

    session = await SessionManager(oauth_client, CountingConsentFlow(), google_settings).ensure_authorized("stored")

    credentials = session._credentials
    assert credentials.expiry is not None
    assert not credentials.expired
    assert credentials.valid
