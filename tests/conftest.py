"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from remote_upload.core.config import GoogleSettings, OAuthSettings, UploadSettings


@pytest.fixture
def google_settings() -> GoogleSettings:
    return GoogleSettings(GOOGLE_CLIENT_ID="client", GOOGLE_CLIENT_SECRET="secret")


@pytest.fixture
def oauth_settings() -> OAuthSettings:
    return OAuthSettings()


@pytest.fixture
def upload_settings(tmp_path) -> UploadSettings:
    return UploadSettings(
        UPLOAD_DEFAULTS_PATH=str(tmp_path / "uploadDefaults.json"),
        SPINNER_TICK_MS=10,
    )
