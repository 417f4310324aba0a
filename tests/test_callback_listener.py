try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio
import socket

import httpx
import pytest

from remote_upload.clients import callback_server
from remote_upload.clients.callback_server import (
    CallbackListenerBindError,
    ConsentDeniedError,
    OAuthCallbackListener,
    build_callback_app,
)


def _asgi_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://localhost:3000")


@pytest.mark.asyncio
async def test_code_resolves_outcome_and_later_hits_are_ignored() -> None:
    outcome = asyncio.get_running_loop().create_future()
    app = build_callback_app("/oauth2callback", outcome)

    async with _asgi_client(app) as client:
        first = await client.get("/oauth2callback", params={"code": "abc"})
        second = await client.get("/oauth2callback", params={"code": "other"})

    assert first.status_code == 200
    assert "Authentication successful" in first.text
    assert second.status_code == 200
    assert outcome.result() == "abc"


@pytest.mark.asyncio
async def test_error_rejects_outcome() -> None:
    outcome = asyncio.get_running_loop().create_future()
    app = build_callback_app("/oauth2callback", outcome)

    async with _asgi_client(app) as client:
        response = await client.get("/oauth2callback", params={"error": "access_denied"})

    assert "Authentication canceled" in response.text
    with pytest.raises(ConsentDeniedError) as excinfo:
        outcome.result()
    assert excinfo.value.reason == "access_denied"


@pytest.mark.asyncio
async def test_request_without_code_or_error_keeps_waiting() -> None:
    outcome = asyncio.get_running_loop().create_future()
    app = build_callback_app("/oauth2callback", outcome)

    async with _asgi_client(app) as client:
        missing = await client.get("/oauth2callback")
        other_path = await client.get("/favicon.ico")

    assert missing.status_code == 400
    assert other_path.status_code == 404
    assert not outcome.done()


def test_bind_error_when_port_is_taken() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
        holder.bind(("127.0.0.1", 0))
        holder.listen()
        port = holder.getsockname()[1]

        listener = OAuthCallbackListener("127.0.0.1", port, "/oauth2callback")
        with pytest.raises(CallbackListenerBindError):
            listener._bind()


@pytest.mark.asyncio
async def test_receive_returns_code_and_releases_port() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]

    listener = OAuthCallbackListener("127.0.0.1", port, "/oauth2callback")
    responses: list[httpx.Response] = []

    async def browser() -> None:
        async with httpx.AsyncClient(trust_env=False) as client:
            responses.append(
                await client.get(f"http://127.0.0.1:{port}/oauth2callback", params={"code": "xyz"})
            )

    pending: list[asyncio.Task] = []
    code = await listener.receive(on_listening=lambda: pending.append(asyncio.create_task(browser())))
    await asyncio.gather(*pending)

    assert code == "xyz"
    assert responses[0].status_code == 200

    # The port is free again once receive() returns.
    listener._bind().close()


class RecordingSocket:
    instances: list = []

    def __init__(self, *args) -> None:
        self.options: list = []
        RecordingSocket.instances.append(self)

    def setsockopt(self, level, option, value) -> None:
        self.options.append((level, option, value))

    def bind(self, address) -> None:
        pass

    def listen(self) -> None:
        pass


def test_bind_prefers_exclusive_address_use(monkeypatch) -> None:
    RecordingSocket.instances = []
    monkeypatch.setattr(socket, "SO_EXCLUSIVEADDRUSE", -5, raising=False)
    monkeypatch.setattr(callback_server.socket, "socket", RecordingSocket)

    OAuthCallbackListener("127.0.0.1", 3000, "/oauth2callback")._bind()

    assert RecordingSocket.instances[0].options == [(socket.SOL_SOCKET, -5, 1)]


def test_bind_reuses_address_without_exclusive_option(monkeypatch) -> None:
    RecordingSocket.instances = []
    monkeypatch.delattr(socket, "SO_EXCLUSIVEADDRUSE", raising=False)
    monkeypatch.setattr(callback_server.socket, "socket", RecordingSocket)

    OAuthCallbackListener("127.0.0.1", 3000, "/oauth2callback")._bind()

    assert RecordingSocket.instances[0].options == [(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)]
