"""
Single-use local HTTP listener that receives Google's OAuth redirect.

The listener serves one path on a fixed port, resolves with the first ``code`` or
``error`` it sees, answers the browser with a short page and shuts itself down.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse

from remote_upload.core.config import OAuthSettings

logger = logging.getLogger(__name__)

_SUCCESS_PAGE = "<html><body>Authentication successful! Please return to the console.</body></html>"
_CANCELED_PAGE = "<html><body>Authentication canceled. Please return to the console.</body></html>"
_MISSING_PAGE = "<html><body>Missing authorization code.</body></html>"
_DONE_PAGE = "<html><body>This sign-in has already been handled. You can close this tab.</body></html>"


class CallbackListenerError(Exception):
    """Raised when the listener stops without receiving a callback."""


class CallbackListenerBindError(CallbackListenerError):
    """Raised when the callback port is already taken, e.g. by an earlier run."""


class ConsentDeniedError(Exception):
    """Raised when Google redirects back with an ``error`` instead of a code."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Consent was not granted: {reason}")
        self.reason = reason


def build_callback_app(path: str, outcome: "asyncio.Future[str]") -> FastAPI:
    """Build the ASGI app that settles ``outcome`` from the first meaningful hit."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get(path, response_class=HTMLResponse)
    async def oauth2callback(
        code: Optional[str] = Query(default=None),
        error: Optional[str] = Query(default=None),
    ) -> HTMLResponse:
        if outcome.done():
            return HTMLResponse(_DONE_PAGE)
        if code:
            outcome.set_result(code)
            return HTMLResponse(_SUCCESS_PAGE)
        if error:
            outcome.set_exception(ConsentDeniedError(error))
            return HTMLResponse(_CANCELED_PAGE)
        return HTMLResponse(_MISSING_PAGE, status_code=400)

    return app


class OAuthCallbackListener:
    """Bind on demand, wait for one redirect, always release the port."""

    def __init__(self, host: str, port: int, path: str) -> None:
        self._host = host
        self._port = port
        self._path = path

    @classmethod
    def from_settings(cls, settings: OAuthSettings) -> "OAuthCallbackListener":
        return cls(settings.callback_host, settings.callback_port, settings.callback_path)

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        if hasattr(socket, "SO_EXCLUSIVEADDRUSE"):
            # Windows lets SO_REUSEADDR steal a port that is still listening.
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
        else:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self._host, self._port))
            sock.listen()
        except OSError as exc:
            sock.close()
            raise CallbackListenerBindError(
                f"Could not listen on {self._host}:{self._port} ({exc}). "
                "Is another upload still waiting for a sign-in?"
            ) from exc
        return sock

    async def receive(self, on_listening: Optional[Callable[[], object]] = None) -> str:
        """Return the authorization code from the first callback.

        ``on_listening`` runs once the port accepts connections; use it to open the
        browser. Raises ``ConsentDeniedError`` when the user cancels.
        """
        sock = self._bind()
        outcome: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        config = uvicorn.Config(
            build_callback_app(self._path, outcome),
            log_config=None,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        server = uvicorn.Server(config)
        serving = asyncio.create_task(server.serve(sockets=[sock]))
        logger.debug("Listening for OAuth callback on %s:%s%s", self._host, self._port, self._path)

        try:
            if on_listening is not None:
                on_listening()
            await asyncio.wait({outcome, serving}, return_when=asyncio.FIRST_COMPLETED)
            if not outcome.done():
                raise CallbackListenerError(
                    "Callback listener stopped before Google redirected back."
                )
            return outcome.result()
        finally:
            server.should_exit = True
            await asyncio.gather(serving, return_exceptions=True)
            sock.close()
            if not outcome.done():
                outcome.cancel()


__all__ = [
    "CallbackListenerBindError",
    "CallbackListenerError",
    "ConsentDeniedError",
    "OAuthCallbackListener",
    "build_callback_app",
]
