"""
Interactive OAuth consent flow.

Walks the user through Google's consent screen, receives the redirect on a local
listener, exchanges the code and re-prompts until both required scopes are granted.
"""

from __future__ import annotations

import logging
import sys
import webbrowser
from typing import Callable

import httpx

from remote_upload.clients.callback_server import ConsentDeniedError, OAuthCallbackListener
from remote_upload.clients.google_auth import GoogleOAuthClient, OAuthTokenInfoError
from remote_upload.models.oauth import ConsentGrant, Credential
from remote_upload.utils.console import animate_text
from remote_upload.utils.prompts import Prompter

logger = logging.getLogger(__name__)

INTRO_TEXT = (
    "You'll need to give consent to post videos to your YouTube account on your behalf.\n"
    " A browser window will open to Google's consent page. "
    "Follow the steps on that page, then you should be all set!"
)
RETRY_TEXT = (
    "You need to give consent to both items. A browser window will open to Google's "
    "consent page asking you to consent to both items."
)

BrowserOpener = Callable[[str], object]


class ConsentFlow:
    """Run the authorization-code grant until a usable credential comes back."""

    def __init__(
        self,
        oauth_client: GoogleOAuthClient,
        listener: OAuthCallbackListener,
        prompter: Prompter,
        *,
        open_browser: BrowserOpener = webbrowser.open,
        text_delay_ms: int = 10,
    ) -> None:
        self._oauth = oauth_client
        self._listener = listener
        self._prompter = prompter
        self._open_browser = open_browser
        self._text_delay_ms = text_delay_ms

    async def authorize(self) -> Credential:
        await animate_text(INTRO_TEXT, self._text_delay_ms)
        await self._prompter.acknowledge()

        while True:
            consent_url = self._oauth.build_authorization_url()
            try:
                code = await self._listener.receive(
                    on_listening=lambda: self._open_browser(consent_url)
                )
            except ConsentDeniedError as exc:
                logger.info("Consent screen returned an error: %s", exc.reason)
                await self._ask_again()
                continue

            credential = await self._oauth.exchange_authorization_code(code)

            try:
                granted = await self._oauth.fetch_granted_scopes(credential.access_token)
            except (httpx.HTTPError, OAuthTokenInfoError) as exc:
                logger.warning("Could not verify granted scopes, continuing: %s", exc)
                return credential

            grant = ConsentGrant(authorization_code=code, scopes_granted=granted)
            if grant.covers(self._oauth.scopes):
                return credential

            logger.info("Partial consent: granted %s", sorted(grant.scopes_granted))
            await self._ask_again()

    async def _ask_again(self) -> None:
        print(RETRY_TEXT, file=sys.stderr)
        await self._prompter.acknowledge()


__all__ = ["ConsentFlow", "INTRO_TEXT", "RETRY_TEXT"]
