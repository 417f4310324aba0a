"""
Command-line entrypoint for the YouTube remote uploader.

Authorizes (reusing the stored refresh token when possible), asks for the video and
its details, uploads it, waits for YouTube to finish processing and shares the link.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pyperclip
from pydantic import ValidationError

from remote_upload.core.config import AppSettings, get_settings
from remote_upload.core.logging import configure_logging
from remote_upload.dependencies import get_prompter, get_secret_store, get_session_manager
from remote_upload.services import ProcessingPoller, VideoUploader
from remote_upload.utils.prompts import Question, strip_wrapping_quotes

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload a video to YouTube and copy its link once it is ready."
    )
    parser.add_argument(
        "video_path",
        nargs="?",
        help="Video to upload. Also used to suggest a title.",
    )
    parser.add_argument(
        "--defaults",
        dest="defaults",
        default=None,
        help="Path to the JSON upload defaults (default: uploadDefaults.json).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Override APP_LOG_LEVEL for this run.",
    )
    return parser


def build_questions(video_path: Optional[str]) -> List[Question]:
    """Prompts for path, title and description, prefilled from the argument."""
    suggested_title = Path(video_path).stem if video_path else None
    return [
        Question("video_path", "Video Path:", default=video_path, filter=strip_wrapping_quotes),
        Question("video_title", "Title:", default=suggested_title),
        Question("video_description", "Description:"),
    ]


async def run(args: argparse.Namespace, settings: AppSettings) -> str:
    """Execute one upload session and return the new video id."""
    store = get_secret_store()
    service = settings.secret_store.service_name
    account = settings.secret_store.account_name

    session = await get_session_manager().ensure_authorized(store.get(service, account))
    store.set(service, account, session.refresh_token)

    answers = await get_prompter().ask(build_questions(args.video_path))

    youtube = session.youtube()
    uploader = VideoUploader(youtube, settings.upload, defaults_path=args.defaults)
    video_id = await uploader.upload(
        answers["video_path"],
        {
            "snippet": {
                "title": answers["video_title"],
                "description": answers["video_description"],
            }
        },
    )

    await ProcessingPoller(youtube, settings.upload).await_ready(video_id)
    print("YouTube Finished Processing")
    return video_id


def share_link(url: str) -> None:
    print(f"YouTube Link:\n{url}")
    try:
        pyperclip.copy(url)
    except pyperclip.PyperclipException as exc:
        logger.warning("Could not copy the link to the clipboard: %s", exc)
        return
    print("YouTube URL copied to clipboard")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(
            "Settings validation failed. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET:\n"
            f"{exc}",
            file=sys.stderr,
        )
        return EXIT_CONFIG_ERROR

    configure_logging(args.log_level or settings.log_level)

    try:
        video_id = asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        print("\nCanceled.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception:  # pylint: disable=broad-except
        logger.exception("Upload session failed")
        return EXIT_FAILURE

    share_link(settings.upload.watch_url(video_id))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
