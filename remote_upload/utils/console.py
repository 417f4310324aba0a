"""Console helpers: typed-out text, a line spinner and an in-place progress line."""

from __future__ import annotations

import asyncio
import sys
from typing import Optional, Sequence, TextIO

SPINNER_FRAMES = (
    "| YouTube Processing...",
    "/ YouTube Processing...",
    "- YouTube Processing...",
    "\\ YouTube Processing...",
)


async def animate_text(text: str, delay_ms: int = 10, stream: TextIO | None = None) -> None:
    """Print ``text`` one character at a time, then end the line."""
    out = stream or sys.stdout
    for char in text:
        await asyncio.sleep(delay_ms / 1000)
        out.write(char)
        out.flush()
    out.write("\n")
    out.flush()


def progress_percent(bytes_sent: int, total_bytes: int) -> int:
    if total_bytes <= 0:
        return 100
    return min(100, round(bytes_sent / total_bytes * 100))


def write_progress(percent: int, stream: TextIO | None = None) -> None:
    """Overwrite the current console line with ``<percent>% complete``."""
    out = stream or sys.stdout
    out.write(f"\r\x1b[2K{percent}% complete")
    out.flush()


class Spinner:
    """Cycle through ``frames`` on one console line until stopped."""

    def __init__(
        self,
        frames: Sequence[str] = SPINNER_FRAMES,
        tick_ms: int = 150,
        stream: TextIO | None = None,
    ) -> None:
        self._frames = frames
        self._tick = tick_ms / 1000
        self._stream = stream or sys.stdout
        self._task: Optional[asyncio.Task[None]] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._stopped

    def start(self) -> "Spinner":
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._spin())
        return self

    async def _spin(self) -> None:
        index = 0
        while True:
            await asyncio.sleep(self._tick)
            self._stream.write(f"\r{self._frames[index % len(self._frames)]}")
            self._stream.flush()
            index += 1

    async def stop(self) -> None:
        """Cancel the animation, wait for it to unwind and end the line.

        Later calls do nothing.
        """
        if self._task is None or self._stopped:
            return
        self._stopped = True
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._stream.write("\n")
        self._stream.flush()


__all__ = [
    "SPINNER_FRAMES",
    "Spinner",
    "animate_text",
    "progress_percent",
    "write_progress",
]
