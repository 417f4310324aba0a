"""Interactive prompt layer: collect named string fields from the user."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

InputFunc = Callable[[str], str]


@dataclass(frozen=True)
class Question:
    name: str
    message: str
    default: Optional[str] = None
    filter: Optional[Callable[[str], str]] = None

    def render(self) -> str:
        if self.default:
            return f"? {self.message} ({self.default}) "
        return f"? {self.message} "


def strip_wrapping_quotes(value: str) -> str:
    """Drop the quotes a terminal adds around drag-and-dropped paths."""
    if len(value) >= 2 and value[0] in "'\"" and value[-1] in "'\"":
        return value[1:-1]
    return value


class Prompter:
    """Ask questions on the console without blocking the event loop.

    Each read happens on a daemon thread rather than the loop's default executor, so
    cancelling a pending prompt (Ctrl+C) lets ``asyncio.run`` shut down immediately
    instead of waiting for ``input()`` to return.
    """

    def __init__(self, input_func: InputFunc = input) -> None:
        self._input = input_func

    async def _read(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()

        def _settle(value: Optional[str], error: Optional[BaseException]) -> None:
            if answer.done():
                return
            if error is not None:
                answer.set_exception(error)
            else:
                answer.set_result(value or "")

        def _worker() -> None:
            try:
                value, error = self._input(prompt), None
            except Exception as exc:  # pylint: disable=broad-except
                value, error = None, exc
            try:
                loop.call_soon_threadsafe(_settle, value, error)
            except RuntimeError:
                # The loop already closed after the prompt was abandoned.
                pass

        threading.Thread(target=_worker, name="prompt-reader", daemon=True).start()
        return await answer

    async def ask(self, questions: Iterable[Question]) -> Dict[str, str]:
        answers: Dict[str, str] = {}
        for question in questions:
            raw = await self._read(question.render())
            value = raw.strip() or (question.default or "")
            if question.filter is not None:
                value = question.filter(value)
            answers[question.name] = value
        return answers

    async def acknowledge(self, message: str = "Press Enter to continue") -> None:
        await self._read(f"? {message} ")


__all__ = ["InputFunc", "Prompter", "Question", "strip_wrapping_quotes"]
