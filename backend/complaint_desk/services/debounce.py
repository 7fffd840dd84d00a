"""Trailing-edge debounce for search keystrokes."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol

from complaint_desk.core.config import settings


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class LoopScheduler:
    """Schedules on the running asyncio loop."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class SearchDebouncer:
    """Emits the latest raw text once input has been quiet for ``delay`` seconds.

    Every ``push`` cancels the pending emission and restarts the timer.
    """

    def __init__(
        self,
        on_settled: Callable[[str], None],
        *,
        delay: float | None = None,
        scheduler: Scheduler | None = None,
    ):
        self._on_settled = on_settled
        self._delay = settings.search_debounce_seconds if delay is None else delay
        self._scheduler = scheduler or LoopScheduler()
        self._handle: Optional[TimerHandle] = None
        self._raw = ""

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, raw: str) -> None:
        self._raw = raw
        self.cancel()
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def reset(self, raw: str = "") -> None:
        self.cancel()
        self._raw = raw

    def flush(self) -> None:
        """Emit immediately if an emission is pending."""
        if self._handle is not None:
            self.cancel()
            self._on_settled(self._raw)

    def _fire(self) -> None:
        self._handle = None
        self._on_settled(self._raw)
