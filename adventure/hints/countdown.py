from __future__ import annotations

import math
from collections.abc import Callable
from typing import Protocol


TICK_MS = 50


class TimerHandle(Protocol):
    def cancel(self) -> None:  # pragma: no cover
        ...


class Scheduler(Protocol):
    """Anything with asyncio's `call_later` shape; an event loop qualifies."""

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle:  # pragma: no cover
        ...


class Countdown:
    """Cancellable periodic countdown.

    The total duration is fixed at construction. Each tick adds `interval_ms`
    to the elapsed time; the tick that reaches the total fires `on_complete`
    and stops rescheduling.
    """

    def __init__(
        self,
        *,
        duration_ms: int,
        scheduler: Scheduler,
        on_complete: Callable[[], None],
        interval_ms: int = TICK_MS,
    ) -> None:
        self.duration_ms = duration_ms
        self.interval_ms = interval_ms
        self.elapsed_ms = 0
        self._scheduler = scheduler
        self._on_complete = on_complete
        self._handle: TimerHandle | None = None
        self._finished = False
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def remaining_ms(self) -> int:
        return max(0, self.duration_ms - self.elapsed_ms)

    @property
    def remaining_fraction(self) -> float:
        if self.duration_ms <= 0:
            return 0.0
        return max(0.0, 1.0 - self.elapsed_ms / self.duration_ms)

    @property
    def remaining_seconds(self) -> int | None:
        if self._finished:
            return None
        return math.ceil(self.remaining_ms / 1000)

    def start(self) -> None:
        if self._handle is not None or self._finished or self._cancelled:
            return
        self._schedule()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.interval_ms / 1000, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        self.elapsed_ms += self.interval_ms
        if self.elapsed_ms >= self.duration_ms:
            self._handle = None
            self._finished = True
            self._on_complete()
            return
        self._schedule()
