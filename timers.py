"""Single-shot timers and the debounce primitive built on them."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from interfaces import TimerHandle, TimerScheduler

try:
    from PySide6.QtCore import QTimer
except Exception:  # pragma: no cover
    QTimer = None  # type: ignore

logger = logging.getLogger("pill_indicator.timers")


class QtTimerHandle:
    def __init__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(max(0, int(delay_ms)))

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.stop()
        try:
            timer.timeout.disconnect(self._fire)
        except (TypeError, RuntimeError):
            pass

    def _fire(self) -> None:
        if self._timer is None:
            return
        self._timer = None
        self._callback()


class QtTimerScheduler:
    def __init__(self) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 is not installed")

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        return QtTimerHandle(delay_ms, callback)


class Debouncer:
    """Runs ``callback`` once the trigger stream has been quiet for ``delay_ms``.

    Only the arguments of the most recent ``trigger`` are delivered.
    """

    def __init__(
        self,
        scheduler: TimerScheduler,
        delay_ms: int,
        callback: Callable[..., None],
    ) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self._args: Tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._args = args
        self._handle = self._scheduler.call_later(self._delay_ms, self._run)

    def cancel(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def flush(self) -> None:
        if self._handle is None:
            return
        self.cancel()
        self._run_callback()

    def _run(self) -> None:
        self._handle = None
        self._run_callback()

    def _run_callback(self) -> None:
        args, self._args = self._args, ()
        self._callback(*args)
