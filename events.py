"""Event topics and the in-process publish/subscribe channel."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List

from interfaces import Handler, Unlisten

try:
    from PySide6.QtCore import QObject, Qt, Signal
except Exception:  # pragma: no cover
    QObject = object  # type: ignore
    Qt = None  # type: ignore
    Signal = None  # type: ignore

logger = logging.getLogger("pill_indicator.events")

DICTATION_START = "dictation-start"
DICTATION_STOP = "dictation-stop"
RESULT_SUCCESS = "result-success"
RESULT_ERROR = "result-error"
AUDIO_LEVEL = "audio-level"
AUDIO_NO_SPEECH = "audio-no-speech"
RESULT_DISMISS = "result-dismiss"

ALL_TOPICS = (
    DICTATION_START,
    DICTATION_STOP,
    RESULT_SUCCESS,
    RESULT_ERROR,
    AUDIO_LEVEL,
    AUDIO_NO_SPEECH,
    RESULT_DISMISS,
)


class EventBus:
    """Synchronous topic dispatcher. Late listeners never see earlier events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: Dict[str, List[Handler]] = {}

    def listen(self, topic: str, handler: Handler) -> Unlisten:
        with self._lock:
            self._handlers.setdefault(topic, []).append(handler)

        def unlisten() -> None:
            with self._lock:
                handlers = self._handlers.get(topic, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unlisten

    def emit(self, topic: str, payload: Any = None) -> None:
        with self._lock:
            handlers = list(self._handlers.get(topic, []))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.warning("Handler for %s failed", topic, exc_info=True)

    def listener_count(self, topic: str) -> int:
        with self._lock:
            return len(self._handlers.get(topic, []))


if Signal is not None:

    class _BridgeSignals(QObject):
        event_signal = Signal(str, object)  # topic, payload

else:  # pragma: no cover
    _BridgeSignals = None  # type: ignore


class QtEventBridge:
    """Event source whose ``emit`` may be called from any thread.

    Emissions are queued onto the Qt thread before reaching listeners.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        if _BridgeSignals is None:
            raise RuntimeError("PySide6 is not installed")
        self._bus = bus or EventBus()
        self._signals = _BridgeSignals()
        self._signals.event_signal.connect(self._bus.emit, Qt.QueuedConnection)

    def listen(self, topic: str, handler: Handler) -> Unlisten:
        return self._bus.listen(topic, handler)

    def emit(self, topic: str, payload: Any = None) -> None:
        self._signals.event_signal.emit(topic, payload)
