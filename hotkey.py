"""Global activation hotkey based on pynput."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

import events
from models import ActivationMode, IndicatorState

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore

logger = logging.getLogger("pill_indicator.hotkey")

Emit = Callable[[str, Any], None]
StateGetter = Callable[[], IndicatorState]

DISMISSABLE_STATES = (IndicatorState.ERROR, IndicatorState.NO_SPEECH)

# A hold-mode release sooner than this after the press keeps recording.
HOLD_THRESHOLD_MS = 300


class ActivationHotkey:
    """Turns hotkey presses into dictation lifecycle events.

    While the indicator shows an error or is waiting for speech, a press
    dismisses it instead of starting a new dictation.
    """

    def __init__(
        self,
        emit: Emit,
        current_state: StateGetter,
        hotkey_name: str = "Key.alt_l",
        mode: ActivationMode = ActivationMode.TOGGLE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._emit = emit
        self._current_state = current_state
        self._hotkey_name = hotkey_name
        self._mode = ActivationMode(mode)
        self._listener: Optional[object] = None
        self._pressed = False
        self._recording = False
        self._paused = False
        self._clock = clock
        self._press_started: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def mode(self) -> ActivationMode:
        return self._mode

    @property
    def paused(self) -> bool:
        return self._paused

    def set_paused(self, paused: bool) -> None:
        self._paused = paused

    def start(self) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")

        def _on_press(key: object) -> None:
            if str(key) == self._hotkey_name:
                self.press()

        def _on_release(key: object) -> None:
            if str(key) == self._hotkey_name:
                self.release()

        self._listener = keyboard.Listener(on_press=_on_press, on_release=_on_release)
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None

    def press(self) -> None:
        with self._lock:
            if self._pressed:
                return
            self._pressed = True
            self._press_started = self._clock()
            topic = self._topic_for_press()
        if topic is not None:
            self._publish(topic)

    def release(self) -> None:
        with self._lock:
            if not self._pressed:
                return
            self._pressed = False
            started, self._press_started = self._press_started, None
            topic = None
            if self._mode == ActivationMode.HOLD and self._recording and not self._paused:
                held_ms = HOLD_THRESHOLD_MS if started is None else (self._clock() - started) * 1000
                if held_ms >= HOLD_THRESHOLD_MS:
                    self._recording = False
                    topic = events.DICTATION_STOP
        if topic is not None:
            self._publish(topic)

    def _topic_for_press(self) -> Optional[str]:
        if self._paused:
            return None
        if self._current_state() in DISMISSABLE_STATES:
            self._recording = False
            return events.RESULT_DISMISS
        if self._recording:
            if self._mode == ActivationMode.HOLD:
                return None
            self._recording = False
            return events.DICTATION_STOP
        self._recording = True
        return events.DICTATION_START

    def _publish(self, topic: str) -> None:
        logger.info("Hotkey: emitting %s", topic)
        try:
            self._emit(topic, None)
        except Exception:
            logger.warning("Could not emit %s", topic, exc_info=True)
