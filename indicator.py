"""State-machine that turns dictation events into the indicator snapshot."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, List, Optional

import events
from errors import DEFAULT_ERROR_MESSAGE
from interfaces import EventSource, IndicatorWindow, TimerHandle, TimerScheduler, Unlisten
from models import AudioLevel, IndicatorSnapshot, IndicatorState
from timers import Debouncer

logger = logging.getLogger("pill_indicator.indicator")

SUCCESS_DISMISS_MS = 1500
FADE_OUT_MS = 200

ChangeCallback = Callable[[IndicatorSnapshot], None]


class IndicatorStateMachine:
    def __init__(
        self,
        event_source: EventSource,
        scheduler: TimerScheduler,
        success_dismiss_ms: int = SUCCESS_DISMISS_MS,
        fade_out_ms: int = FADE_OUT_MS,
        level_reset_ms: int = 0,
        on_change: Optional[ChangeCallback] = None,
    ) -> None:
        self._events = event_source
        self._scheduler = scheduler
        self._success_dismiss_ms = success_dismiss_ms
        self._fade_out_ms = fade_out_ms
        self._on_change = on_change

        self._snapshot = IndicatorSnapshot()
        self._dismiss_timer: Optional[TimerHandle] = None
        self._fade_timer: Optional[TimerHandle] = None
        self._level_decay: Optional[Debouncer] = None
        if level_reset_ms > 0:
            self._level_decay = Debouncer(scheduler, level_reset_ms, self._reset_level)
        self._unlisteners: List[Unlisten] = []
        self._mounted = False

    @property
    def snapshot(self) -> IndicatorSnapshot:
        return self._snapshot

    @property
    def state(self) -> IndicatorState:
        return self._snapshot.state

    @property
    def audio_level(self) -> float:
        return self._snapshot.audio_level

    @property
    def error_message(self) -> str:
        return self._snapshot.error_message

    @property
    def is_fading_out(self) -> bool:
        return self._snapshot.is_fading_out

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Subscribe to every topic. A topic that fails to subscribe is skipped."""
        if self._mounted:
            return
        self._mounted = True
        routes = (
            (events.DICTATION_START, self.handle_start),
            (events.DICTATION_STOP, self.handle_stop),
            (events.RESULT_SUCCESS, self.handle_success),
            (events.RESULT_ERROR, self.handle_error),
            (events.AUDIO_LEVEL, self.handle_audio_level),
            (events.AUDIO_NO_SPEECH, self.handle_no_speech),
            (events.RESULT_DISMISS, self.handle_dismiss),
        )
        for topic, handler in routes:
            try:
                self._unlisteners.append(self._events.listen(topic, handler))
            except Exception:
                logger.warning("Could not subscribe to %s", topic, exc_info=True)

    def unmount(self) -> None:
        self._clear_timers()
        if self._level_decay is not None:
            self._level_decay.cancel()
        unlisteners, self._unlisteners = self._unlisteners, []
        for unlisten in unlisteners:
            try:
                unlisten()
            except Exception:
                logger.warning("Unsubscribe failed", exc_info=True)
        self._mounted = False

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def handle_start(self, payload: Any = None) -> None:
        self._transition_to(IndicatorState.RECORDING)

    def handle_stop(self, payload: Any = None) -> None:
        self._transition_to(IndicatorState.PROCESSING)

    def handle_success(self, payload: Any = None) -> None:
        self._transition_to(IndicatorState.SUCCESS)
        self._dismiss_timer = self._scheduler.call_later(
            self._success_dismiss_ms, self._on_dismiss_timer
        )

    def handle_error(self, payload: Any = None) -> None:
        self._transition_to(IndicatorState.ERROR, error=_error_text(payload))

    def handle_audio_level(self, payload: Any = None) -> None:
        level = AudioLevel.from_payload(payload)
        self._update(audio_level=level.rms)
        if self._level_decay is not None:
            self._level_decay.trigger()

    def handle_no_speech(self, payload: Any = None) -> None:
        if self._snapshot.state != IndicatorState.RECORDING:
            logger.debug("Ignoring no-speech while %s", self._snapshot.state.value)
            return
        self._update(state=IndicatorState.NO_SPEECH)

    def handle_dismiss(self, payload: Any = None) -> None:
        self._start_fade()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _transition_to(self, next_state: IndicatorState, error: Optional[str] = None) -> None:
        self._clear_timers()
        logger.debug("Indicator %s -> %s", self._snapshot.state.value, next_state.value)
        if error is None:
            self._update(state=next_state, is_fading_out=False)
        else:
            self._update(state=next_state, is_fading_out=False, error_message=error)

    def _on_dismiss_timer(self) -> None:
        self._dismiss_timer = None
        if self._snapshot.state != IndicatorState.SUCCESS:
            return
        self._start_fade()

    def _start_fade(self) -> None:
        self._clear_timers()
        self._update(is_fading_out=True)
        self._fade_timer = self._scheduler.call_later(self._fade_out_ms, self._on_fade_timer)

    def _on_fade_timer(self) -> None:
        self._fade_timer = None
        self._update(state=IndicatorState.IDLE, is_fading_out=False)

    def _reset_level(self) -> None:
        self._update(audio_level=0.0)

    def _clear_timers(self) -> None:
        if self._dismiss_timer is not None:
            self._dismiss_timer.cancel()
            self._dismiss_timer = None
        self._cancel_fade_timer()

    def _cancel_fade_timer(self) -> None:
        if self._fade_timer is not None:
            self._fade_timer.cancel()
            self._fade_timer = None

    def _update(self, **changes: Any) -> None:
        updated = dataclasses.replace(self._snapshot, **changes)
        if updated == self._snapshot:
            return
        self._snapshot = updated
        if self._on_change:
            try:
                self._on_change(updated)
            except Exception:
                logger.warning("Snapshot listener failed", exc_info=True)


def _error_text(payload: Any) -> str:
    if payload is None:
        return DEFAULT_ERROR_MESSAGE
    text = payload if isinstance(payload, str) else str(payload)
    return text if text.strip() else DEFAULT_ERROR_MESSAGE


class WindowVisibility:
    """Shows or hides the window when the snapshot crosses the visible edge."""

    def __init__(self, window: IndicatorWindow) -> None:
        self._window = window
        self._visible: Optional[bool] = None

    def apply(self, snapshot: IndicatorSnapshot) -> None:
        visible = snapshot.is_visible
        if visible == self._visible:
            return
        self._visible = visible
        try:
            if visible:
                self._window.show()
            else:
                self._window.hide()
        except Exception:
            logger.warning("Could not %s indicator window", "show" if visible else "hide", exc_info=True)
