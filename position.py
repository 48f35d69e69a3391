"""Persist and restore the indicator window position."""

from __future__ import annotations

import logging
from typing import Optional

from interfaces import IndicatorWindow, PositionStore, TimerScheduler
from models import SavedPosition
from timers import Debouncer

logger = logging.getLogger("pill_indicator.position")

POSITION_KEY = "pill-position"
SAVE_DEBOUNCE_MS = 300


class PositionPersistence:
    """Restores the saved position once per mount and saves moves, debounced.

    A drag produces a stream of move notifications; only the last one of a
    quiet ``debounce_ms`` window reaches the store. On teardown the pending
    save is dropped unless ``flush_on_teardown`` is set.
    """

    def __init__(
        self,
        window: IndicatorWindow,
        store: PositionStore,
        scheduler: TimerScheduler,
        debounce_ms: int = SAVE_DEBOUNCE_MS,
        flush_on_teardown: bool = False,
    ) -> None:
        self._window = window
        self._store = store
        self._flush_on_teardown = flush_on_teardown
        self._save = Debouncer(scheduler, debounce_ms, self._write)
        self._restored = False

    @property
    def save_pending(self) -> bool:
        return self._save.pending

    def mount(self) -> None:
        self.restore()

    def restore(self) -> Optional[SavedPosition]:
        if self._restored:
            return None
        self._restored = True

        position = self._read()
        if position is None:
            return None
        try:
            self._window.move_to(position.x, position.y)
        except Exception:
            logger.warning("Could not move window to saved position", exc_info=True)
            return None
        logger.debug("Restored indicator position to %s,%s", position.x, position.y)
        return position

    def on_moved(self, x: int, y: int) -> None:
        self._save.trigger(SavedPosition(x=int(x), y=int(y)))

    def reset(self) -> None:
        """Forget the saved position, including a save still waiting to be written."""
        self._save.cancel()
        try:
            self._store.remove_item(POSITION_KEY)
        except Exception:
            logger.warning("Could not clear saved position", exc_info=True)

    def teardown(self) -> None:
        if self._flush_on_teardown:
            self._save.flush()
        else:
            self._save.cancel()
        self._restored = False

    def _read(self) -> Optional[SavedPosition]:
        try:
            raw = self._store.get_item(POSITION_KEY)
        except Exception:
            logger.warning("Could not read saved position", exc_info=True)
            return None
        position = SavedPosition.from_json(raw)
        if position is None and raw:
            logger.info("Ignoring malformed saved position %r", raw)
        return position

    def _write(self, position: SavedPosition) -> None:
        try:
            self._store.set_item(POSITION_KEY, position.to_json())
        except Exception:
            logger.warning("Position write skipped", exc_info=True)
