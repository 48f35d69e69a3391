"""Application entrypoint."""

from __future__ import annotations

import logging
import sys

from config import JsonConfigStore
from events import EventBus, QtEventBridge
from hotkey import ActivationHotkey
from indicator import IndicatorStateMachine, WindowVisibility
from models import IndicatorSnapshot
from overlay import PillWindow
from position import PositionPersistence
from timers import QtTimerScheduler

try:
    from PySide6.QtCore import QSize
    from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger("pill_indicator")

ICON_ACTIVE = "#7C8CFF"
ICON_PAUSED = "#888888"


def _create_icon(color: str = ICON_ACTIVE, size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        setup_logging(self.config_store.get_log_level())

        self.bus = QtEventBridge(EventBus())
        scheduler = QtTimerScheduler()
        fade_ms = self.config_store.get_fade_out_ms()

        self.window = PillWindow(fade_ms=fade_ms)
        self.visibility = WindowVisibility(self.window)
        self.indicator = IndicatorStateMachine(
            event_source=self.bus,
            scheduler=scheduler,
            success_dismiss_ms=self.config_store.get_success_dismiss_ms(),
            fade_out_ms=fade_ms,
            level_reset_ms=self.config_store.get_level_reset_ms(),
            on_change=self._on_snapshot,
        )
        self.position = PositionPersistence(
            window=self.window,
            store=self.config_store,
            scheduler=scheduler,
            debounce_ms=self.config_store.get_position_debounce_ms(),
            flush_on_teardown=self.config_store.get_flush_position_on_teardown(),
        )
        self.hotkey = ActivationHotkey(
            emit=self.bus.emit,
            current_state=lambda: self.indicator.state,
            hotkey_name=self.config_store.get_hotkey(),
            mode=self.config_store.get_activation_mode(),
        )

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon(ICON_ACTIVE))
        self.tray.setToolTip("Dictation indicator")
        self._setup_menu()
        self.tray.show()

    def _setup_menu(self) -> None:
        menu = QMenu()

        self._pause_action = QAction("Pause Hotkey", menu)
        self._pause_action.setCheckable(True)
        self._pause_action.toggled.connect(self._set_paused)
        menu.addAction(self._pause_action)

        reset_action = QAction("Reset Position", menu)
        reset_action.triggered.connect(self._reset_position)
        menu.addAction(reset_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _set_paused(self, paused: bool) -> None:
        self.hotkey.set_paused(paused)
        self.tray.setIcon(_create_icon(ICON_PAUSED if paused else ICON_ACTIVE))

    def _reset_position(self) -> None:
        self.position.reset()

    def _on_snapshot(self, snapshot: IndicatorSnapshot) -> None:
        self.window.render_snapshot(snapshot)
        self.visibility.apply(snapshot)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.indicator.mount()
        self.position.mount()
        self.window.set_moved_callback(self.position.on_moved)
        self.visibility.apply(self.indicator.snapshot)
        try:
            self.hotkey.start()
        except Exception:
            logger.warning("Hotkey disabled", exc_info=True)
        self.app.aboutToQuit.connect(self.shutdown)
        return self.app.exec()

    def shutdown(self) -> None:
        self.hotkey.stop()
        self.window.set_moved_callback(None)
        self.position.teardown()
        self.indicator.unmount()
        self.tray.hide()

    def quit(self) -> None:
        self.app.quit()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
