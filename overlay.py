"""Floating pill window that renders the indicator snapshot."""

from __future__ import annotations

from typing import Callable, Optional

from errors import STATE_LABELS
from models import IndicatorSnapshot, IndicatorState
from waveform import BAR_COUNT, bar_heights

try:
    from PySide6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, QRectF, Qt
    from PySide6.QtGui import QColor, QPainter
    from PySide6.QtWidgets import QWidget
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QEasingCurve = None  # type: ignore
    QPoint = None  # type: ignore
    QPropertyAnimation = None  # type: ignore
    QRectF = None  # type: ignore
    QColor = None  # type: ignore
    QPainter = None  # type: ignore
    QWidget = object  # type: ignore

PILL_WIDTH = 280
PILL_HEIGHT = 52
BAR_WIDTH = 3
BAR_GAP = 3

COLOR_BACKGROUND = "#1E1E22"
COLOR_ACCENT = "#7C8CFF"
COLOR_TEXT = "#B8B8C0"
COLOR_SUCCESS = "#4CD38A"
COLOR_ERROR = "#FF6B6B"
COLOR_WARNING = "#F5B942"

MovedCallback = Callable[[int, int], None]


class PillWindow(QWidget):
    def __init__(self, fade_ms: int = 200, on_moved: Optional[MovedCallback] = None) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint
            | Qt.FramelessWindowHint
            | Qt.Tool
            | Qt.WindowDoesNotAcceptFocus
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setFixedSize(PILL_WIDTH, PILL_HEIGHT)

        self._fade_ms = fade_ms
        self._on_moved = on_moved
        self._snapshot = IndicatorSnapshot()
        self._drag_offset: Optional[QPoint] = None
        self._animation = QPropertyAnimation(self, b"windowOpacity")
        self._animation.setEasingCurve(QEasingCurve.OutCubic)

    def set_moved_callback(self, on_moved: Optional[MovedCallback]) -> None:
        self._on_moved = on_moved

    # IndicatorWindow protocol

    def show(self) -> None:
        self.setWindowOpacity(0.0)
        super().show()
        self._animate_opacity(1.0)

    def move_to(self, x: int, y: int) -> None:
        self.move(x, y)

    # Rendering

    def render_snapshot(self, snapshot: IndicatorSnapshot) -> None:
        was_fading = self._snapshot.is_fading_out
        self._snapshot = snapshot
        if snapshot.is_fading_out and not was_fading:
            self._animate_opacity(0.0)
        elif was_fading and not snapshot.is_fading_out and snapshot.is_visible:
            self._animate_opacity(1.0)
        self.update()

    def _animate_opacity(self, target: float) -> None:
        self._animation.stop()
        self._animation.setDuration(self._fade_ms)
        self._animation.setStartValue(self.windowOpacity())
        self._animation.setEndValue(target)
        self._animation.start()

    def paintEvent(self, event) -> None:  # noqa: ANN001, N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(COLOR_BACKGROUND))
        radius = PILL_HEIGHT / 2
        painter.drawRoundedRect(QRectF(self.rect()), radius, radius)

        state = self._snapshot.state
        if state == IndicatorState.RECORDING:
            self._paint_bars(painter, bar_heights(self._snapshot.audio_level), COLOR_ACCENT)
        elif state == IndicatorState.NO_SPEECH:
            self._paint_bars(painter, bar_heights(0.0, flat=True), COLOR_WARNING, offset=-60)
            self._paint_label(painter, STATE_LABELS[state], COLOR_WARNING, offset=40)
        elif state == IndicatorState.PROCESSING:
            self._paint_label(painter, STATE_LABELS[state], COLOR_TEXT)
        elif state == IndicatorState.SUCCESS:
            self._paint_label(painter, STATE_LABELS[state], COLOR_SUCCESS)
        elif state == IndicatorState.ERROR:
            text = self._snapshot.error_message or STATE_LABELS[state]
            self._paint_label(painter, text, COLOR_ERROR)
        painter.end()

    def _paint_bars(self, painter: QPainter, heights: list[float], color: str, offset: int = 0) -> None:
        painter.setBrush(QColor(color))
        total = BAR_COUNT * BAR_WIDTH + (BAR_COUNT - 1) * BAR_GAP
        x = (self.width() - total) / 2 + offset
        mid = self.height() / 2
        for height in heights:
            painter.drawRoundedRect(
                QRectF(x, mid - height / 2, BAR_WIDTH, height),
                BAR_WIDTH / 2,
                BAR_WIDTH / 2,
            )
            x += BAR_WIDTH + BAR_GAP

    def _paint_label(self, painter: QPainter, text: str, color: str, offset: int = 0) -> None:
        painter.setPen(QColor(color))
        rect = QRectF(self.rect()).adjusted(16 + offset, 0, -16 + offset, 0)
        elided = painter.fontMetrics().elidedText(text, Qt.ElideRight, int(rect.width()))
        painter.drawText(rect, Qt.AlignCenter, elided)
        painter.setPen(Qt.NoPen)

    # Dragging

    def mousePressEvent(self, event) -> None:  # noqa: ANN001, N802
        if event.button() == Qt.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event) -> None:  # noqa: ANN001, N802
        if self._drag_offset is not None and event.buttons() & Qt.LeftButton:
            self.move(event.globalPosition().toPoint() - self._drag_offset)
            event.accept()

    def mouseReleaseEvent(self, event) -> None:  # noqa: ANN001, N802
        self._drag_offset = None

    def moveEvent(self, event) -> None:  # noqa: ANN001, N802
        super().moveEvent(event)
        if self._on_moved is not None:
            pos = event.pos()
            self._on_moved(pos.x(), pos.y())
