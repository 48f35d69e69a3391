"""QTimer-backed scheduler and the cross-thread event bridge on a real event loop."""

from __future__ import annotations

import threading

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

import events  # noqa: E402
from events import EventBus, QtEventBridge  # noqa: E402
from timers import Debouncer, QtTimerScheduler  # noqa: E402


@pytest.fixture(scope="module")
def app():  # noqa: ANN201
    return QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])


def _run_loop(app, ms: int) -> None:  # noqa: ANN001
    QtCore.QTimer.singleShot(ms, app.quit)
    app.exec()


def test_handle_fires_once_and_goes_inactive(app) -> None:  # noqa: ANN001
    scheduler = QtTimerScheduler()
    fired: list[str] = []

    handle = scheduler.call_later(5, lambda: fired.append("tick"))
    assert handle.active is True

    _run_loop(app, 100)

    assert fired == ["tick"]
    assert handle.active is False


def test_cancelled_handle_never_fires(app) -> None:  # noqa: ANN001
    scheduler = QtTimerScheduler()
    fired: list[str] = []

    handle = scheduler.call_later(5, lambda: fired.append("tick"))
    handle.cancel()
    handle.cancel()
    assert handle.active is False

    _run_loop(app, 100)

    assert fired == []


def test_handle_cancelled_from_another_callback_stays_silent(app) -> None:  # noqa: ANN001
    scheduler = QtTimerScheduler()
    fired: list[str] = []
    later = scheduler.call_later(40, lambda: fired.append("later"))

    def first() -> None:
        fired.append("first")
        later.cancel()

    scheduler.call_later(5, first)
    _run_loop(app, 150)

    assert fired == ["first"]
    assert later.active is False


def test_debouncer_on_qt_timers_delivers_last_trigger(app) -> None:  # noqa: ANN001
    calls: list[tuple] = []
    debouncer = Debouncer(QtTimerScheduler(), 30, lambda *args: calls.append(args))

    debouncer.trigger(1)
    debouncer.trigger(2)
    debouncer.trigger(3)
    _run_loop(app, 150)

    assert calls == [(3,)]


def test_bridge_delivers_worker_thread_emit_on_qt_thread(app) -> None:  # noqa: ANN001
    bridge = QtEventBridge(EventBus())
    seen: list[tuple[object, int]] = []
    bridge.listen(events.RESULT_ERROR, lambda p: seen.append((p, threading.get_ident())))
    qt_thread = threading.get_ident()

    worker = threading.Thread(target=bridge.emit, args=(events.RESULT_ERROR, "boom"))
    worker.start()
    worker.join()
    assert seen == []

    _run_loop(app, 100)

    assert seen == [("boom", qt_thread)]
