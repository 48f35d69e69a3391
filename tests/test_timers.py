from __future__ import annotations

from fakes import FakeScheduler
from timers import Debouncer


def test_debouncer_delivers_last_arguments_once() -> None:
    scheduler = FakeScheduler()
    calls: list[tuple] = []
    debouncer = Debouncer(scheduler, 100, lambda *args: calls.append(args))

    debouncer.trigger(1)
    scheduler.advance(60)
    debouncer.trigger(2)
    scheduler.advance(60)
    debouncer.trigger(3)
    assert debouncer.pending is True

    scheduler.advance(100)

    assert calls == [(3,)]
    assert debouncer.pending is False


def test_debouncer_cancel_prevents_callback() -> None:
    scheduler = FakeScheduler()
    calls: list[tuple] = []
    debouncer = Debouncer(scheduler, 100, lambda *args: calls.append(args))

    debouncer.trigger("x")
    debouncer.cancel()
    scheduler.advance(1000)

    assert calls == []
    assert scheduler.active_count == 0


def test_debouncer_flush_runs_pending_immediately() -> None:
    scheduler = FakeScheduler()
    calls: list[tuple] = []
    debouncer = Debouncer(scheduler, 100, lambda *args: calls.append(args))

    debouncer.trigger("x", 1)
    debouncer.flush()
    scheduler.advance(1000)

    assert calls == [("x", 1)]


def test_debouncer_flush_without_pending_is_noop() -> None:
    scheduler = FakeScheduler()
    calls: list[tuple] = []
    debouncer = Debouncer(scheduler, 100, lambda *args: calls.append(args))

    debouncer.flush()

    assert calls == []
