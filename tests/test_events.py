from __future__ import annotations

import events
from events import EventBus


def test_emit_reaches_listeners_in_order() -> None:
    bus = EventBus()
    seen: list[tuple[str, object]] = []

    bus.listen(events.RESULT_ERROR, lambda p: seen.append(("a", p)))
    bus.listen(events.RESULT_ERROR, lambda p: seen.append(("b", p)))
    bus.emit(events.RESULT_ERROR, "boom")

    assert seen == [("a", "boom"), ("b", "boom")]


def test_topics_are_isolated() -> None:
    bus = EventBus()
    seen: list[object] = []

    bus.listen(events.DICTATION_START, seen.append)
    bus.emit(events.DICTATION_STOP)

    assert seen == []


def test_no_replay_for_late_listener() -> None:
    bus = EventBus()
    seen: list[object] = []

    bus.emit(events.RESULT_SUCCESS)
    bus.listen(events.RESULT_SUCCESS, seen.append)

    assert seen == []


def test_unlisten_is_idempotent() -> None:
    bus = EventBus()
    seen: list[object] = []

    unlisten = bus.listen(events.AUDIO_LEVEL, seen.append)
    unlisten()
    unlisten()
    bus.emit(events.AUDIO_LEVEL, {"rms": 0.5})

    assert seen == []
    assert bus.listener_count(events.AUDIO_LEVEL) == 0


def test_failing_listener_does_not_block_others() -> None:
    bus = EventBus()
    seen: list[object] = []

    def explode(payload: object) -> None:
        raise ValueError("bad payload")

    bus.listen(events.DICTATION_START, explode)
    bus.listen(events.DICTATION_START, seen.append)
    bus.emit(events.DICTATION_START)

    assert seen == [None]


def test_listener_may_unsubscribe_during_dispatch() -> None:
    bus = EventBus()
    seen: list[str] = []
    unlisten_holder: list = []

    def once(payload: object) -> None:
        seen.append("once")
        unlisten_holder[0]()

    unlisten_holder.append(bus.listen(events.RESULT_DISMISS, once))
    bus.listen(events.RESULT_DISMISS, lambda p: seen.append("always"))

    bus.emit(events.RESULT_DISMISS)
    bus.emit(events.RESULT_DISMISS)

    assert seen == ["once", "always", "always"]
