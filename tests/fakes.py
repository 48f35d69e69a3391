"""Deterministic stand-ins for the bus, timers, window and store."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple


class FakeTimer:
    def __init__(self, fire_at: int, seq: int, callback: Callable[[], None]) -> None:
        self.fire_at = fire_at
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.fired

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: timers only fire inside ``advance``."""

    def __init__(self) -> None:
        self.now = 0
        self._seq = 0
        self.timers: List[FakeTimer] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> FakeTimer:
        self._seq += 1
        timer = FakeTimer(self.now + delay_ms, self._seq, callback)
        self.timers.append(timer)
        return timer

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.timers if t.active)

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [t for t in self.timers if t.active and t.fire_at <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.fire_at, t.seq))
            self.now = timer.fire_at
            timer.fired = True
            timer.callback()
        self.now = target


class FakeEventSource:
    def __init__(self, failing_topics: Tuple[str, ...] = ()) -> None:
        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}
        self.failing_topics = failing_topics

    def listen(self, topic: str, handler: Callable[[Any], None]) -> Callable[[], None]:
        if topic in self.failing_topics:
            raise RuntimeError(f"cannot subscribe to {topic}")
        self.handlers.setdefault(topic, []).append(handler)

        def unlisten() -> None:
            if handler in self.handlers.get(topic, []):
                self.handlers[topic].remove(handler)

        return unlisten

    def emit(self, topic: str, payload: Any = None) -> None:
        for handler in list(self.handlers.get(topic, [])):
            handler(payload)

    def listener_count(self, topic: Optional[str] = None) -> int:
        if topic is not None:
            return len(self.handlers.get(topic, []))
        return sum(len(h) for h in self.handlers.values())


class FakeWindow:
    def __init__(self, fail_move: bool = False, fail_show: bool = False) -> None:
        self.moves: List[Tuple[int, int]] = []
        self.calls: List[str] = []
        self.fail_move = fail_move
        self.fail_show = fail_show

    def show(self) -> None:
        self.calls.append("show")
        if self.fail_show:
            raise RuntimeError("window gone")

    def hide(self) -> None:
        self.calls.append("hide")

    def move_to(self, x: int, y: int) -> None:
        if self.fail_move:
            raise RuntimeError("cannot move")
        self.moves.append((x, y))


class FakeStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})
        self.reads = 0
        self.writes: List[Tuple[str, str]] = []
        self.fail_read = False
        self.fail_write = False

    def get_item(self, key: str) -> Optional[str]:
        self.reads += 1
        if self.fail_read:
            raise OSError("store unavailable")
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_write:
            raise OSError("disk full")
        self.writes.append((key, value))
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        if self.fail_write:
            raise OSError("disk full")
        self.data.pop(key, None)
