"""Protocol interfaces used by the indicator and its collaborators."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

Handler = Callable[[Any], None]
Unlisten = Callable[[], None]


class EventSource(Protocol):
    def listen(self, topic: str, handler: Handler) -> Unlisten: ...


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class PositionStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class IndicatorWindow(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...

    def move_to(self, x: int, y: int) -> None: ...
