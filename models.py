"""Core data models for the indicator."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class IndicatorState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"
    NO_SPEECH = "noSpeech"


class ActivationMode(str, Enum):
    TOGGLE = "toggle"
    HOLD = "hold"


@dataclass(frozen=True)
class IndicatorSnapshot:
    state: IndicatorState = IndicatorState.IDLE
    audio_level: float = 0.0
    error_message: str = ""
    is_fading_out: bool = False

    @property
    def is_visible(self) -> bool:
        return self.state != IndicatorState.IDLE or self.is_fading_out


@dataclass
class AudioLevel:
    rms: float = 0.0
    timestamp: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "AudioLevel":
        """Build from a bus payload: a dict, an object with ``rms`` or a bare number.

        Anything unusable degrades to silence.
        """
        if isinstance(payload, AudioLevel):
            raw_rms, raw_ts = payload.rms, payload.timestamp
        elif isinstance(payload, dict):
            raw_rms = payload.get("rms")
            raw_ts = payload.get("timestamp", 0)
        elif isinstance(payload, (int, float)) and not isinstance(payload, bool):
            raw_rms, raw_ts = payload, 0
        else:
            raw_rms = getattr(payload, "rms", None)
            raw_ts = getattr(payload, "timestamp", 0)
        return cls(rms=_to_unit_float(raw_rms), timestamp=_to_int(raw_ts))


@dataclass(frozen=True)
class SavedPosition:
    x: int
    y: int

    def to_json(self) -> str:
        return json.dumps({"x": self.x, "y": self.y})

    @classmethod
    def from_json(cls, raw: Optional[str]) -> Optional["SavedPosition"]:
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        x, y = data.get("x"), data.get("y")
        if not _is_coordinate(x) or not _is_coordinate(y):
            return None
        return cls(x=int(x), y=int(y))


def _is_coordinate(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _to_unit_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return min(1.0, max(0.0, number))


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
