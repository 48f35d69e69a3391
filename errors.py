"""Shared user-facing messages."""

from __future__ import annotations

from models import IndicatorState

DEFAULT_ERROR_MESSAGE = "An error occurred"

STATE_LABELS = {
    IndicatorState.PROCESSING: "Processing...",
    IndicatorState.SUCCESS: "Done",
    IndicatorState.ERROR: "Error",
    IndicatorState.NO_SPEECH: "Waiting for you...",
}
