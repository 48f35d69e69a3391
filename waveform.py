"""Audio level to waveform bar heights."""

from __future__ import annotations

import math

import numpy as np

BAR_COUNT = 14
MIN_HEIGHT = 4.0
MAX_HEIGHT = 28.0


def _build_bar_weights(count: int = BAR_COUNT) -> np.ndarray:
    """Bell curve: center bars respond more than edges."""
    if count <= 1:
        return np.ones(count)
    center = (count - 1) / 2
    dist = np.abs(np.arange(count) - center) / center
    return 0.5 + 0.5 * (1 - dist * dist)


BAR_WEIGHTS = _build_bar_weights()


def bar_heights(level: float, flat: bool = False) -> list[float]:
    """Return one height per bar, always within [MIN_HEIGHT, MAX_HEIGHT]."""
    if flat or not isinstance(level, (int, float)) or math.isnan(level) or level <= 0:
        return [MIN_HEIGHT] * BAR_COUNT
    heights = MIN_HEIGHT + (MAX_HEIGHT - MIN_HEIGHT) * level * BAR_WEIGHTS
    return np.clip(heights, MIN_HEIGHT, MAX_HEIGHT).tolist()
