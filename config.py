"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from models import ActivationMode

logger = logging.getLogger("pill_indicator.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "pill_indicator" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    # Key/value access, used as the position store.

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    # Settings

    def get_hotkey(self) -> str:
        value = self._read_all().get("hotkey")
        return value if isinstance(value, str) and value else "Key.alt_l"

    def set_hotkey(self, hotkey: str) -> None:
        data = self._read_all()
        data["hotkey"] = hotkey
        self._write_all(data)

    def get_activation_mode(self) -> ActivationMode:
        try:
            return ActivationMode(self._read_all().get("activation_mode", "toggle"))
        except ValueError:
            return ActivationMode.TOGGLE

    def set_activation_mode(self, mode: ActivationMode) -> None:
        data = self._read_all()
        data["activation_mode"] = ActivationMode(mode).value
        self._write_all(data)

    def get_success_dismiss_ms(self) -> int:
        return self._get_ms("success_dismiss_ms", 1500)

    def get_fade_out_ms(self) -> int:
        return self._get_ms("fade_out_ms", 200)

    def get_position_debounce_ms(self) -> int:
        return self._get_ms("position_debounce_ms", 300)

    def get_level_reset_ms(self) -> int:
        return self._get_ms("level_reset_ms", 0)

    def get_flush_position_on_teardown(self) -> bool:
        value = self._read_all().get("flush_position_on_teardown", False)
        return value if isinstance(value, bool) else False

    def get_log_level(self) -> str:
        value = str(self._read_all().get("log_level", "INFO")).upper()
        return value if value in LOG_LEVELS else "INFO"

    def _get_ms(self, key: str, default: int) -> int:
        value: Any = self._read_all().get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return default
        return value

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Config at %s is unreadable, using defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
