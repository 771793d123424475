"""Runtime settings read from ``ORDERDRAFT_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_DEBOUNCE_MS = 750
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    catalog_path: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


def _text(value: object | None) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_path(value: object | None) -> Optional[Path]:
    text = _text(value)
    if text is None:
        return None
    return Path(text).expanduser().resolve()


def _to_int(value: object | None, default: int) -> int:
    text = _text(value)
    if text is None:
        return default
    try:
        number = int(float(text))
    except ValueError:
        return default
    return number if number >= 0 else default


def _to_float(value: object | None, default: float) -> float:
    text = _text(value)
    if text is None:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    return number if number > 0 else default


def _to_level(value: object | None) -> str:
    text = (_text(value) or "").upper()
    return text if text in _LOG_LEVELS else DEFAULT_LOG_LEVEL


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``env`` (defaults to ``os.environ``).

    Unparseable or out-of-range numbers fall back to their defaults.
    """
    env = os.environ if env is None else env
    return Settings(
        api_url=(_text(env.get("ORDERDRAFT_API_URL")) or DEFAULT_API_URL).rstrip("/"),
        api_token=_text(env.get("ORDERDRAFT_API_TOKEN")),
        debounce_ms=_to_int(env.get("ORDERDRAFT_DEBOUNCE_MS"), DEFAULT_DEBOUNCE_MS),
        http_timeout=_to_float(env.get("ORDERDRAFT_HTTP_TIMEOUT"), DEFAULT_HTTP_TIMEOUT),
        catalog_path=_to_path(env.get("ORDERDRAFT_CATALOG_PATH")),
        log_level=_to_level(env.get("ORDERDRAFT_LOG_LEVEL")),
    )
