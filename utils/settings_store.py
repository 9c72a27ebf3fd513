"""In-memory cache for app settings.

Values come from built-in defaults overlaid with ``config/app_settings.json``
(or the file named by ``APP_SETTINGS_PATH``).
"""

from __future__ import annotations

import os
import threading
from typing import Any

from utils.file_utils import load_json
from utils.log_utils import tprint

DEFAULT_SETTINGS_PATH = "config/app_settings.json"

DEFAULTS: dict[str, Any] = {
    "stats_base_url": "http://localhost:9000",
    "stats_timeout_secs": None,
    "report_max_attempts": 1,
    "report_retry_delay_secs": 1.0,
    "device_index": 0,
    "frame_width": None,
    "frame_height": None,
    "max_num_hands": 2,
    "detection_threshold": 0.6,
    "tracking_threshold": 0.6,
    "model_complexity": 1,
    "tick_secs": 1.0,
    "grace_secs": 5.0,
    "good_threshold_secs": 300,
    "mirror_preview": True,
    "feed_fps": 15,
    "log_level": "INFO",
    "http_access_log": False,
}

_lock = threading.Lock()
_settings_cache: dict[str, Any] = {}


def _settings_path() -> str:
    return os.getenv("APP_SETTINGS_PATH", DEFAULT_SETTINGS_PATH)


def refresh_settings() -> dict[str, Any]:
    """Reload settings from disk and replace the cache."""
    data = dict(DEFAULTS)
    data.update(load_json(_settings_path()))
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        return dict(_settings_cache)


def get_settings() -> dict[str, Any]:
    """Return a copy of the cached settings."""
    with _lock:
        cached = dict(_settings_cache)
    if not cached:
        return refresh_settings()
    return cached


def is_deep_logging() -> bool:
    """Return True when log_level requests deep tracing."""
    level = str(get_settings().get("log_level", "")).upper()
    return level in {"DEEP"}


def deep_log(message: str) -> None:
    """Emit a trace line when log_level is DEEP."""
    if is_deep_logging():
        tprint(message)
