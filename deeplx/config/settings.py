"""
/**
 * @file deeplx/config/settings.py
 * @description 配置加载与合并（内置默认值 + config.json + config.local.json）。
 */
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(PACKAGE_ROOT, "config.json")
CONFIG_LOCAL_PATH = os.path.join(PACKAGE_ROOT, "config.local.json")

logger = logging.getLogger("config_loader")

DEFAULTS: Dict[str, Any] = {
    "server": {"host": "0.0.0.0", "port": 1188},
    "upstream": {
        "url": "https://www2.deepl.com/jsonrpc",
        "timeout": 30,
        "request_alternatives": 3,
    },
    "translate": {"default_target_lang": "EN"},
    # 12 requests per minute, evenly spaced
    "rate_limit": {"events": 12, "period": 60, "burst": 1},
}


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            value = json.load(f)
            return value if isinstance(value, dict) else {}
    except FileNotFoundError:
        return {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge_dicts(base[key], value)
        else:
            base[key] = value
    return base


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _positive_number(value: Any, fallback: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return fallback
    return value


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    @property
    def host(self) -> str:
        value = _section(self.raw, "server").get("host")
        return value if isinstance(value, str) and value else DEFAULTS["server"]["host"]

    @property
    def port(self) -> int:
        return int(_positive_number(_section(self.raw, "server").get("port"), DEFAULTS["server"]["port"]))

    @property
    def upstream_url(self) -> str:
        value = _section(self.raw, "upstream").get("url")
        return value if isinstance(value, str) and value else DEFAULTS["upstream"]["url"]

    @property
    def request_timeout(self) -> float:
        return _positive_number(_section(self.raw, "upstream").get("timeout"), DEFAULTS["upstream"]["timeout"])

    @property
    def request_alternatives(self) -> int:
        value = _section(self.raw, "upstream").get("request_alternatives")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return DEFAULTS["upstream"]["request_alternatives"]
        return value

    @property
    def default_target_lang(self) -> str:
        value = _section(self.raw, "translate").get("default_target_lang")
        return value.upper() if isinstance(value, str) and value else DEFAULTS["translate"]["default_target_lang"]

    @property
    def rate_limit_events(self) -> int:
        return int(_positive_number(_section(self.raw, "rate_limit").get("events"), DEFAULTS["rate_limit"]["events"]))

    @property
    def rate_limit_period(self) -> float:
        return _positive_number(_section(self.raw, "rate_limit").get("period"), DEFAULTS["rate_limit"]["period"])

    @property
    def rate_limit_burst(self) -> int:
        return int(_positive_number(_section(self.raw, "rate_limit").get("burst"), DEFAULTS["rate_limit"]["burst"]))


_CACHED_SETTINGS: Optional[Settings] = None
_LAST_LOAD_TIME = 0.0
_LAST_PATHS: Tuple[str, str] = ("", "")
_CONFIG_HASH = ""
_SETTINGS_LOCK = threading.Lock()


def _deep_diff(d1: Dict[str, Any], d2: Dict[str, Any], path="") -> list:
    diffs = []
    for k in set(d1.keys()) | set(d2.keys()):
        p = f"{path}.{k}" if path else k
        if k not in d1:
            diffs.append(f"Added: {p}")
        elif k not in d2:
            diffs.append(f"Removed: {p}")
        elif isinstance(d1[k], dict) and isinstance(d2[k], dict):
            diffs.extend(_deep_diff(d1[k], d2[k], p))
        elif d1[k] != d2[k]:
            diffs.append(f"Changed: {p} ({d1[k]} -> {d2[k]})")
    return diffs


def reload_settings(base_path: str = CONFIG_PATH, local_path: str = CONFIG_LOCAL_PATH) -> Settings:
    global _CACHED_SETTINGS, _LAST_LOAD_TIME, _LAST_PATHS, _CONFIG_HASH

    with _SETTINGS_LOCK:
        now = time.time()
        paths = (base_path, local_path)
        # Debounce: 500ms (watchdog fires several events per save)
        if _CACHED_SETTINGS and paths == _LAST_PATHS and (now - _LAST_LOAD_TIME < 0.5):
            return _CACHED_SETTINGS

        try:
            merged = copy.deepcopy(DEFAULTS)
            merged = _merge_dicts(merged, _load_json(base_path))
            merged = _merge_dicts(merged, _load_json(local_path))

            new_hash = hashlib.md5(json.dumps(merged, sort_keys=True).encode("utf-8")).hexdigest()
            if _CACHED_SETTINGS and new_hash == _CONFIG_HASH:
                _LAST_LOAD_TIME = now
                _LAST_PATHS = paths
                return _CACHED_SETTINGS

            is_reload = _CACHED_SETTINGS is not None
            if is_reload:
                diffs = _deep_diff(_CACHED_SETTINGS.raw, merged)
                if diffs:
                    logger.info(f"Config changes detected: {'; '.join(diffs)}")

            _CACHED_SETTINGS = Settings(raw=merged)
            _CONFIG_HASH = new_hash
            _LAST_LOAD_TIME = now
            _LAST_PATHS = paths

            if is_reload:
                logger.info("Configuration reloaded successfully.")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to reload config: {e}. Keeping old config.")
            if not _CACHED_SETTINGS:
                logger.warning("Initializing with default settings due to load failure.")
                _CACHED_SETTINGS = Settings(raw=copy.deepcopy(DEFAULTS))

    return _CACHED_SETTINGS


def load_settings(base_path: Optional[str] = None, local_path: Optional[str] = None) -> Settings:
    """
    Get current settings. Lazy loads on first call.
    Explicit paths always force a (debounced) load from those files.
    """
    if base_path or local_path:
        return reload_settings(base_path or CONFIG_PATH, local_path or CONFIG_LOCAL_PATH)
    if _CACHED_SETTINGS is None:
        return reload_settings()
    return _CACHED_SETTINGS
