"""
/**
 * @file deeplx/utils/json_path.py
 * @description 点分路径取值（如 result.texts.0.text），用于未公开结构的 JSON。
 */
"""

from __future__ import annotations

from typing import Any


def lookup(data: Any, path: str, default: Any = None) -> Any:
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return default
            current = current[part]
        elif isinstance(current, list):
            try:
                index = int(part)
            except ValueError:
                return default
            if index < 0 or index >= len(current):
                return default
            current = current[index]
        else:
            return default
    return current


def lookup_str(data: Any, path: str) -> str:
    """String view of a value, mirroring how numeric error codes are compared."""
    value = lookup(data, path)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
