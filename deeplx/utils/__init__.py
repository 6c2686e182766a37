"""
/**
 * @file deeplx/utils/__init__.py
 * @description 工具函数导出。
 */
"""

from .json_path import lookup, lookup_str

__all__ = ["lookup", "lookup_str"]
