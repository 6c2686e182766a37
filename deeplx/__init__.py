"""
/**
 * @file deeplx/__init__.py
 * @description DeepLX 代理服务包。
 */
"""

__version__ = "0.1.0"
