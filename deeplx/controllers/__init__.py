"""
/**
 * @file deeplx/controllers/__init__.py
 * @description 控制器（路由）导出。
 */
"""

from .health_controller import router as health_router
from .home_controller import router as home_router
from .translate_controller import router as translate_router

__all__ = [
    "health_router",
    "home_router",
    "translate_router",
]
