"""
/**
 * @file deeplx/main.py
 * @description FastAPI 应用入口（仅装配路由、中间件与配置热更新）。
 */
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from deeplx.config import CONFIG_LOCAL_PATH, CONFIG_PATH, load_settings, reload_settings
from deeplx.controllers import health_router, home_router, translate_router
from deeplx.services import TranslationService


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("deeplx")


class ConfigEventHandler(FileSystemEventHandler):
    """Reloads settings and retunes the live limiter when a config file changes."""

    def __init__(self, service: TranslationService):
        super().__init__()
        self.service = service

    def on_modified(self, event):
        if event.is_directory:
            return
        if os.path.abspath(event.src_path) not in (CONFIG_PATH, CONFIG_LOCAL_PATH):
            return
        try:
            self.service.apply_settings(reload_settings())
        except ValueError as e:
            logger.error(f"Rejected config change: {e}")


def create_app(service: Optional[TranslationService] = None, watch_config: bool = True) -> FastAPI:
    app = FastAPI(title="DeepLX")
    app.state.translation_service = service or TranslationService()
    app.state.observer = None

    @app.on_event("startup")
    async def startup_event():
        settings = load_settings()
        if watch_config:
            try:
                observer = Observer()
                observer.schedule(
                    ConfigEventHandler(app.state.translation_service),
                    os.path.dirname(CONFIG_PATH),
                    recursive=False,
                )
                observer.start()
                app.state.observer = observer
                logger.info(f"Config watcher started on {os.path.dirname(CONFIG_PATH)}")
            except OSError as e:
                logger.error(f"Failed to start config watcher: {e}")
        logger.info(f"DeepL X has been successfully launched! Listening on {settings.host}:{settings.port}")

    @app.on_event("shutdown")
    async def shutdown_event():
        observer = app.state.observer
        if observer:
            observer.stop()
            observer.join()
        app.state.translation_service.close()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(home_router)
    app.include_router(health_router)
    app.include_router(translate_router)
    return app


app = create_app()
