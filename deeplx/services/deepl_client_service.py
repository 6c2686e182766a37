"""
/**
 * @file deeplx/services/deepl_client_service.py
 * @description DeepL 上游调用封装（模拟 iOS 客户端请求头，先过限流再发出）。
 * @note 所有出站请求都经由 DeepLClient.post，限流对进程内全部调用生效。
 */
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

import requests
from aiolimiter import AsyncLimiter
from starlette.concurrency import run_in_threadpool

from deeplx.config import Settings, load_settings
from deeplx.services.errors import OutboundRateLimited, UpstreamUnavailable
from deeplx.services.rate_limiter import RateLimitWaitCancelled, acquire, build_limiter


logger = logging.getLogger("deepl_client")

# Literal iOS app fingerprint; the upstream refuses requests without it.
IOS_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "x-app-os-name": "iOS",
    "x-app-os-version": "16.3.0",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "x-app-device": "iPhone13,2",
    "User-Agent": "DeepL-iOS/2.6.0 iOS 16.3.0 (iPhone13,2)",
    "x-app-build": "353933",
    "x-app-version": "2.6",
    "Connection": "keep-alive",
}


def limiter_from_settings(settings: Settings) -> AsyncLimiter:
    return build_limiter(settings.rate_limit_events, settings.rate_limit_period, burst=settings.rate_limit_burst)


class DeepLClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        limiter: Optional[AsyncLimiter] = None,
        session: Optional[requests.Session] = None,
    ):
        self._initial_settings = settings
        self.limiter = limiter or limiter_from_settings(self.settings)
        self._session = session or requests.Session()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    async def post(self, payload: bytes, cancel: Optional[asyncio.Event] = None) -> Tuple[int, bytes]:
        try:
            await acquire(self.limiter, cancel)
        except RateLimitWaitCancelled as e:
            logger.warning(f"Outbound call abandoned: {e}")
            raise OutboundRateLimited()
        return await run_in_threadpool(self._send, payload)

    def _send(self, payload: bytes) -> Tuple[int, bytes]:
        try:
            response = self._session.post(
                self.settings.upstream_url, data=payload, headers=IOS_HEADERS, timeout=self.settings.request_timeout
            )
        except requests.RequestException as e:
            logger.error(f"send translate request error: {e}")
            raise UpstreamUnavailable()
        return response.status_code, response.content

    def close(self) -> None:
        self._session.close()
