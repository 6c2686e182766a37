"""
/**
 * @file deeplx/services/translation_service.py
 * @description 翻译服务：持有请求 ID 计数器与上游客户端，串起 构造请求 → 限流调用 → 解析响应。
 */
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from starlette.concurrency import run_in_threadpool

from deeplx.config import Settings, load_settings
from deeplx.services.deepl_client_service import DeepLClient, limiter_from_settings
from deeplx.services.envelope_service import (
    RequestIdCounter,
    build_envelope,
    count_i,
    detect_source_lang,
    make_timestamp,
    scrub_surrogates,
    serialize_envelope,
)
from deeplx.services.errors import NoTranslateText
from deeplx.services.response_service import TranslationResult, parse_upstream_response


logger = logging.getLogger("translation_service")


class TranslationService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[DeepLClient] = None,
        counter: Optional[RequestIdCounter] = None,
    ):
        self._initial_settings = settings
        self.client = client or DeepLClient(settings=settings)
        self.counter = counter or RequestIdCounter()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    @property
    def limiter(self):
        return self.client.limiter

    def apply_settings(self, settings: Settings) -> None:
        """Swap in a new limiter when a config reload changes the rate limit."""
        limiter = limiter_from_settings(settings)
        if (limiter.max_rate, limiter.time_period) != (self.limiter.max_rate, self.limiter.time_period):
            self.client.limiter = limiter
            logger.info(f"Rate limit set to {limiter.max_rate} per {limiter.time_period:.2f}s")

    async def translate(
        self,
        text: Optional[str],
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> Tuple[int, TranslationResult]:
        if not text:
            raise NoTranslateText()
        text = scrub_surrogates(text)

        source = source_lang or await run_in_threadpool(detect_source_lang, text)
        target = target_lang or self.settings.default_target_lang

        request_id = self.counter.next()
        envelope = build_envelope(
            text,
            source,
            target,
            request_id=request_id,
            timestamp=make_timestamp(count_i(text)),
            request_alternatives=self.settings.request_alternatives,
        )
        logger.info(f"Translate id={request_id} {source or '?'} -> {target} ({len(text)} chars)")

        status_code, body = await self.client.post(serialize_envelope(envelope), cancel=cancel)
        return request_id, parse_upstream_response(status_code, body)

    def close(self) -> None:
        self.client.close()
