"""
/**
 * @file deeplx/services/rate_limiter.py
 * @description 出站请求限流（aiolimiter 漏桶），等待过程可被客户端断开取消。
 */
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiolimiter import AsyncLimiter


logger = logging.getLogger("rate_limiter")


class RateLimitWaitCancelled(Exception):
    """Raised when a caller stops waiting for outbound capacity."""


def build_limiter(events: int, period: float, burst: int = 1) -> AsyncLimiter:
    """
    ``events`` per ``period`` seconds, at most ``burst`` back to back.

    burst=1 spaces calls evenly (12/min -> one every 5s).
    """
    if events <= 0 or period <= 0 or burst < 1:
        raise ValueError(f"invalid rate limit: events={events} period={period} burst={burst}")
    return AsyncLimiter(burst, period * burst / float(events))


async def acquire(limiter: AsyncLimiter, cancel: Optional[asyncio.Event] = None) -> None:
    if cancel is None:
        await limiter.acquire()
        return
    if cancel.is_set():
        raise RateLimitWaitCancelled("cancelled before waiting")

    acquiring = asyncio.ensure_future(limiter.acquire())
    cancelled = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({acquiring, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        acquiring.cancel()
        cancelled.cancel()
        raise
    cancelled.cancel()

    if acquiring.done():
        acquiring.result()
        return
    # a cancelled acquire never takes capacity from the bucket
    acquiring.cancel()
    raise RateLimitWaitCancelled("cancelled while waiting for capacity")
