"""
/**
 * @file deeplx/services/__init__.py
 * @description 业务服务层导出。
 */
"""

from .deepl_client_service import DeepLClient, IOS_HEADERS
from .errors import (
    InvalidTargetLang,
    NoTranslateText,
    OutboundRateLimited,
    TranslateError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)
from .rate_limiter import RateLimitWaitCancelled, acquire, build_limiter
from .response_service import TranslationResult, parse_upstream_response
from .translation_service import TranslationService

__all__ = [
    "DeepLClient",
    "IOS_HEADERS",
    "InvalidTargetLang",
    "NoTranslateText",
    "OutboundRateLimited",
    "TranslateError",
    "UpstreamRateLimited",
    "UpstreamUnavailable",
    "acquire",
    "RateLimitWaitCancelled",
    "build_limiter",
    "TranslationResult",
    "parse_upstream_response",
    "TranslationService",
]
