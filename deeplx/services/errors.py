"""
/**
 * @file deeplx/services/errors.py
 * @description 翻译流程的领域错误（携带对外返回的状态码与提示语）。
 */
"""

from __future__ import annotations


class TranslateError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"code": self.status_code, "message": self.message}


class NoTranslateText(TranslateError):
    status_code = 404
    message = "No Translate Text Found"


class InvalidTargetLang(TranslateError):
    status_code = 406
    message = "Invalid targetLang"


class UpstreamRateLimited(TranslateError):
    """Upstream answered 429."""

    status_code = 429
    message = "Too Many Requests"


class OutboundRateLimited(TranslateError):
    """The local outbound call path gave up (limiter wait aborted)."""

    status_code = 429
    message = "rate limit exceeded"


class UpstreamUnavailable(TranslateError):
    status_code = 502
    message = "Upstream Unavailable"
