"""
/**
 * @file deeplx/services/response_service.py
 * @description 上游响应解析：错误码映射与译文/候选译文提取。
 * @note 上游结构未公开且可能随时变化，仅按路径读取用到的字段。
 */
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from deeplx.services.errors import InvalidTargetLang, UpstreamRateLimited, UpstreamUnavailable
from deeplx.utils import lookup, lookup_str


logger = logging.getLogger("response_service")

INVALID_REQUEST_CODE = "-32600"


@dataclass
class TranslationResult:
    text: str
    alternatives: List[str] = field(default_factory=list)


def _decode(body: bytes) -> Optional[Any]:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def _alternatives(data: Any) -> List[str]:
    items = lookup(data, "result.texts.0.alternatives")
    if not isinstance(items, list):
        return []
    out = []
    for item in items:
        value = lookup(item, "text")
        out.append(value if isinstance(value, str) else "")
    return out


def parse_upstream_response(status_code: int, body: bytes) -> TranslationResult:
    data = _decode(body)

    if lookup_str(data, "error.code") == INVALID_REQUEST_CODE:
        logger.warning(f"Upstream rejected request: {json.dumps(lookup(data, 'error'), ensure_ascii=False)}")
        raise InvalidTargetLang()

    if status_code == 429:
        logger.warning("Upstream throttled the request (429)")
        raise UpstreamRateLimited()

    texts = lookup(data, "result.texts")
    if status_code >= 400 or not isinstance(data, dict) or (texts is None and data.get("error") is not None):
        logger.error(f"Unusable upstream reply: status={status_code} body={body[:200]!r}")
        raise UpstreamUnavailable()

    text = lookup(data, "result.texts.0.text")
    return TranslationResult(text=text if isinstance(text, str) else "", alternatives=_alternatives(data))
