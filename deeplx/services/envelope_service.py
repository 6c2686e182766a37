"""
/**
 * @file deeplx/services/envelope_service.py
 * @description 上游 JSON-RPC 请求体构造：请求 ID、时间戳、语言识别与序列化。
 * @note 时间戳与 "method" 冒号空格规则需与 iOS 客户端的输出逐字节一致，请勿"优化"。
 */
"""

from __future__ import annotations

import json
import logging
import random
import re
import threading
import time
from typing import Any, Dict, Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException


logger = logging.getLogger("envelope_service")

# langdetect is non-deterministic unless seeded
DetectorFactory.seed = 0

RPC_VERSION = "2.0"
RPC_METHOD = "LMT_handle_texts"
SPLITTING = "newlines"

_METHOD_COMPACT = b'"method":"'
_METHOD_SPACED = b'"method": "'
_METHOD_PADDED = b'"method" : "'

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")

# encoding/json escapes these even inside strings
_GO_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def random_seed_id() -> int:
    return (random.randrange(99999) + 8300000) * 1000


class RequestIdCounter:
    """Process-lifetime id sequence. ``next`` is an atomic fetch-and-increment."""

    def __init__(self, start: Optional[int] = None):
        self._value = random_seed_id() if start is None else start
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._value

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


def count_i(text: str) -> int:
    return text.count("i")


def make_timestamp(i_count: int, now_ms: Optional[int] = None) -> int:
    ts = int(time.time() * 1000) if now_ms is None else now_ms
    if i_count == 0:
        return ts
    n = i_count + 1
    return ts - ts % n + n


def detect_source_lang(text: str) -> str:
    """Upper-case ISO 639-1 code of ``text``; empty string when undetectable."""
    try:
        code = detect(text)
    except LangDetectException as e:
        logger.warning(f"Language detection failed: {e}")
        return ""
    # langdetect reports regional codes such as zh-cn / zh-tw
    return code.split("-")[0].upper()


def build_envelope(
    text: str,
    source_lang: str,
    target_lang: str,
    request_id: int,
    timestamp: int,
    request_alternatives: int = 3,
) -> Dict[str, Any]:
    return {
        "jsonrpc": RPC_VERSION,
        "method": RPC_METHOD,
        "id": request_id,
        "params": {
            "texts": [{"text": text, "requestAlternatives": request_alternatives}],
            "splitting": SPLITTING,
            "lang": {
                "source_lang_user_selected": source_lang,
                "target_lang": target_lang,
            },
            "timestamp": timestamp,
            "commonJobParams": {
                "wasSpoken": False,
                "transcribe_as": "",
            },
        },
    }


def space_method_field(payload: bytes, request_id: int) -> bytes:
    if (request_id + 5) % 29 == 0 or (request_id + 3) % 13 == 0:
        return payload.replace(_METHOD_COMPACT, _METHOD_PADDED)
    return payload.replace(_METHOD_COMPACT, _METHOD_SPACED)


def scrub_surrogates(text: str) -> str:
    """Lone UTF-16 surrogates (legal in JSON input) become U+FFFD."""
    return _LONE_SURROGATE.sub("\ufffd", text)


def serialize_envelope(envelope: Dict[str, Any]) -> bytes:
    payload = scrub_surrogates(json.dumps(envelope, separators=(",", ":"), ensure_ascii=False))
    for char, escaped in _GO_ESCAPES:
        payload = payload.replace(char, escaped)
    return space_method_field(payload.encode("utf-8"), envelope["id"])
