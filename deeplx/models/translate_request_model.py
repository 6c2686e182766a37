"""
/**
 * @file deeplx/models/translate_request_model.py
 * @description 翻译请求模型（Pydantic）。
 * @note 字段均可缺省：空文本由控制器返回 404，而不是 422。
 */
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class TranslateRequest(BaseModel):
    text: Optional[str] = None
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
