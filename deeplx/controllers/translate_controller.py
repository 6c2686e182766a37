"""
/**
 * @file deeplx/controllers/translate_controller.py
 * @description 翻译控制器：POST /translate。
 */
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from deeplx.models.translate_request_model import TranslateRequest
from deeplx.services import TranslateError, TranslationService


logger = logging.getLogger("translate_controller")

router = APIRouter()

DISCONNECT_POLL_INTERVAL = 0.5


def get_translation_service(request: Request) -> TranslationService:
    return request.app.state.translation_service


async def _watch_disconnect(request: Request, cancel: asyncio.Event) -> None:
    while not cancel.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected, abandoning outbound call")
            cancel.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL)


@router.post("/translate")
async def translate(
    req: TranslateRequest,
    request: Request,
    service: TranslationService = Depends(get_translation_service),
):
    cancel = asyncio.Event()
    watcher = asyncio.ensure_future(_watch_disconnect(request, cancel))
    try:
        request_id, result = await service.translate(req.text, req.source_lang, req.target_lang, cancel=cancel)
    except TranslateError as e:
        logger.warning(f"Translation failed: {e.status_code} {e.message}")
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    finally:
        watcher.cancel()

    return {
        "code": 200,
        "id": request_id,
        "data": result.text,
        "alternatives": result.alternatives,
    }
