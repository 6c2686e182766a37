"""
/**
 * @file deeplx/controllers/health_controller.py
 * @description 健康检查控制器。
 */
"""

from fastapi import APIRouter, Depends

from deeplx.controllers.translate_controller import get_translation_service
from deeplx.services import TranslationService


router = APIRouter()


@router.get("/health")
def health(service: TranslationService = Depends(get_translation_service)):
    settings = service.settings
    limiter = service.limiter
    return {
        "status": "ok",
        "checks": {
            "upstream_url": settings.upstream_url,
            "limiter": {"max_rate": limiter.max_rate, "time_period": limiter.time_period},
        },
    }
