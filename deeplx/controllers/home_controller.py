"""
/**
 * @file deeplx/controllers/home_controller.py
 * @description 首页说明接口。
 */
"""

from fastapi import APIRouter


router = APIRouter()

WELCOME_MESSAGE = (
    "DeepL Free API, Made by sjlleo and missuo. Go to /translate with POST. http://github.com/OwO-Network/DeepLX"
)


@router.get("/")
def index():
    return {"code": 200, "message": WELCOME_MESSAGE}
