"""
/**
 * @file deeplx/__main__.py
 * @description 启动入口：python -m deeplx
 */
"""

import uvicorn

from deeplx.config import load_settings


def main():
    settings = load_settings()
    uvicorn.run("deeplx.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
