#!/usr/bin/env python3
# main.py
"""
Главная точка входа Live Map API.
Запускает uvicorn с приложением livemap.services.api.app.
"""

from __future__ import annotations

import asyncio

import uvicorn

from livemap.config import settings
from livemap.common.logger import setup_logging, log_info
from livemap.common.constants import TypeMsg


async def main() -> None:
    """Запуск API & Relay Service."""
    setup_logging()
    await log_info(
        f"Сервер запускается на {settings.server.HOST}:{settings.server.PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "livemap.services.api.app:app",
        host=settings.server.HOST,
        port=settings.server.PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
