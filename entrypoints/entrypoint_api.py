#!/usr/bin/env python3
"""
Entrypoint для Live Map API в контейнере.

Запуск:
    python entrypoints/entrypoint_api.py

Порт берётся из переменной окружения PORT (по умолчанию 5000).
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from livemap.config import settings


def main() -> None:
    """Запустить Live Map API."""
    uvicorn.run(
        "livemap.services.api.app:app",
        host=settings.server.HOST,
        port=settings.server.PORT,
        reload=settings.system.DEBUG,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
