# livemap/shared/models/common.py
"""
Общие модели ответов.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой."""

    message: str


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    push_channel: dict[str, int] = Field(default_factory=dict)
