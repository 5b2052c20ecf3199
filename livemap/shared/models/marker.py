# livemap/shared/models/marker.py
"""
Модели маркеров.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from livemap.common.constants import DEFAULT_MARKER_COLOR


class MarkerDTO(BaseModel):
    """Маркер в ответах API и в событиях push-канала."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    latitude: float
    longitude: float
    title: str = ""
    comment: str = ""
    color: str = DEFAULT_MARKER_COLOR
    photos: list[str] = Field(default_factory=list)
    videos: list[str] = Field(default_factory=list)
    created_by: str | None = Field(default=None, alias="createdBy")
    created_at: datetime = Field(..., alias="createdAt")

    def to_payload(self) -> dict[str, Any]:
        """JSON-представление для push-канала (те же ключи, что и в HTTP-ответе)."""
        return self.model_dump(mode="json", by_alias=True)


class MarkerCreate(BaseModel):
    """
    Данные нового маркера.

    Координаты могут быть NaN, если клиент прислал нечисло:
    такое значение отвергает хранилище.
    Непереданные текстовые поля получают значения по умолчанию.
    """

    latitude: float
    longitude: float
    title: str = ""
    comment: str = ""
    color: str = DEFAULT_MARKER_COLOR
    created_by: str | None = None


class MarkerPatch(BaseModel):
    """
    Частичное обновление маркера.

    Поле перезаписывается, только если оно было передано; пустая строка
    тоже считается переданным значением. Присутствие определяется по
    model_fields_set, а не по значению.
    """

    title: str | None = None
    comment: str | None = None
    color: str | None = None

    def changes(self) -> dict[str, str]:
        """Только явно переданные поля."""
        return {
            name: getattr(self, name)
            for name in sorted(self.model_fields_set)
            if getattr(self, name) is not None
        }
