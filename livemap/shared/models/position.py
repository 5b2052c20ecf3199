# livemap/shared/models/position.py
"""
Модели обновления геопозиции через push-канал.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PositionBroadcast(BaseModel):
    """Событие positionsUpdate, рассылаемое всем подписчикам."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    name: str
    latitude: float
    longitude: float

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
