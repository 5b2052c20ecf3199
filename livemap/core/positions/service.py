# livemap/core/positions/service.py
"""
Приём геопозиции из push-канала.

Канал работает по принципу fire-and-forget: некорректные сообщения,
неизвестные пользователи и ошибки БД только логируются, отправителю
ничего не возвращается.
"""

from __future__ import annotations

import math
import uuid
from typing import Any

from livemap.common.constants import PushEvent
from livemap.common.errors import StoreError
from livemap.common.logger import log_debug, log_error, log_info, log_warning
from livemap.core.users.repository import UserRepository
from livemap.infra.connection_manager import Publisher
from livemap.shared.models.position import PositionBroadcast


def is_number(value: Any) -> bool:
    """Число из JSON: int или float, но не bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_coordinate(value: Any) -> float | None:
    """
    Координата из JSON -> float.

    Returns:
        None для нечисел, целых вне диапазона float и NaN/Infinity
    """
    if not is_number(value):
        return None
    try:
        coordinate = float(value)
    except OverflowError:
        return None
    return coordinate if math.isfinite(coordinate) else None


def parse_user_id(raw: Any) -> uuid.UUID | None:
    if not isinstance(raw, str):
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None


class PositionService:
    """Сервис обновления геопозиции пользователей."""

    def __init__(self, repository: UserRepository, publisher: Publisher) -> None:
        self.repository = repository
        self.publisher = publisher

    async def update_position(self, payload: Any) -> PositionBroadcast | None:
        """
        Обрабатывает updatePosition {userId, latitude, longitude}.

        Returns:
            Разосланное событие или None, если сообщение отброшено
        """
        if not isinstance(payload, dict):
            await log_warning(f"Некорректное сообщение updatePosition: {payload!r}")
            return None

        latitude = parse_coordinate(payload.get("latitude"))
        longitude = parse_coordinate(payload.get("longitude"))
        if latitude is None or longitude is None:
            await log_warning(
                f"Некорректные координаты: {payload.get('latitude')!r:.100}, {payload.get('longitude')!r:.100}"
            )
            return None

        user_id = parse_user_id(payload.get("userId"))
        if user_id is None:
            await log_warning(f"Некорректный userId: {payload.get('userId')!r}")
            return None

        try:
            user = await self.repository.update_position(user_id, latitude, longitude)
        except StoreError as e:
            await log_error(f"Ошибка updatePosition для {user_id}: {e}")
            return None

        if user is None:
            await log_debug(f"updatePosition: пользователь {user_id} не найден")
            return None

        broadcast = PositionBroadcast(
            user_id=user.id,
            name=user.name,
            latitude=user.latitude,
            longitude=user.longitude,
        )
        await self.publisher.publish(PushEvent.POSITIONS_UPDATE, broadcast.to_payload())
        await log_info(f"Позиция обновлена для {user.name}: [{latitude}, {longitude}]")
        return broadcast
