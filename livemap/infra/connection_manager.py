# livemap/infra/connection_manager.py
"""
Менеджер WebSocket соединений push-канала.
Рассылка событий всем подключённым подписчикам без подтверждений и повторов.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from fastapi import WebSocket

from livemap.common.constants import PushEvent
from livemap.common.logger import log_debug, log_warning


class Publisher(Protocol):
    """Интерфейс публикации событий (используется сервисами)."""

    async def publish(self, event: PushEvent | str, payload: Any) -> int: ...


def build_frame(event: PushEvent | str, payload: Any) -> dict[str, Any]:
    """Формирует кадр push-канала: {"event": ..., "data": ...}."""
    name = event.value if isinstance(event, PushEvent) else event
    return {"event": name, "data": payload}


@dataclass
class ConnectionInfo:
    """Информация о соединении."""
    websocket: WebSocket
    connection_id: str
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionManager:
    """
    Менеджер WebSocket соединений.

    Поддерживает:
    - Регистрацию/удаление подписчиков
    - Персональные сообщения (снимок маркеров при подключении)
    - Broadcast событий всем подписчикам на момент вызова
    """

    def __init__(self) -> None:
        # connection_id -> ConnectionInfo
        self._connections: dict[str, ConnectionInfo] = {}

        # Для статистики
        self._total_connections: int = 0
        self._total_messages_sent: int = 0

    @property
    def active_connections(self) -> int:
        """Количество активных подписчиков."""
        return len(self._connections)

    @staticmethod
    def new_connection_id() -> str:
        return uuid.uuid4().hex

    async def accept(self, websocket: WebSocket) -> str:
        """Принимает соединение, но ещё не добавляет его в рассылку."""
        await websocket.accept()
        return self.new_connection_id()

    def register(self, websocket: WebSocket, connection_id: str) -> None:
        """Добавляет подписчика в множество получателей broadcast."""
        self._connections[connection_id] = ConnectionInfo(
            websocket=websocket,
            connection_id=connection_id,
        )
        self._total_connections += 1

    def disconnect(self, connection_id: str) -> None:
        """Удаляет подписчика. Повторный вызов безопасен."""
        self._connections.pop(connection_id, None)

    async def send_personal(
        self,
        websocket: WebSocket,
        event: PushEvent | str,
        payload: Any,
    ) -> bool:
        """
        Отправить событие одному клиенту.

        Returns:
            True если сообщение отправлено
        """
        try:
            await websocket.send_json(build_frame(event, payload))
        except Exception as e:
            await log_warning(f"Не удалось отправить персональное сообщение: {e}")
            return False

        self._total_messages_sent += 1
        return True

    async def publish(self, event: PushEvent | str, payload: Any) -> int:
        """
        Отправить событие всем подписчикам.

        Получатели фиксируются на момент вызова. Соединения, на которые
        не удалось отправить, удаляются из рассылки.

        Returns:
            Количество успешно отправленных сообщений
        """
        frame = build_frame(event, payload)
        sent_count = 0
        failed: list[str] = []

        for connection_id, conn in list(self._connections.items()):
            try:
                await conn.websocket.send_json(frame)
                sent_count += 1
                self._total_messages_sent += 1
            except Exception:
                failed.append(connection_id)

        for connection_id in failed:
            self.disconnect(connection_id)

        if failed:
            await log_warning(f"Отключено {len(failed)} подписчиков при рассылке {frame['event']}")

        await log_debug(f"Событие {frame['event']} разослано {sent_count} подписчикам")
        return sent_count

    async def close_all(self) -> None:
        """Закрывает все соединения (graceful shutdown)."""
        for connection_id, conn in list(self._connections.items()):
            try:
                await conn.websocket.close()
            except Exception:
                # Соединение уже разорвано
                pass
            self.disconnect(connection_id)

    def get_stats(self) -> dict[str, int]:
        """Получить статистику."""
        return {
            "active_connections": len(self._connections),
            "total_connections_ever": self._total_connections,
            "total_messages_sent": self._total_messages_sent,
        }
