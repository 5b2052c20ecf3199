# livemap/services/api/realtime.py
"""
Push-канал (WebSocket /ws).

Сервер -> клиент: allMarkers, newMarker, updatedMarker, positionsUpdate.
Клиент -> сервер: updatePosition.
Формат кадра: {"event": "<имя>", "data": <payload>}.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from livemap.common.constants import PushEvent
from livemap.common.errors import StoreError
from livemap.common.logger import log_error, log_info, log_warning
from livemap.core.markers.service import MarkerService
from livemap.core.positions.service import PositionService
from livemap.infra.connection_manager import ConnectionManager
from livemap.services.api.dependencies import (
    get_connection_manager,
    get_marker_service,
    get_position_service,
)

router = APIRouter()


async def send_marker_snapshot(
    websocket: WebSocket,
    connections: ConnectionManager,
    markers: MarkerService,
) -> bool:
    """Отправляет новому подписчику все маркеры одним событием allMarkers."""
    try:
        snapshot = await markers.list_markers()
    except StoreError as e:
        await log_error(f"Ошибка отправки маркеров: {e}")
        return False

    return await connections.send_personal(
        websocket,
        PushEvent.ALL_MARKERS,
        [marker.to_payload() for marker in snapshot],
    )


async def handle_client_frame(
    connection_id: str,
    raw: str,
    positions: PositionService,
) -> None:
    """Обрабатывает кадр от клиента. Ошибки не возвращаются отправителю."""
    try:
        frame: Any = json.loads(raw)
    except ValueError:
        # JSONDecodeError и превышение лимита длины целого числа
        await log_warning(f"[{connection_id}] Некорректный JSON: {raw[:200]!r}")
        return

    if not isinstance(frame, dict):
        await log_warning(f"[{connection_id}] Кадр должен быть объектом: {frame!r}")
        return

    event = frame.get("event")
    if event == PushEvent.UPDATE_POSITION.value:
        await positions.update_position(frame.get("data"))
    else:
        await log_warning(f"[{connection_id}] Неизвестное событие: {event!r}")


async def receive_client_text(connection_id: str, websocket: WebSocket) -> str:
    """
    Ждёт следующий текстовый кадр.
    Бинарные кадры логируются и пропускаются.

    Raises:
        WebSocketDisconnect: клиент отключился
    """
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))

        text = message.get("text")
        if text is not None:
            return text

        await log_warning(f"[{connection_id}] Бинарный кадр проигнорирован")


@router.websocket("/ws")
async def push_channel(
    websocket: WebSocket,
    connections: ConnectionManager = Depends(get_connection_manager),
    markers: MarkerService = Depends(get_marker_service),
    positions: PositionService = Depends(get_position_service),
) -> None:
    """
    Подписчик сначала получает снимок маркеров и только потом
    попадает в рассылку, поэтому allMarkers — всегда первое событие.
    """
    connection_id = await connections.accept(websocket)
    await log_info(f"Новый подписчик: {connection_id}")

    try:
        await send_marker_snapshot(websocket, connections, markers)
        connections.register(websocket, connection_id)

        while True:
            raw = await receive_client_text(connection_id, websocket)
            try:
                await handle_client_frame(connection_id, raw, positions)
            except Exception as e:
                # Ошибка одного кадра не закрывает соединение
                await log_error(f"[{connection_id}] Ошибка обработки кадра: {e}", exc_info=True)

    except WebSocketDisconnect:
        pass
    finally:
        connections.disconnect(connection_id)
        await log_info(f"Подписчик отключён: {connection_id}")
