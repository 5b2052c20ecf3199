# tests/services/test_realtime.py
"""
Тесты push-канала (WebSocket /ws).
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from livemap.common.errors import StoreError
from livemap.infra.connection_manager import ConnectionManager
from livemap.services.api.context import AppContext
from livemap.services.api.dependencies import get_position_service
from livemap.services.api.realtime import handle_client_frame, send_marker_snapshot


def _register(client: TestClient, name: str = "Alice", email: str = "alice@example.com") -> dict:
    return client.post("/register", json={"name": name, "email": email, "password": "secret"}).json()["user"]


def _position(user_id: str, latitude, longitude) -> dict:
    return {"event": "updatePosition", "data": {"userId": user_id, "latitude": latitude, "longitude": longitude}}


class TestSnapshot:
    """Снимок маркеров при подключении."""

    def test_all_markers_is_first_event(self, client: TestClient) -> None:
        created = client.post("/markers", data={"latitude": "1", "longitude": "2", "title": "A"}).json()

        with client.websocket_connect("/ws") as ws:
            frame = ws.receive_json()

        assert frame["event"] == "allMarkers"
        assert frame["data"] == [created]

    def test_empty_snapshot(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {"event": "allMarkers", "data": []}

    def test_disconnect_unsubscribes(self, client: TestClient, app_context: AppContext) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            assert app_context.connections.active_connections == 1

        assert app_context.connections.active_connections == 0


class TestMarkerBroadcasts:
    """newMarker / updatedMarker."""

    def test_new_marker_reaches_every_subscriber(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
            first.receive_json()
            second.receive_json()

            created = client.post("/markers", data={"latitude": "1", "longitude": "2"}).json()

            assert first.receive_json() == {"event": "newMarker", "data": created}
            assert second.receive_json() == {"event": "newMarker", "data": created}

    def test_updated_marker_broadcast(self, client: TestClient) -> None:
        created = client.post("/markers", data={"latitude": "1", "longitude": "2", "title": "Old"}).json()

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            updated = client.patch(f"/markers/{created['id']}", data={"title": "New"}).json()

            frame = ws.receive_json()
            assert frame == {"event": "updatedMarker", "data": updated}
            assert frame["data"]["title"] == "New"

    def test_failed_create_is_not_broadcast(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            assert client.post("/markers", data={"latitude": "abc", "longitude": "2"}).status_code == 500
            created = client.post("/markers", data={"latitude": "1", "longitude": "2"}).json()

            # Первым приходит маркер из второго, успешного запроса
            assert ws.receive_json() == {"event": "newMarker", "data": created}


class TestPositionUpdates:
    """updatePosition -> positionsUpdate."""

    def test_position_update_broadcast(self, client: TestClient, user_repo) -> None:
        user = _register(client)

        with client.websocket_connect("/ws") as sender, client.websocket_connect("/ws") as watcher:
            sender.receive_json()
            watcher.receive_json()

            sender.send_json(_position(user["id"], 48.85, 2.35))

            expected = {
                "event": "positionsUpdate",
                "data": {"userId": user["id"], "name": "Alice", "latitude": 48.85, "longitude": 2.35},
            }
            assert watcher.receive_json() == expected
            # Отправитель тоже получает рассылку
            assert sender.receive_json() == expected

        stored = user_repo.users[user["id"]]
        assert (stored.latitude, stored.longitude) == (48.85, 2.35)

    def test_invalid_messages_are_dropped(self, client: TestClient, user_repo) -> None:
        user = _register(client)

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_text("not json")
            ws.send_json(["not", "an", "object"])
            ws.send_json({"event": "unknownEvent", "data": {}})
            ws.send_json(_position(user["id"], "abc", 2.35))
            ws.send_json(_position("not-a-uuid", 1.0, 2.0))
            ws.send_json(_position(user["id"], 10.0, 20.0))

            frame = ws.receive_json()

        assert frame["event"] == "positionsUpdate"
        assert (frame["data"]["latitude"], frame["data"]["longitude"]) == (10.0, 20.0)
        stored = user_repo.users[user["id"]]
        assert (stored.latitude, stored.longitude) == (10.0, 20.0)

    def test_binary_frame_is_skipped(self, client: TestClient) -> None:
        user = _register(client)

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_bytes(b"\x00\x01")
            ws.send_json(_position(user["id"], 3.0, 4.0))

            frame = ws.receive_json()

        assert frame["event"] == "positionsUpdate"
        assert (frame["data"]["latitude"], frame["data"]["longitude"]) == (3.0, 4.0)

    def test_out_of_range_integer_is_dropped(self, client: TestClient, user_repo) -> None:
        user = _register(client)
        huge = int("9" * 400)

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_json(_position(user["id"], huge, 2.0))
            ws.send_text('{"event": "updatePosition", "data": {"userId": "%s", "latitude": 1e999, "longitude": 2}}' % user["id"])
            ws.send_json(_position(user["id"], 7.0, 8.0))

            frame = ws.receive_json()

        assert (frame["data"]["latitude"], frame["data"]["longitude"]) == (7.0, 8.0)
        stored = user_repo.users[user["id"]]
        assert (stored.latitude, stored.longitude) == (7.0, 8.0)

    def test_handler_failure_keeps_connection_open(self, client: TestClient, api_app) -> None:
        positions = AsyncMock()
        positions.update_position.side_effect = RuntimeError("unexpected")
        api_app.dependency_overrides[get_position_service] = lambda: positions

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(_position("any", 1.0, 2.0))

            created = client.post("/markers", data={"latitude": "1", "longitude": "2"}).json()

            assert ws.receive_json() == {"event": "newMarker", "data": created}

        positions.update_position.assert_awaited_once()

    def test_users_list_reflects_position(self, client: TestClient) -> None:
        user = _register(client)

        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(_position(user["id"], 5.5, 6.5))
            ws.receive_json()

        listed = client.get("/users").json()[0]
        assert (listed["latitude"], listed["longitude"]) == (5.5, 6.5)


class TestHelpers:
    """Unit тесты обработчиков канала."""

    @pytest.mark.asyncio
    async def test_snapshot_store_error(self) -> None:
        markers = AsyncMock()
        markers.list_markers.side_effect = StoreError("db down")
        websocket = AsyncMock()

        sent = await send_marker_snapshot(websocket, ConnectionManager(), markers)

        assert sent is False
        websocket.send_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_position_frame_dispatched(self) -> None:
        positions = AsyncMock()
        data = {"userId": "u", "latitude": 1, "longitude": 2}

        await handle_client_frame("conn", json.dumps({"event": "updatePosition", "data": data}), positions)

        positions.update_position.assert_awaited_once_with(data)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["{", "[]", '"text"', '{"event": "other"}'])
    async def test_other_frames_ignored(self, raw: str) -> None:
        positions = AsyncMock()

        await handle_client_frame("conn", raw, positions)

        positions.update_position.assert_not_awaited()
