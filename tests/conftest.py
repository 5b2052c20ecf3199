# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
Живой PostgreSQL не нужен: репозитории подменяются in-memory реализациями.
"""

from __future__ import annotations

import math
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional
from unittest.mock import AsyncMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi import FastAPI
from fastapi.testclient import TestClient

from livemap.common.errors import DuplicateEmailError, StoreError
from livemap.core.users.security import PasswordHasher
from livemap.infra.connection_manager import ConnectionManager
from livemap.infra.database import DatabaseManager
from livemap.infra.media_storage import MediaStorage
from livemap.services.api.app import create_app
from livemap.services.api.context import AppContext
from livemap.services.api.dependencies import get_marker_repository, get_user_repository
from livemap.shared.models.marker import MarkerCreate, MarkerDTO
from livemap.shared.models.user import UserPublicDTO, UserRecord


# =============================================================================
# IN-MEMORY РЕПОЗИТОРИИ
# =============================================================================

class InMemoryUserRepository:
    """Повторяет контракт UserRepository без БД."""

    def __init__(self) -> None:
        self.users: dict[str, UserRecord] = {}

    async def list_public(self) -> list[UserPublicDTO]:
        return [user.to_public() for user in self.users.values()]

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        if await self.get_by_email(email):
            raise DuplicateEmailError()
        user = UserRecord(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self.users[user.id] = user
        return user

    async def update_position(self, user_id: uuid.UUID, latitude: float, longitude: float) -> Optional[UserRecord]:
        key = str(user_id)
        if key not in self.users:
            return None
        updated = self.users[key].model_copy(update={"latitude": latitude, "longitude": longitude})
        self.users[key] = updated
        return updated


class InMemoryMarkerRepository:
    """Повторяет контракт MarkerRepository без БД."""

    def __init__(self) -> None:
        self.markers: dict[str, MarkerDTO] = {}

    async def list_all(self) -> list[MarkerDTO]:
        return list(self.markers.values())

    async def get_by_id(self, marker_id: uuid.UUID) -> Optional[MarkerDTO]:
        return self.markers.get(str(marker_id))

    async def create(self, data: MarkerCreate, photos: list[str], videos: list[str]) -> MarkerDTO:
        # Те же ограничения, что CHECK и тип uuid в схеме
        if math.isnan(data.latitude) or math.isnan(data.longitude):
            raise StoreError("create marker failed: coordinates must be numbers")
        if data.created_by is not None:
            try:
                uuid.UUID(data.created_by)
            except ValueError as e:
                raise StoreError("create marker failed: invalid created_by") from e

        marker = MarkerDTO(
            id=str(uuid.uuid4()),
            latitude=data.latitude,
            longitude=data.longitude,
            title=data.title,
            comment=data.comment,
            color=data.color,
            photos=list(photos),
            videos=list(videos),
            created_by=data.created_by,
            created_at=datetime.now(timezone.utc),
        )
        self.markers[marker.id] = marker
        return marker

    async def update(
        self,
        marker_id: uuid.UUID,
        changes: dict[str, str],
        new_photos: list[str],
        new_videos: list[str],
    ) -> Optional[MarkerDTO]:
        key = str(marker_id)
        if key not in self.markers:
            return None
        current = self.markers[key]
        updated = current.model_copy(update={
            **changes,
            "photos": [*current.photos, *new_photos],
            "videos": [*current.videos, *new_videos],
        })
        self.markers[key] = updated
        return updated


class FakeUpload:
    """Минимальный загруженный файл для MediaStorage."""

    def __init__(self, filename: str | None, content: bytes = b"data") -> None:
        self.filename = filename
        self._content = content

    async def read(self, size: int = -1) -> bytes:
        return self._content


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock(spec=DatabaseManager)
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="UPDATE 1")
    db.fetchval = AsyncMock(return_value=None)
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def mock_publisher() -> AsyncMock:
    """Мок рассылки push-канала."""
    publisher = AsyncMock()
    publisher.publish = AsyncMock(return_value=1)
    return publisher


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def marker_repo() -> InMemoryMarkerRepository:
    return InMemoryMarkerRepository()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def media_storage(upload_dir: Path) -> MediaStorage:
    storage = MediaStorage(upload_dir, url_prefix="/uploads")
    storage.ensure_directory()
    return storage


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    """bcrypt с минимальной стоимостью, чтобы тесты шли быстро."""
    return PasswordHasher(rounds=4)


# =============================================================================
# ФИКСТУРЫ ПРИЛОЖЕНИЯ
# =============================================================================

@pytest.fixture
def app_context(mock_db: AsyncMock, upload_dir: Path, fast_hasher: PasswordHasher) -> AppContext:
    return AppContext(
        db=mock_db,
        media=MediaStorage(upload_dir, url_prefix="/uploads"),
        connections=ConnectionManager(),
        hasher=fast_hasher,
        max_photos=10,
        max_videos=10,
    )


@pytest.fixture
def api_app(
    app_context: AppContext,
    user_repo: InMemoryUserRepository,
    marker_repo: InMemoryMarkerRepository,
) -> FastAPI:
    app = create_app(app_context)
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_marker_repository] = lambda: marker_repo
    return app


@pytest.fixture
def client(api_app: FastAPI) -> Iterator[TestClient]:
    with TestClient(api_app) as test_client:
        yield test_client


@pytest.fixture
def sample_marker_form() -> dict[str, Any]:
    return {
        "latitude": "48.85",
        "longitude": "2.35",
        "title": "Eiffel",
        "comment": "Tour Eiffel",
        "color": "#00ff00",
    }


@pytest.fixture
def make_upload():
    """Фабрика загруженных файлов."""
    def _make(filename: str | None = "photo.jpg", content: bytes = b"data") -> FakeUpload:
        return FakeUpload(filename, content)
    return _make
