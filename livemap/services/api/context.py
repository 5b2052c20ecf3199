# livemap/services/api/context.py
"""
Контекст приложения: общие ресурсы процесса.
Создаётся в lifespan, передаётся обработчикам через зависимости.
"""

from __future__ import annotations

from dataclasses import dataclass

from livemap.common.constants import TypeMsg
from livemap.common.logger import log_info
from livemap.config.loader import Settings
from livemap.core.users.security import PasswordHasher
from livemap.infra.connection_manager import ConnectionManager
from livemap.infra.database import DatabaseManager, close_db, init_db
from livemap.infra.media_storage import MediaStorage


@dataclass
class AppContext:
    """Ресурсы, общие для всех запросов и соединений."""

    db: DatabaseManager
    media: MediaStorage
    connections: ConnectionManager
    hasher: PasswordHasher
    max_photos: int = 10
    max_videos: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            db=DatabaseManager(),
            media=MediaStorage(
                settings.media.upload_path,
                url_prefix=settings.media.UPLOAD_URL_PREFIX,
            ),
            connections=ConnectionManager(),
            hasher=PasswordHasher(rounds=settings.security.BCRYPT_ROUNDS),
            max_photos=settings.media.MAX_PHOTOS,
            max_videos=settings.media.MAX_VIDEOS,
        )

    async def startup(self) -> None:
        """Готовит директорию загрузок и подключает БД до приёма запросов."""
        self.media.ensure_directory()
        await init_db(self.db)
        await log_info("Контекст приложения инициализирован", type_msg=TypeMsg.INFO)

    async def shutdown(self) -> None:
        """Закрывает соединения push-канала и пул БД."""
        await self.connections.close_all()
        await close_db(self.db)
        await log_info("Контекст приложения закрыт", type_msg=TypeMsg.INFO)
