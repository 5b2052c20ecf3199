# livemap/core/markers/service.py
"""
Бизнес-логика маркеров.

Каждая мутация: запись в БД, затем безусловная рассылка результата
всем подписчикам push-канала.
"""

from __future__ import annotations

import uuid
from typing import Sequence

from livemap.common.constants import MediaKind, PushEvent, TypeMsg
from livemap.common.errors import MarkerNotFoundError, TooManyFilesError
from livemap.common.logger import log_info
from livemap.core.markers.repository import MarkerRepository
from livemap.infra.connection_manager import Publisher
from livemap.infra.media_storage import MediaStorage, UploadLike
from livemap.shared.models.marker import MarkerCreate, MarkerDTO, MarkerPatch


def parse_marker_id(raw: str) -> uuid.UUID | None:
    """Разбирает id маркера; некорректный id эквивалентен отсутствующему."""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class MarkerService:
    """
    Сервис маркеров.

    Ответственности:
    - Проверка лимитов на количество файлов
    - Сохранение вложений в MediaStorage
    - Запись маркера в БД
    - Публикация newMarker / updatedMarker
    """

    def __init__(
        self,
        repository: MarkerRepository,
        media: MediaStorage,
        publisher: Publisher,
        max_photos: int = 10,
        max_videos: int = 10,
    ) -> None:
        self.repository = repository
        self.media = media
        self.publisher = publisher
        self._limits = {
            MediaKind.PHOTOS: max_photos,
            MediaKind.VIDEOS: max_videos,
        }

    def _check_limits(self, photos: Sequence[UploadLike], videos: Sequence[UploadLike]) -> None:
        for kind, files in ((MediaKind.PHOTOS, photos), (MediaKind.VIDEOS, videos)):
            limit = self._limits[kind]
            if len(files) > limit:
                raise TooManyFilesError(
                    f"Too many files in field '{kind.value}': {len(files)} (max {limit})"
                )

    async def list_markers(self) -> list[MarkerDTO]:
        return await self.repository.list_all()

    async def create_marker(
        self,
        data: MarkerCreate,
        photos: Sequence[UploadLike] = (),
        videos: Sequence[UploadLike] = (),
    ) -> MarkerDTO:
        """
        Создаёт маркер с вложениями и рассылает newMarker.

        Файлы пишутся до вставки в БД; при ошибке вставки они остаются на диске.
        """
        self._check_limits(photos, videos)

        photo_paths = await self.media.save_many(list(photos))
        video_paths = await self.media.save_many(list(videos))

        marker = await self.repository.create(data, photo_paths, video_paths)

        await self.publisher.publish(PushEvent.NEW_MARKER, marker.to_payload())
        await log_info(
            f'Маркер добавлен: [{marker.latitude}, {marker.longitude}] "{marker.title}"',
            type_msg=TypeMsg.INFO,
        )
        return marker

    async def edit_marker(
        self,
        marker_id: str,
        patch: MarkerPatch,
        photos: Sequence[UploadLike] = (),
        videos: Sequence[UploadLike] = (),
    ) -> MarkerDTO:
        """
        Частично обновляет маркер и рассылает updatedMarker.

        Raises:
            MarkerNotFoundError: id не найден или некорректен
        """
        parsed_id = parse_marker_id(marker_id)
        if parsed_id is None:
            raise MarkerNotFoundError()

        self._check_limits(photos, videos)

        existing = await self.repository.get_by_id(parsed_id)
        if existing is None:
            raise MarkerNotFoundError()

        photo_paths = await self.media.save_many(list(photos))
        video_paths = await self.media.save_many(list(videos))

        marker = await self.repository.update(parsed_id, patch.changes(), photo_paths, video_paths)
        if marker is None:
            raise MarkerNotFoundError()

        await self.publisher.publish(PushEvent.UPDATED_MARKER, marker.to_payload())
        await log_info(
            f'Маркер обновлён: ID {marker.id} "{marker.title}"',
            type_msg=TypeMsg.INFO,
        )
        return marker
