# livemap/core/markers/repository.py
"""
Репозиторий маркеров.
"""

from __future__ import annotations

import uuid
from typing import Optional

from asyncpg import Record

from livemap.infra.database import DatabaseManager, store_errors
from livemap.shared.models.marker import MarkerCreate, MarkerDTO

_MARKER_COLUMNS = (
    "id, latitude, longitude, title, comment, color, photos, videos, created_by, created_at"
)

# Поля, которые разрешено перезаписывать при редактировании
EDITABLE_FIELDS = ("title", "comment", "color")


def _to_dto(row: Record) -> MarkerDTO:
    created_by = row["created_by"]
    return MarkerDTO(
        id=str(row["id"]),
        latitude=row["latitude"],
        longitude=row["longitude"],
        title=row["title"],
        comment=row["comment"],
        color=row["color"],
        photos=list(row["photos"] or []),
        videos=list(row["videos"] or []),
        created_by=str(created_by) if created_by is not None else None,
        created_at=row["created_at"],
    )


class MarkerRepository:
    """Репозиторий маркеров."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_all(self) -> list[MarkerDTO]:
        """Все маркеры в порядке создания."""
        async with store_errors("list markers"):
            rows = await self._db.fetch(
                f"SELECT {_MARKER_COLUMNS} FROM markers ORDER BY created_at, id"
            )
        return [_to_dto(row) for row in rows]

    async def get_by_id(self, marker_id: uuid.UUID) -> Optional[MarkerDTO]:
        async with store_errors("get marker"):
            row = await self._db.fetchrow(
                f"SELECT {_MARKER_COLUMNS} FROM markers WHERE id = $1",
                marker_id,
            )
        return _to_dto(row) if row else None

    async def create(
        self,
        data: MarkerCreate,
        photos: list[str],
        videos: list[str],
    ) -> MarkerDTO:
        """
        Создаёт маркер.

        created_by передаётся как есть: некорректный UUID отвергает БД.
        """
        async with store_errors("create marker"):
            row = await self._db.fetchrow(
                f"""
                INSERT INTO markers (
                    latitude, longitude, title, comment, color,
                    photos, videos, created_by
                )
                VALUES ($1, $2, $3, $4, $5, $6::text[], $7::text[], $8::uuid)
                RETURNING {_MARKER_COLUMNS}
                """,
                data.latitude,
                data.longitude,
                data.title,
                data.comment,
                data.color,
                photos,
                videos,
                data.created_by,
            )
        return _to_dto(row)

    async def update(
        self,
        marker_id: uuid.UUID,
        changes: dict[str, str],
        new_photos: list[str],
        new_videos: list[str],
    ) -> Optional[MarkerDTO]:
        """
        Перезаписывает переданные текстовые поля и дописывает медиа в конец списков.
        Дописывание выполняется в одном UPDATE, поэтому параллельные правки
        не теряют файлы друг друга.

        Returns:
            Обновлённый маркер или None, если id не найден
        """
        args: list[object] = [marker_id]
        assignments: list[str] = []

        for column in EDITABLE_FIELDS:
            if column in changes:
                args.append(changes[column])
                assignments.append(f"{column} = ${len(args)}")

        args.append(new_photos)
        assignments.append(f"photos = photos || ${len(args)}::text[]")
        args.append(new_videos)
        assignments.append(f"videos = videos || ${len(args)}::text[]")

        async with store_errors("update marker"):
            row = await self._db.fetchrow(
                f"""
                UPDATE markers
                SET {", ".join(assignments)}
                WHERE id = $1
                RETURNING {_MARKER_COLUMNS}
                """,
                *args,
            )
        return _to_dto(row) if row else None
