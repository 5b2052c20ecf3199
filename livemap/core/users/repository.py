# livemap/core/users/repository.py
"""
Репозиторий для работы с пользователями в БД.
Реализует паттерн Repository для абстракции доступа к данным.
"""

from __future__ import annotations

import uuid
from typing import Optional

import asyncpg
from asyncpg import Record

from livemap.common.errors import DuplicateEmailError
from livemap.infra.database import DatabaseManager, store_errors
from livemap.shared.models.user import UserPublicDTO, UserRecord

_USER_COLUMNS = "id, name, email, password, latitude, longitude, created_at"


def _to_record(row: Record) -> UserRecord:
    return UserRecord(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        password=row["password"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        created_at=row["created_at"],
    )


class UserRepository:
    """Репозиторий пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def list_public(self) -> list[UserPublicDTO]:
        """Все пользователи без хэша пароля."""
        async with store_errors("list users"):
            rows = await self._db.fetch(
                f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at"
            )
        return [_to_record(row).to_public() for row in rows]

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """
        Получает пользователя по email.

        Returns:
            Пользователь или None
        """
        async with store_errors("get user by email"):
            row = await self._db.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = $1",
                email,
            )
        return _to_record(row) if row else None

    async def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        """
        Создаёт пользователя.

        Raises:
            DuplicateEmailError: email уже занят (уникальный индекс)
            StoreError: любая другая ошибка БД
        """
        async with store_errors("create user"):
            try:
                row = await self._db.fetchrow(
                    f"""
                    INSERT INTO users (name, email, password)
                    VALUES ($1, $2, $3)
                    RETURNING {_USER_COLUMNS}
                    """,
                    name,
                    email,
                    password_hash,
                )
            except asyncpg.UniqueViolationError as e:
                raise DuplicateEmailError() from e
        return _to_record(row)

    async def update_position(
        self,
        user_id: uuid.UUID,
        latitude: float,
        longitude: float,
    ) -> Optional[UserRecord]:
        """
        Обновляет координаты пользователя.

        Returns:
            Обновлённый пользователь или None, если id не найден
        """
        async with store_errors("update position"):
            row = await self._db.fetchrow(
                f"""
                UPDATE users
                SET latitude = $2, longitude = $3
                WHERE id = $1
                RETURNING {_USER_COLUMNS}
                """,
                user_id,
                latitude,
                longitude,
            )
        return _to_record(row) if row else None
