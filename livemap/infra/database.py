# livemap/infra/database.py
"""
Менеджер базы данных PostgreSQL.
Пул соединений, retry при подключении и применение схемы при старте.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, AsyncGenerator, Callable, TypeVar

import asyncpg
from asyncpg import Connection, Pool, Record

from livemap.common.constants import TypeMsg
from livemap.common.errors import StoreError
from livemap.common.logger import log_error, log_info

T = TypeVar("T")

# Произвольный ID advisory-лока для миграций
SCHEMA_LOCK_ID = 824_113_507


def retry_on_connection_error(
    max_attempts: int = 3,
    delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Декоратор для ретрая при ошибках подключения.
    Используется только при старте: запросы клиентов не повторяются.

    Args:
        max_attempts: Максимальное количество попыток
        delay: Базовая задержка между попытками (секунды), растёт линейно
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_error: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except (
                    asyncpg.PostgresConnectionError,
                    asyncpg.InterfaceError,
                    ConnectionRefusedError,
                    OSError,
                ) as e:
                    last_error = e
                    if attempt < max_attempts:
                        await log_info(
                            f"Ошибка подключения к БД (попытка {attempt}/{max_attempts}): {e}",
                            type_msg=TypeMsg.WARNING,
                        )
                        await asyncio.sleep(delay * attempt)
                    else:
                        await log_error(f"Не удалось подключиться к БД после {max_attempts} попыток: {e}")

            raise last_error  # type: ignore

        return wrapper  # type: ignore

    return decorator


@asynccontextmanager
async def store_errors(operation: str) -> AsyncGenerator[None, None]:
    """
    Переводит ошибки asyncpg в StoreError.
    Доменные ошибки, поднятые внутри блока, проходят без изменений.

    Example:
        async with store_errors("create marker"):
            row = await db.fetchrow(...)
    """
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        await log_error(f"Ошибка БД ({operation}): {e}")
        raise StoreError(f"{operation} failed: {e}") from e


class DatabaseManager:
    """
    Менеджер подключений к PostgreSQL.
    Один экземпляр на процесс, хранится в AppContext.
    """

    def __init__(self) -> None:
        self._pool: Pool | None = None

    @property
    def pool(self) -> Pool:
        """Возвращает пул соединений."""
        if self._pool is None:
            raise RuntimeError("Пул соединений не инициализирован. Вызовите connect() сначала.")
        return self._pool

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(
        self,
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: int = 60,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        """
        Создаёт пул соединений к PostgreSQL.

        Args:
            dsn: DSN строка подключения
            min_size: Минимальный размер пула
            max_size: Максимальный размер пула
            command_timeout: Таймаут команд (секунды)
            retry_attempts: Количество попыток подключения
            retry_delay: Базовая задержка между попытками
        """
        if self._pool is not None:
            return

        await log_info("Подключение к PostgreSQL...", type_msg=TypeMsg.INFO)

        @retry_on_connection_error(max_attempts=retry_attempts, delay=retry_delay)
        async def _create_pool() -> Pool:
            return await asyncpg.create_pool(
                dsn=dsn,
                min_size=min_size,
                max_size=max_size,
                command_timeout=command_timeout,
            )

        self._pool = await _create_pool()

        await log_info("Подключение к PostgreSQL установлено", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        """Закрывает пул соединений."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            await log_info("Соединение с PostgreSQL закрыто", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Connection, None]:
        """
        Контекстный менеджер для получения соединения из пула.

        Example:
            async with db.acquire() as conn:
                rows = await conn.fetch("SELECT * FROM markers")
        """
        async with self.pool.acquire() as connection:
            yield connection

    async def execute(self, query: str, *args: Any) -> str:
        """Выполняет SQL запрос без возврата данных."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[Record]:
        """Выполняет SQL запрос и возвращает все строки."""
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> Record | None:
        """Выполняет SQL запрос и возвращает одну строку."""
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any, column: int = 0) -> Any:
        """Выполняет SQL запрос и возвращает одно значение."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column)

    async def health_check(self) -> bool:
        """
        Проверяет здоровье подключения к БД.

        Returns:
            True если подключение работает
        """
        try:
            result = await self.fetchval("SELECT 1")
            return result == 1
        except Exception as e:
            await log_error(f"Health check PostgreSQL failed: {e}")
            return False

    async def apply_schema(self, schema_sql: str) -> None:
        """
        Применяет идемпотентную схему БД.
        Advisory lock не даёт нескольким процессам применять её одновременно.
        """
        async with self.acquire() as conn:
            async with conn.transaction():
                await conn.execute("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_ID)
                await conn.execute(schema_sql)


async def init_db(db: DatabaseManager) -> None:
    """
    Подключает переданный менеджер по настройкам и применяет migrations/init.sql.
    """
    from livemap.config import settings

    cfg = settings.database
    await db.connect(
        dsn=cfg.dsn,
        min_size=cfg.DB_MIN_POOL_SIZE,
        max_size=cfg.DB_MAX_POOL_SIZE,
        command_timeout=cfg.DB_COMMAND_TIMEOUT,
        retry_attempts=cfg.DB_RETRY_ATTEMPTS,
        retry_delay=cfg.DB_RETRY_DELAY,
    )

    await _init_schema(db)


async def _init_schema(db: DatabaseManager) -> None:
    """Выполняет начальную миграцию БД."""
    from livemap.config.loader import get_project_root

    schema_path = get_project_root() / "migrations" / "init.sql"
    if not schema_path.exists():
        await log_error(f"Файл схемы БД не найден: {schema_path}")
        return

    schema_sql = schema_path.read_text(encoding="utf-8")

    await log_info("Применение схемы БД...", type_msg=TypeMsg.INFO)
    await db.apply_schema(schema_sql)
    await log_info("Схема БД успешно применена", type_msg=TypeMsg.INFO)


async def close_db(db: DatabaseManager) -> None:
    """Закрывает подключение к базе данных."""
    await db.disconnect()
