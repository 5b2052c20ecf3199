"""
Создаёт базу данных из настроек, если её ещё нет.
Схема применяется самим сервисом при старте (migrations/init.sql).
"""

import asyncio

import asyncpg

from livemap.config import settings


async def create_db() -> None:
    db_name = settings.database.DB_NAME

    # Подключаемся к служебной БД postgres, чтобы создать целевую
    sys_conn = await asyncpg.connect(
        user=settings.database.DB_USER,
        password=settings.database.DB_PASSWORD,
        host=settings.database.DB_HOST,
        port=settings.database.DB_PORT,
        database="postgres",
    )
    try:
        exists = await sys_conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", db_name)
        if not exists:
            print(f"Creating database {db_name}...")
            await sys_conn.execute(f'CREATE DATABASE "{db_name}"')
            print("Database created.")
        else:
            print(f"Database {db_name} already exists.")
    finally:
        await sys_conn.close()


if __name__ == "__main__":
    asyncio.run(create_db())
