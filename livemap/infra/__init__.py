"""
Инфраструктурный слой.
PostgreSQL, локальное хранилище медиа и WebSocket-рассылка.
"""

from livemap.infra.database import DatabaseManager, store_errors
from livemap.infra.media_storage import MediaStorage
from livemap.infra.connection_manager import ConnectionManager, Publisher

__all__ = [
    "DatabaseManager",
    "store_errors",
    "MediaStorage",
    "ConnectionManager",
    "Publisher",
]
