# livemap/services/api/dependencies.py
"""
Зависимости FastAPI. Работают и для HTTP, и для WebSocket маршрутов.
"""

from fastapi import Depends
from starlette.requests import HTTPConnection

from livemap.core.markers.repository import MarkerRepository
from livemap.core.markers.service import MarkerService
from livemap.core.positions.service import PositionService
from livemap.core.users.repository import UserRepository
from livemap.core.users.service import UserService
from livemap.infra.connection_manager import ConnectionManager
from livemap.services.api.context import AppContext


def get_context(connection: HTTPConnection) -> AppContext:
    return connection.app.state.context


def get_connection_manager(context: AppContext = Depends(get_context)) -> ConnectionManager:
    return context.connections


def get_user_repository(context: AppContext = Depends(get_context)) -> UserRepository:
    return UserRepository(context.db)


def get_marker_repository(context: AppContext = Depends(get_context)) -> MarkerRepository:
    return MarkerRepository(context.db)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
    context: AppContext = Depends(get_context),
) -> UserService:
    return UserService(repository, context.hasher)


def get_marker_service(
    repository: MarkerRepository = Depends(get_marker_repository),
    context: AppContext = Depends(get_context),
) -> MarkerService:
    return MarkerService(
        repository,
        context.media,
        context.connections,
        max_photos=context.max_photos,
        max_videos=context.max_videos,
    )


def get_position_service(
    repository: UserRepository = Depends(get_user_repository),
    context: AppContext = Depends(get_context),
) -> PositionService:
    return PositionService(repository, context.connections)
