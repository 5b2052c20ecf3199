"""
DTO и Pydantic-модели сервиса.
"""

from livemap.shared.models.common import ErrorResponse, HealthStatus
from livemap.shared.models.user import (
    UserRecord,
    UserPublicDTO,
    UserSummaryDTO,
    AuthResponse,
    RegisterRequest,
    LoginRequest,
)
from livemap.shared.models.marker import MarkerDTO, MarkerCreate, MarkerPatch
from livemap.shared.models.position import PositionBroadcast

__all__ = [
    # Common
    "ErrorResponse",
    "HealthStatus",
    # User
    "UserRecord",
    "UserPublicDTO",
    "UserSummaryDTO",
    "AuthResponse",
    "RegisterRequest",
    "LoginRequest",
    # Marker
    "MarkerDTO",
    "MarkerCreate",
    "MarkerPatch",
    # Position
    "PositionBroadcast",
]
