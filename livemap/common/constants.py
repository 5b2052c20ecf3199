# livemap/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class PushEvent(str, Enum):
    """События push-канала."""
    # Сервер -> клиент
    ALL_MARKERS = "allMarkers"
    NEW_MARKER = "newMarker"
    UPDATED_MARKER = "updatedMarker"
    POSITIONS_UPDATE = "positionsUpdate"
    # Клиент -> сервер
    UPDATE_POSITION = "updatePosition"


class MediaKind(str, Enum):
    """Поля формы с вложениями маркера."""
    PHOTOS = "photos"
    VIDEOS = "videos"


DEFAULT_MARKER_COLOR = "#ff0000"
