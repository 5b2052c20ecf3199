"""
Модуль маркеров.
"""

from livemap.core.markers.repository import MarkerRepository
from livemap.core.markers.service import MarkerService

__all__ = ["MarkerRepository", "MarkerService"]
