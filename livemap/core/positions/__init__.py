"""
Модуль геопозиций пользователей.
"""

from livemap.core.positions.service import PositionService

__all__ = ["PositionService"]
