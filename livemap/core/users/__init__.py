"""
Модуль пользователей.
"""

from livemap.core.users.repository import UserRepository
from livemap.core.users.security import PasswordHasher
from livemap.core.users.service import UserService

__all__ = ["UserRepository", "PasswordHasher", "UserService"]
