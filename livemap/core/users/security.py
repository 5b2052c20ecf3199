# livemap/core/users/security.py
"""
Хэширование паролей (bcrypt через passlib).
Вычисления выполняются в пуле потоков, чтобы не блокировать event loop.
"""

from __future__ import annotations

import asyncio

from passlib.context import CryptContext


class PasswordHasher:
    """Соленый односторонний хэш пароля с фиксированной стоимостью."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._context.hash, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Сравнивает пароль с хэшем. Нераспознанный хэш считается несовпадением."""
        try:
            return await asyncio.to_thread(self._context.verify, password, password_hash)
        except (ValueError, TypeError):
            return False
