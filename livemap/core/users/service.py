# livemap/core/users/service.py
"""
Бизнес-логика пользователей: список, регистрация, вход.
"""

from __future__ import annotations

from livemap.common.constants import TypeMsg
from livemap.common.errors import DuplicateEmailError, InvalidCredentialsError
from livemap.common.logger import log_info
from livemap.core.users.repository import UserRepository
from livemap.core.users.security import PasswordHasher
from livemap.shared.models.user import (
    LoginRequest,
    RegisterRequest,
    UserPublicDTO,
    UserSummaryDTO,
)


class UserService:
    """Сервис пользователей."""

    def __init__(self, repository: UserRepository, hasher: PasswordHasher) -> None:
        self.repository = repository
        self.hasher = hasher

    async def list_users(self) -> list[UserPublicDTO]:
        return await self.repository.list_public()

    async def register(self, request: RegisterRequest) -> UserSummaryDTO:
        """
        Регистрирует пользователя.

        Raises:
            DuplicateEmailError: email уже используется
        """
        existing = await self.repository.get_by_email(request.email)
        if existing:
            raise DuplicateEmailError()

        password_hash = await self.hasher.hash(request.password)
        # Гонка двух регистраций решается уникальным индексом в репозитории
        user = await self.repository.create(request.name, request.email, password_hash)

        await log_info(f"Зарегистрирован пользователь {user.id} ({user.name})", type_msg=TypeMsg.INFO)
        return user.to_summary()

    async def login(self, request: LoginRequest) -> UserSummaryDTO:
        """
        Проверяет email и пароль.

        Raises:
            InvalidCredentialsError: одинаково для неизвестного email и неверного пароля
        """
        user = await self.repository.get_by_email(request.email)
        if user is None:
            raise InvalidCredentialsError()

        if not await self.hasher.verify(request.password, user.password):
            raise InvalidCredentialsError()

        await log_info(f"Вход пользователя {user.id}", type_msg=TypeMsg.DEBUG)
        return user.to_summary()
