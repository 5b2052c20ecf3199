# livemap/shared/models/user.py
"""
Модели пользователей.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """Пользователь как он хранится в БД (с хэшем пароля). Наружу не отдаётся."""

    id: str
    name: str
    email: str
    password: str = Field(..., repr=False)
    latitude: float = 0.0
    longitude: float = 0.0
    created_at: datetime

    def to_public(self) -> "UserPublicDTO":
        return UserPublicDTO(
            id=self.id,
            name=self.name,
            email=self.email,
            latitude=self.latitude,
            longitude=self.longitude,
            created_at=self.created_at,
        )

    def to_summary(self) -> "UserSummaryDTO":
        return UserSummaryDTO(id=self.id, name=self.name)


class UserPublicDTO(BaseModel):
    """Пользователь в ответе GET /users (без пароля)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    latitude: float = 0.0
    longitude: float = 0.0
    created_at: datetime = Field(..., alias="createdAt")


class UserSummaryDTO(BaseModel):
    id: str
    name: str


class AuthResponse(BaseModel):
    """Ответ на регистрацию и вход."""

    user: UserSummaryDTO


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str
