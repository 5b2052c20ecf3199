# livemap/common/errors.py
"""
Иерархия ошибок сервиса.
Каждая ошибка несёт HTTP-статус, с которым она отдаётся клиенту.
"""

from __future__ import annotations


class LiveMapError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class DuplicateEmailError(LiveMapError):
    """Email уже зарегистрирован."""
    status_code = 400

    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)


class InvalidCredentialsError(LiveMapError):
    """Неверный email или пароль (одно сообщение для обоих случаев)."""
    status_code = 400

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class TooManyFilesError(LiveMapError):
    """Превышен лимит файлов в одном поле формы."""
    status_code = 400


class MarkerNotFoundError(LiveMapError):
    """Маркер не найден."""
    status_code = 404

    def __init__(self, message: str = "Marker not found") -> None:
        super().__init__(message)


class StoreError(LiveMapError):
    """Ошибка хранилища (PostgreSQL)."""
    status_code = 500


class MediaStorageError(LiveMapError):
    """Не удалось сохранить загруженный файл."""
    status_code = 500
