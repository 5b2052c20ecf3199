# livemap/infra/media_storage.py
"""
Локальное хранилище загруженных фото и видео.
Файлы кладутся в плоскую директорию под именем <epoch-ms>-<имя файла>.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Protocol

from livemap.common.constants import TypeMsg
from livemap.common.errors import MediaStorageError
from livemap.common.logger import log_info


class UploadLike(Protocol):
    """Минимальный интерфейс загруженного файла (starlette UploadFile)."""
    filename: str | None

    async def read(self, size: int = -1) -> bytes: ...


class MediaStorage:
    """
    Хранилище медиафайлов на локальном диске.

    Не занимается дедупликацией и очисткой: файл, сохранённый до ошибки
    записи маркера, остаётся на диске.
    """

    def __init__(self, directory: Path, url_prefix: str = "/uploads") -> None:
        self._directory = Path(directory)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> None:
        """Создаёт директорию загрузок, если её нет."""
        self._directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def safe_basename(filename: str | None) -> str:
        """Отрезает компоненты пути из имени файла клиента."""
        if not filename:
            return "file"
        # Клиент может прислать как POSIX, так и Windows-путь
        name = PureWindowsPath(PurePosixPath(filename).name).name
        return name or "file"

    def build_filename(self, original: str | None, timestamp_ms: int | None = None) -> str:
        """Генерирует имя файла: <epoch-ms>-<basename>."""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"{timestamp_ms}-{self.safe_basename(original)}"

    def public_path(self, filename: str) -> str:
        """Путь, по которому файл отдаётся клиентам."""
        return f"{self._url_prefix}/{filename}"

    def _write_unique(self, original: str | None, content: bytes) -> str:
        """
        Записывает файл под свободным именем и возвращает это имя.

        Файл создаётся эксклюзивно; если имя уже занято (то же имя файла
        в ту же миллисекунду), метка времени сдвигается на 1 мс.
        """
        timestamp_ms = int(time.time() * 1000)
        while True:
            filename = self.build_filename(original, timestamp_ms)
            try:
                with (self._directory / filename).open("xb") as fh:
                    fh.write(content)
            except FileExistsError:
                timestamp_ms += 1
                continue
            return filename

    async def save(self, upload: UploadLike) -> str:
        """
        Сохраняет один загруженный файл.

        Returns:
            Публичный путь вида /uploads/<имя>

        Raises:
            MediaStorageError: если файл не удалось записать
        """
        try:
            content = await upload.read()
            filename = await asyncio.to_thread(self._write_unique, upload.filename, content)
        except OSError as e:
            raise MediaStorageError(f"Failed to store upload {upload.filename!r}: {e}") from e

        await log_info(
            f"Файл сохранён: {filename} ({len(content)} байт)",
            type_msg=TypeMsg.DEBUG,
        )
        return self.public_path(filename)

    async def save_many(self, uploads: list[UploadLike]) -> list[str]:
        """Сохраняет файлы по порядку и возвращает их публичные пути в том же порядке."""
        paths: list[str] = []
        for upload in uploads:
            paths.append(await self.save(upload))
        return paths
