"""
Общие утилиты, константы, ошибки и логгер.
"""

from livemap.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from livemap.common.constants import TypeMsg, PushEvent, MediaKind
from livemap.common.errors import (
    LiveMapError,
    DuplicateEmailError,
    InvalidCredentialsError,
    TooManyFilesError,
    MarkerNotFoundError,
    StoreError,
    MediaStorageError,
)

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
    "PushEvent",
    "MediaKind",
    "LiveMapError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "TooManyFilesError",
    "MarkerNotFoundError",
    "StoreError",
    "MediaStorageError",
]
