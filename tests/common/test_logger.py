# tests/common/test_logger.py
"""
Unit тесты для модуля логирования (livemap/common/logger.py).
"""

import json
import logging
import sys
from unittest.mock import MagicMock, Mock, patch

import pytest

from livemap.common.constants import TypeMsg
from livemap.common.logger import (
    ColoredFormatter,
    JsonFormatter,
    _get_caller_info,
    _loggers,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
    setup_logging,
)


def _record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


class TestJsonFormatter:
    """Тесты для JsonFormatter."""

    def test_format_basic_record(self) -> None:
        """Запись сериализуется в валидный JSON с базовыми полями."""
        result = json.loads(JsonFormatter().format(_record()))

        assert result["level"] == "INFO"
        assert result["message"] == "Test message"
        assert result["module"] == "test_module"
        assert result["function"] == "test_function"
        assert result["line"] == 10
        assert result["timestamp"].endswith("Z")

    def test_format_with_extra_data(self) -> None:
        record = _record(logging.WARNING, "Warning message")
        record.extra_data = {"marker_id": "abc", "action": "create"}

        result = json.loads(JsonFormatter().format(record))

        assert result["extra"] == {"marker_id": "abc", "action": "create"}

    def test_format_keeps_cyrillic(self) -> None:
        result = JsonFormatter().format(_record(msg="Маркер добавлен"))

        assert "Маркер добавлен" in result

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test exception")
        except ValueError:
            exc_info = sys.exc_info()

        result = json.loads(JsonFormatter().format(_record(logging.ERROR, "Error", exc_info)))

        assert "ValueError" in result["exception"]
        assert "Test exception" in result["exception"]


class TestColoredFormatter:
    """Тесты для ColoredFormatter."""

    def test_format_basic_record(self) -> None:
        result = ColoredFormatter().format(_record())

        assert "INFO" in result
        assert "Test message" in result
        assert "\033[" in result  # ANSI код присутствует

    def test_format_with_caller_info(self) -> None:
        record = _record(logging.DEBUG, "Debug message")
        record.extra_data = {
            "caller_function": "create_marker",
            "caller_module": "livemap.core.markers.service",
            "caller_file": "service.py",
            "caller_line": 42,
        }

        result = ColoredFormatter().format(record)

        assert "livemap.core.markers.service.create_marker()" in result
        assert "service.py:42" in result


class TestGetLogger:
    """Тесты для get_logger."""

    def setup_method(self) -> None:
        """Очистка кэша логгеров перед каждым тестом."""
        _loggers.clear()
        for name in ("test_logger", "test_with_settings", "test_no_settings"):
            logging.getLogger(name).handlers.clear()

    def test_get_logger_creates_new_logger(self) -> None:
        logger = get_logger("test_logger")

        assert logger.name == "test_logger"
        assert len(logger.handlers) >= 1
        assert logger.propagate is False

    def test_get_logger_returns_cached_logger(self) -> None:
        assert get_logger("test_logger") is get_logger("test_logger")

    def test_get_logger_does_not_duplicate_handlers(self) -> None:
        logger = get_logger("test_logger")
        handlers_count = len(logger.handlers)
        _loggers.clear()

        assert len(get_logger("test_logger").handlers) == handlers_count

    @patch("livemap.config.settings")
    def test_get_logger_uses_settings(self, mock_settings: Mock) -> None:
        """Уровень и формат берутся из настроек."""
        mock_settings.logging.LOG_LEVEL = "WARNING"
        mock_settings.logging.LOG_FORMAT = "json"
        mock_settings.logging.LOG_TO_FILE = False
        mock_settings.logging.LOG_FILE_PATH = "logs/test.log"
        mock_settings.logging.LOG_MAX_BYTES = 10485760
        mock_settings.logging.LOG_BACKUP_COUNT = 5

        logger = get_logger("test_with_settings")

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    @patch("livemap.config.settings")
    def test_get_logger_ignores_mock_values(self, mock_settings: MagicMock) -> None:
        """Нестроковые значения из MagicMock заменяются значениями по умолчанию."""
        logger = get_logger("test_with_settings")

        assert logger.level == logging.DEBUG

    def test_get_logger_handles_missing_settings(self) -> None:
        with patch.dict("sys.modules", {"livemap.config": None}):
            logger = get_logger("test_no_settings")

        assert logger.level == logging.DEBUG


class TestSetupLogging:
    """Тесты для setup_logging."""

    def setup_method(self) -> None:
        _loggers.clear()

    def test_setup_logging_initializes_system(self) -> None:
        with patch("livemap.common.logger._LOGGING_INITIALIZED", False):
            setup_logging()

        assert "livemap" in _loggers

    def test_setup_logging_sets_third_party_levels(self) -> None:
        with patch("livemap.common.logger._LOGGING_INITIALIZED", False):
            setup_logging()

        assert logging.getLogger("asyncpg").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_setup_logging_is_idempotent(self) -> None:
        with patch("livemap.common.logger._LOGGING_INITIALIZED", True):
            setup_logging()

        assert "livemap" not in _loggers


class TestGetCallerInfo:
    """Тесты для _get_caller_info."""

    def test_get_caller_info_points_to_caller(self) -> None:
        def marker_function():
            return _get_caller_info()

        info = marker_function()

        assert info["caller_function"] == "marker_function"
        assert info["caller_file"] == "test_logger.py"


class TestLogFunctions:
    """Тесты для асинхронных функций логирования."""

    @pytest.fixture
    def mock_logger(self):
        logger = MagicMock()
        with patch("livemap.common.logger.get_logger", return_value=logger):
            yield logger

    @pytest.mark.asyncio
    async def test_log_info_default_level(self, mock_logger: MagicMock) -> None:
        await log_info("Test info")

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "Test info"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("type_msg", "method"),
        [
            (TypeMsg.DEBUG, "debug"),
            (TypeMsg.WARNING, "warning"),
            (TypeMsg.ERROR, "error"),
            (TypeMsg.CRITICAL, "critical"),
        ],
    )
    async def test_log_info_routes_by_type(self, mock_logger: MagicMock, type_msg: TypeMsg, method: str) -> None:
        await log_info("Routed", type_msg=type_msg)

        getattr(mock_logger, method).assert_called_once()

    @pytest.mark.asyncio
    async def test_log_info_passes_extra(self, mock_logger: MagicMock) -> None:
        await log_info("With extra", extra={"connection_id": "abc"})

        extra = mock_logger.info.call_args.kwargs["extra"]["extra_data"]
        assert extra["connection_id"] == "abc"
        assert extra["caller_function"] == "test_log_info_passes_extra"

    @pytest.mark.asyncio
    async def test_log_debug(self, mock_logger: MagicMock) -> None:
        await log_debug("Test debug")

        mock_logger.debug.assert_called_once()

    @pytest.mark.asyncio
    async def test_log_warning_reports_real_caller(self, mock_logger: MagicMock) -> None:
        await log_warning("Test warning")

        extra = mock_logger.warning.call_args.kwargs["extra"]["extra_data"]
        assert extra["caller_function"] == "test_log_warning_reports_real_caller"

    @pytest.mark.asyncio
    async def test_log_error_with_exc_info(self, mock_logger: MagicMock) -> None:
        await log_error("Test error", exc_info=True)

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["exc_info"] is True
