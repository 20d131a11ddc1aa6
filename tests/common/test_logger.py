# tests/common/test_logger.py
"""
Тесты для модуля логирования.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from src.common.constants import TypeMsg
from src.common.logger import (
    ColoredFormatter,
    JsonFormatter,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
)


def _record(message: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="caloria",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestFormatters:
    """Тесты форматтеров."""

    def test_json_formatter(self) -> None:
        """JSON-форматтер пишет уровень, сообщение и extra."""
        record = _record("Профиль сохранён")
        record.extra_data = {"user_id": "42"}

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["message"] == "Профиль сохранён"
        assert data["extra"] == {"user_id": "42"}
        assert data["timestamp"].endswith("Z")

    def test_colored_formatter(self) -> None:
        """Цветной форматтер содержит уровень и место вызова."""
        record = _record("ping", logging.WARNING)
        record.extra_data = {
            "caller_function": "handler",
            "caller_module": "src.bot",
            "caller_file": "common.py",
            "caller_line": 5,
        }

        text = ColoredFormatter().format(record)

        assert "[WARNING]" in text
        assert "handler()" in text
        assert "ping" in text


class TestGetLogger:
    """Тесты get_logger."""

    def test_logger_cached(self) -> None:
        """Повторный вызов возвращает тот же логгер."""
        first = get_logger("test_cached")
        second = get_logger("test_cached")
        assert first is second
        assert first.propagate is False
        assert len(first.handlers) >= 1


class TestLogHelpers:
    """Тесты асинхронных функций логирования."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "type_msg, method",
        [
            (TypeMsg.DEBUG, "debug"),
            (TypeMsg.INFO, "info"),
            (TypeMsg.WARNING, "warning"),
            (TypeMsg.ERROR, "error"),
            (TypeMsg.CRITICAL, "critical"),
        ],
    )
    async def test_log_info_levels(self, type_msg: TypeMsg, method: str) -> None:
        """log_info выбирает метод логгера по type_msg."""
        logger = MagicMock()
        with patch("src.common.logger.get_logger", return_value=logger):
            await log_info("message", type_msg=type_msg)

        getattr(logger, method).assert_called_once()
        extra = getattr(logger, method).call_args.kwargs["extra"]["extra_data"]
        assert extra["caller_function"] == "test_log_info_levels"

    @pytest.mark.asyncio
    async def test_shortcuts(self) -> None:
        """log_debug и log_warning используют соответствующие уровни."""
        logger = MagicMock()
        with patch("src.common.logger.get_logger", return_value=logger):
            await log_debug("d")
            await log_warning("w", extra={"k": "v"})

        logger.debug.assert_called_once()
        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["extra"]["extra_data"]["k"] == "v"

    @pytest.mark.asyncio
    async def test_log_error_exc_info(self) -> None:
        """log_error передаёт exc_info в логгер."""
        logger = MagicMock()
        with patch("src.common.logger.get_logger", return_value=logger):
            await log_error("boom", exc_info=True)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["exc_info"] is True
