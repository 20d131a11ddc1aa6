#!/usr/bin/env python3
# main.py
"""
Главная точка входа Caloria AI.

Режимы:
- api          HTTP API (FastAPI + uvicorn), бот работает через вебхук
- bot          бот в режиме polling (локальная разработка)
- set_webhook  установить вебхук бота на WEBHOOK_URL и выйти
- all          API и polling бота в одном процессе
"""

from __future__ import annotations

import asyncio
import signal
import sys

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.infra.database import close_db, init_db


VALID_MODES = ("api", "bot", "set_webhook", "all")

_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики SIGINT и SIGTERM для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


async def run_api() -> None:
    """Запускает HTTP API. Подключение к БД открывает lifespan приложения."""
    import uvicorn

    await log_info(f"Запуск API на порту {settings.api.API_PORT}...", type_msg=TypeMsg.INFO)

    config = uvicorn.Config(
        "src.services.api.app:app",
        host=settings.api.API_HOST,
        port=settings.api.API_PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )
    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info("API: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_bot() -> None:
    """Запускает бота в режиме polling."""
    from src.bot.app import run_polling

    await log_info("Запуск Telegram Bot...", type_msg=TypeMsg.INFO)
    await init_db()
    try:
        await run_polling()
    except asyncio.CancelledError:
        await log_info("Bot (polling): получен сигнал остановки", type_msg=TypeMsg.DEBUG)
        raise
    finally:
        await close_db()


async def run_set_webhook() -> None:
    """Устанавливает вебхук на WEBHOOK_URL из настроек."""
    from src.bot.app import create_bot, setup_webhook

    webhook_url = settings.telegram.WEBHOOK_URL
    if not webhook_url:
        await log_error("WEBHOOK_URL не задан, вебхук не установлен")
        return

    bot = create_bot()
    try:
        await setup_webhook(
            bot,
            webhook_url,
            secret=settings.telegram.WEBHOOK_SECRET,
            allowed_updates=settings.telegram.ALLOWED_UPDATES,
        )
        await log_info(f"Вебхук установлен: {webhook_url}", type_msg=TypeMsg.INFO)
    finally:
        await bot.session.close()


async def run_all() -> None:
    """API и polling бота параллельно (режим разработчика)."""
    global _running_tasks
    _running_tasks = [
        asyncio.create_task(run_api(), name="api"),
        asyncio.create_task(run_bot(), name="bot"),
    ]
    results = await asyncio.gather(*_running_tasks, return_exceptions=True)
    for task, result in zip(_running_tasks, results):
        if isinstance(result, Exception) and not isinstance(result, asyncio.CancelledError):
            await log_error(f"Компонент {task.get_name()} завершился с ошибкой: {result}")


async def main(mode: str | None = None) -> None:
    """
    Главная функция запуска.

    Args:
        mode: api, bot, set_webhook или all.
              Если None, берётся COMPONENT_MODE из настроек.
    """
    setup_logging()
    setup_signal_handlers()

    if mode is None:
        mode = settings.system.COMPONENT_MODE if settings.system.COMPONENT_MODE in VALID_MODES else "api"

    await log_info(
        f"Caloria AI v{settings.system.VERSION}: запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    runners = {
        "api": run_api,
        "bot": run_bot,
        "set_webhook": run_set_webhook,
        "all": run_all,
    }
    try:
        await runners[mode]()
    except asyncio.CancelledError:
        await log_info("Завершение работы...", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    print("Использование: python main.py [api|bot|set_webhook|all]")
    print()
    print("  api          HTTP API, бот через вебхук")
    print("  bot          бот в режиме polling")
    print("  set_webhook  установить вебхук и выйти")
    print("  all          API и бот в одном процессе")


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in VALID_MODES:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
