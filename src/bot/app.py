# src/bot/app.py
"""
Инициализация Telegram бота.
Создание Bot и Dispatcher, настройка webhook/polling.
"""

from __future__ import annotations

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from src.common.constants import TypeMsg
from src.common.logger import log_info


def create_bot(token: str | None = None) -> Bot:
    """
    Создаёт экземпляр бота с HTML-разметкой по умолчанию.

    Args:
        token: Токен бота (если None, берётся из конфига)

    Raises:
        ValueError: токен не задан
    """
    if token is None:
        from src.config import settings
        token = settings.telegram.BOT_TOKEN

    if not token:
        raise ValueError("BOT_TOKEN не задан")

    return Bot(
        token=token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def create_dispatcher() -> Dispatcher:
    """
    Создаёт диспетчер с роутерами и middleware.
    Состояния FSM не используются, хранилище по умолчанию (в памяти).
    """
    dp = Dispatcher()

    from src.bot.handlers import register_routers
    register_routers(dp)

    from src.bot.middleware import register_middleware
    register_middleware(dp)

    return dp


async def setup_webhook(
    bot: Bot,
    webhook_url: str,
    secret: str | None = None,
    allowed_updates: list[str] | None = None,
) -> None:
    """
    Настраивает webhook.

    Args:
        bot: Экземпляр бота
        webhook_url: URL /api/telegram/webhook
        secret: Значение X-Telegram-Bot-Api-Secret-Token
        allowed_updates: Типы update, которые присылает Telegram
    """
    await log_info(f"Настройка webhook: {webhook_url}", type_msg=TypeMsg.INFO)

    await bot.set_webhook(
        url=webhook_url,
        secret_token=secret or None,
        allowed_updates=allowed_updates,
        drop_pending_updates=True,
    )


async def remove_webhook(bot: Bot) -> None:
    await bot.delete_webhook(drop_pending_updates=True)
    await log_info("Webhook удалён", type_msg=TypeMsg.INFO)


async def run_polling(bot: Bot | None = None) -> None:
    """Polling для локальной разработки: вебхук снимается, апдейты читаются напрямую."""
    bot = bot or create_bot()
    dp = create_dispatcher()

    await remove_webhook(bot)
    await log_info("Бот запущен в режиме polling", type_msg=TypeMsg.INFO)
    try:
        await dp.start_polling(bot, handle_signals=False)
    finally:
        await bot.session.close()
