# src/core/telegram/auth.py
"""
Проверка подписи initData Telegram Mini App.
https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import datetime, timezone
from typing import Mapping
from urllib.parse import parse_qsl

from pydantic import BaseModel


class WebAppUser(BaseModel):
    """Пользователь из initData."""
    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    is_premium: bool | None = None
    photo_url: str | None = None


class WebAppInitData(BaseModel):
    """Проверенные поля initData."""
    user: WebAppUser
    auth_date: datetime
    query_id: str | None = None
    chat_type: str | None = None
    chat_instance: str | None = None
    start_param: str | None = None
    hash: str


class TelegramAuthError(Exception):
    """initData не прошли проверку."""


def build_data_check_string(fields: Mapping[str, str]) -> str:
    """Строка key=value, отсортированная по ключу, без hash."""
    return "\n".join(f"{key}={fields[key]}" for key in sorted(fields) if key != "hash")


def compute_init_data_hash(fields: Mapping[str, str], bot_token: str) -> str:
    """HMAC-SHA256 подписи initData. Секрет: HMAC("WebAppData", bot_token)."""
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    return hmac.new(
        secret_key,
        build_data_check_string(fields).encode(),
        hashlib.sha256,
    ).hexdigest()


def validate_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int = 86400,
) -> WebAppInitData:
    """
    Проверяет initData из Telegram.WebApp.initData.

    Args:
        init_data: URL-encoded строка initData
        bot_token: Токен бота
        max_age_seconds: Максимальный возраст auth_date; 0 отключает проверку

    Raises:
        TelegramAuthError: подпись неверна, данные устарели или неполные
    """
    if not init_data:
        raise TelegramAuthError("initData пустые")
    if not bot_token:
        raise TelegramAuthError("BOT_TOKEN не задан")

    fields = dict(parse_qsl(init_data, keep_blank_values=True))

    received_hash = fields.get("hash")
    if not received_hash:
        raise TelegramAuthError("В initData нет hash")

    if not hmac.compare_digest(compute_init_data_hash(fields, bot_token), received_hash):
        raise TelegramAuthError("Подпись initData не совпадает")

    try:
        auth_date = datetime.fromtimestamp(int(fields["auth_date"]), tz=timezone.utc)
    except (KeyError, ValueError) as e:
        raise TelegramAuthError(f"Некорректный auth_date: {e}") from e

    age = (datetime.now(timezone.utc) - auth_date).total_seconds()
    if max_age_seconds and age > max_age_seconds:
        raise TelegramAuthError("initData устарели")

    if "user" not in fields:
        raise TelegramAuthError("В initData нет user")

    try:
        user = WebAppUser.model_validate(json.loads(fields["user"]))
    except ValueError as e:
        raise TelegramAuthError(f"Некорректный user в initData: {e}") from e

    return WebAppInitData(
        user=user,
        auth_date=auth_date,
        query_id=fields.get("query_id"),
        chat_type=fields.get("chat_type"),
        chat_instance=fields.get("chat_instance"),
        start_param=fields.get("start_param"),
        hash=received_hash,
    )
