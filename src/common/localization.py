# src/common/localization.py
"""
Модуль локализации.
Тексты бота и уведомлений хранятся в config/lang_dict.json (uz, ru, en).
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any


DEFAULT_LANGUAGE = "uz"
FALLBACK_LANGUAGE = "en"


def get_lang_dict_path() -> Path:
    """Возвращает путь к файлу локализации."""
    return Path(__file__).parent.parent.parent / "config" / "lang_dict.json"


@lru_cache()
def load_lang_dict() -> dict[str, dict[str, str]]:
    """
    Загружает словарь локализации из JSON файла.
    Результат кэшируется.
    """
    lang_path = get_lang_dict_path()
    if not lang_path.exists():
        raise FileNotFoundError(f"Файл локализации не найден: {lang_path}")

    with open(lang_path, "r", encoding="utf-8") as f:
        return json.load(f)


def resolve_language(language_code: str | None) -> str:
    """
    Приводит language_code Telegram (например, "ru-RU") к поддерживаемому языку.

    Returns:
        uz, ru или en; по умолчанию uz
    """
    if not language_code:
        return DEFAULT_LANGUAGE
    code = language_code.split("-")[0].lower()
    if code in get_available_languages():
        return code
    return DEFAULT_LANGUAGE


def get_text(
    key: str,
    lang: str = DEFAULT_LANGUAGE,
    default: str | None = None,
    **kwargs: Any,
) -> str:
    """
    Получает локализованный текст по ключу.

    Args:
        key: Ключ перевода
        lang: Код языка (uz, ru, en)
        default: Значение, если ключ не найден
        **kwargs: Параметры для форматирования строки

    Returns:
        Локализованный текст

    Example:
        >>> get_text("BOT_NEW_USER_WELCOME", "uz", first_name="Ali")
    """
    try:
        lang_dict = load_lang_dict()
    except FileNotFoundError:
        return default if default else f"[{key}]"

    translations = lang_dict.get(key)
    if not translations:
        return default if default else f"[{key}]"

    text = translations.get(lang) or translations.get(FALLBACK_LANGUAGE)
    if not text:
        text = next(iter(translations.values()), f"[{key}]")

    if kwargs:
        try:
            text = text.format(**kwargs)
        except KeyError:
            pass

    return text


def get_available_languages() -> list[str]:
    """Возвращает список языков, для которых есть переводы."""
    try:
        lang_dict = load_lang_dict()
        first_key = next(iter(lang_dict.values()), {})
        return list(first_key.keys())
    except Exception:
        return ["uz", "ru", "en"]


def validate_lang_dict() -> list[str]:
    """
    Проверяет, что у каждого ключа есть перевод на все языки.

    Returns:
        Список ошибок (пустой, если всё в порядке)
    """
    try:
        lang_dict = load_lang_dict()
    except FileNotFoundError as e:
        return [str(e)]

    errors = []
    available = set(get_available_languages())

    for key, translations in lang_dict.items():
        if not isinstance(translations, dict):
            errors.append(f"Ключ '{key}' имеет неверный формат")
            continue
        missing = available - set(translations.keys())
        if missing:
            errors.append(f"Ключ '{key}' не имеет перевода для языков: {sorted(missing)}")

    return errors
