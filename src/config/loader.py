# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины: config/config.json.
Секретные данные переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "caloria_ai"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    RUN_DEV_MODE: bool = True
    COMPONENT_MODE: str = "api"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = True
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class TelegramSettings(BaseModel):
    """Настройки Telegram Bot API и Mini App."""
    BOT_TOKEN: str = ""
    USE_WEBHOOK: bool = True
    WEBHOOK_HOST: str = "https://yurlo.vercel.app"
    WEBHOOK_PATH: str = "/api/telegram/webhook"
    WEBHOOK_URL: str | None = None
    WEBHOOK_SECRET: str | None = None
    MINI_APP_URL: str = "https://yurlo.vercel.app"
    ALLOWED_UPDATES: list[str] = Field(
        default_factory=lambda: ["message", "callback_query", "inline_query"]
    )
    INIT_DATA_MAX_AGE: int = 86400

    @field_validator("BOT_TOKEN", mode="before")
    @classmethod
    def get_from_env(cls, v: str | None) -> str:
        """Получает токен из переменных окружения, если не задан."""
        if not v:
            return os.getenv("TELEGRAM_BOT_TOKEN", os.getenv("BOT_TOKEN", ""))
        return v

    @model_validator(mode="after")
    def compute_webhook_url(self) -> "TelegramSettings":
        """Вычисляет URL вебхука, если он не задан."""
        if not self.WEBHOOK_URL and self.WEBHOOK_HOST:
            self.WEBHOOK_URL = f"{self.WEBHOOK_HOST.rstrip('/')}{self.WEBHOOK_PATH}"
        return self


class ApiSettings(BaseModel):
    """Настройки HTTP API."""
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_BASE_URL: str = "http://localhost:8080/api"
    API_TIMEOUT: float = 10.0
    PING_MESSAGE: str = "pong"
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


class DomainSettings(BaseModel):
    """Настройки локализации."""
    DEFAULT_LANGUAGE: str = "uz"
    SUPPORTED_LANGUAGES: list[str] = Field(default_factory=lambda: ["en", "uz", "ru"])
    TIMEZONE: str = "Asia/Tashkent"


class NutritionSettings(BaseModel):
    """Цели по умолчанию и коэффициенты рекомендаций."""
    DEFAULT_CALORIE_GOAL: int = 2000
    DEFAULT_WATER_GOAL: int = 8
    DEFAULT_STEPS_GOAL: int = 10000
    DEFAULT_MEALS_GOAL: int = 3
    GOAL_CALORIE_ADJUSTMENT: int = 300
    WATER_ML_PER_KG: int = 35
    GLASS_ML: int = 250


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL (Supabase)."""
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "caloria"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60
    DB_RETRY_ATTEMPTS: int = 3
    DB_RETRY_DELAY: float = 1.0

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str | None) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    domain: DomainSettings = Field(default_factory=DomainSettings)
    nutrition: NutritionSettings = Field(default_factory=NutritionSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Секреты переопределяются из переменных окружения.
        """
        config_data = load_config_json()

        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "caloria_ai"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
                RUN_DEV_MODE=data.get("RUN_DEV_MODE", True),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", data.get("COMPONENT_MODE", "api")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "DEBUG"),
                LOG_TO_FILE=os.getenv("LOG_TO_FILE", str(data.get("LOG_TO_FILE", True))).lower() in ("1", "true", "yes"),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            telegram=TelegramSettings(
                BOT_TOKEN=os.getenv(
                    "TELEGRAM_BOT_TOKEN",
                    os.getenv("BOT_TOKEN", data.get("BOT_TOKEN", "")),
                ),
                USE_WEBHOOK=data.get("USE_WEBHOOK", True),
                WEBHOOK_HOST=os.getenv("WEBHOOK_HOST", data.get("WEBHOOK_HOST", "https://yurlo.vercel.app")),
                WEBHOOK_PATH=data.get("WEBHOOK_PATH", "/api/telegram/webhook"),
                WEBHOOK_URL=data.get("WEBHOOK_URL"),
                WEBHOOK_SECRET=os.getenv("WEBHOOK_SECRET", data.get("WEBHOOK_SECRET")),
                MINI_APP_URL=os.getenv("MINI_APP_URL", data.get("MINI_APP_URL", "https://yurlo.vercel.app")),
                ALLOWED_UPDATES=data.get("ALLOWED_UPDATES", ["message", "callback_query", "inline_query"]),
                INIT_DATA_MAX_AGE=data.get("INIT_DATA_MAX_AGE", 86400),
            ),
            api=ApiSettings(
                API_HOST=data.get("API_HOST", "0.0.0.0"),
                API_PORT=int(os.getenv("API_PORT", data.get("API_PORT", 8080))),
                API_BASE_URL=os.getenv("API_BASE_URL", data.get("API_BASE_URL", "http://localhost:8080/api")),
                API_TIMEOUT=data.get("API_TIMEOUT", 10.0),
                PING_MESSAGE=os.getenv("PING_MESSAGE", data.get("PING_MESSAGE", "pong")),
                CORS_ORIGINS=data.get("CORS_ORIGINS", ["*"]),
            ),
            domain=DomainSettings(
                DEFAULT_LANGUAGE=data.get("DEFAULT_LANGUAGE", "uz"),
                SUPPORTED_LANGUAGES=data.get("SUPPORTED_LANGUAGES", ["en", "uz", "ru"]),
                TIMEZONE=data.get("TIMEZONE", "Asia/Tashkent"),
            ),
            nutrition=NutritionSettings(
                DEFAULT_CALORIE_GOAL=data.get("DEFAULT_CALORIE_GOAL", 2000),
                DEFAULT_WATER_GOAL=data.get("DEFAULT_WATER_GOAL", 8),
                DEFAULT_STEPS_GOAL=data.get("DEFAULT_STEPS_GOAL", 10000),
                DEFAULT_MEALS_GOAL=data.get("DEFAULT_MEALS_GOAL", 3),
                GOAL_CALORIE_ADJUSTMENT=data.get("GOAL_CALORIE_ADJUSTMENT", 300),
                WATER_ML_PER_KG=data.get("WATER_ML_PER_KG", 35),
                GLASS_ML=data.get("GLASS_ML", 250),
            ),
            database=DatabaseSettings(
                DATABASE_URL=os.getenv("DATABASE_URL", data.get("DATABASE_URL")),
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "caloria")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
                DB_RETRY_ATTEMPTS=data.get("DB_RETRY_ATTEMPTS", 3),
                DB_RETRY_DELAY=data.get("DB_RETRY_DELAY", 1.0),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    # Загружаем .env файл
    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
