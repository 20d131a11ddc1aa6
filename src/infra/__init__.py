# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL (asyncpg) и REST API Caloria (httpx).
"""

from src.infra.api_client import CaloriaApiClient
from src.infra.database import DatabaseManager, close_db, get_db, init_db

__all__ = [
    "CaloriaApiClient",
    "DatabaseManager",
    "close_db",
    "get_db",
    "init_db",
]
