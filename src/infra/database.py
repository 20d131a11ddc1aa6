# src/infra/database.py
"""
Слой доступа к PostgreSQL (Supabase).

Один пул asyncpg на процесс: API и бот работают через общий
DatabaseManager. Ошибки соединения повторяются декоратором
retry_on_connection_error, остальные ошибки пробрасываются вызывающему.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, AsyncGenerator, Callable, TypeVar
from urllib.parse import urlparse

import asyncpg
from asyncpg import Connection, Pool, Record

from src.common.constants import TypeMsg
from src.common.logger import get_logger, log_error, log_info, log_warning

logger = get_logger("database")

T = TypeVar("T")

# Произвольный ключ advisory lock для применения init.sql
SCHEMA_LOCK_KEY = 20240601

_CONNECTION_ERRORS = (
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    ConnectionRefusedError,
    OSError,
)


def retry_on_connection_error(
    max_attempts: int = 3,
    delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Повторяет корутину при ошибках подключения к БД.

    Задержка растёт линейно: delay, 2*delay, ...
    После последней попытки пробрасывается исходная ошибка.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_error: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except _CONNECTION_ERRORS as e:
                    last_error = e
                    if attempt == max_attempts:
                        await log_error(
                            f"БД недоступна после {max_attempts} попыток ({func.__name__}): {e}"
                        )
                        break
                    await log_warning(
                        f"Нет соединения с БД, попытка {attempt}/{max_attempts} ({func.__name__}): {e}"
                    )
                    await asyncio.sleep(delay * attempt)

            raise last_error  # type: ignore

        return wrapper  # type: ignore

    return decorator


def record_to_dict(record: Record | None) -> dict[str, Any] | None:
    """Преобразует asyncpg.Record в словарь (None остаётся None)."""
    if record is None:
        return None
    return dict(record)


def _safe_dsn(dsn: str) -> str:
    """Возвращает host:port/db из DSN без логина и пароля."""
    parsed = urlparse(dsn)
    host = parsed.hostname or "?"
    port = f":{parsed.port}" if parsed.port else ""
    return f"{host}{port}{parsed.path or ''}"


class DatabaseManager:
    """
    Singleton-обёртка над пулом asyncpg.
    Репозитории получают её через get_db() и не работают с пулом напрямую.
    """

    _instance: DatabaseManager | None = None
    _pool: Pool | None = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._pool = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> Pool:
        """Пул соединений; до connect() обращение к нему является ошибкой."""
        if self._pool is None:
            raise RuntimeError("Пул PostgreSQL не создан: сначала вызовите connect()")
        return self._pool

    @retry_on_connection_error(max_attempts=3, delay=1.0)
    async def connect(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: int = 60,
    ) -> None:
        """
        Создаёт пул соединений. Повторный вызов ничего не делает.

        Args:
            dsn: Строка подключения (по умолчанию из settings.database)
            min_size: Минимальный размер пула
            max_size: Максимальный размер пула
            command_timeout: Таймаут запроса, секунды
        """
        if self._pool is not None:
            return

        if dsn is None:
            from src.config import settings

            dsn = settings.database.dsn
            min_size = settings.database.DB_MIN_POOL_SIZE
            max_size = settings.database.DB_MAX_POOL_SIZE
            command_timeout = settings.database.DB_COMMAND_TIMEOUT

        await log_info(f"Создание пула PostgreSQL ({_safe_dsn(dsn)})", type_msg=TypeMsg.DEBUG)

        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )

        await log_info(f"Пул PostgreSQL готов: {_safe_dsn(dsn)}", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        """Закрывает пул, если он был создан."""
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        await log_info("Пул PostgreSQL закрыт", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Connection, None]:
        """Берёт соединение из пула на время блока async with."""
        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Connection, None]:
        """
        Соединение внутри транзакции: commit при выходе из блока,
        rollback при исключении.

        Example:
            async with db.transaction() as conn:
                await conn.execute("DELETE FROM meal_entries WHERE user_id = $1", user_id)
        """
        async with self.pool.acquire() as connection:
            async with connection.transaction():
                yield connection

    @retry_on_connection_error()
    async def execute(self, query: str, *args: Any) -> str:
        """Выполняет запрос, возвращает статус asyncpg (например, 'DELETE 1')."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    @retry_on_connection_error()
    async def fetch(self, query: str, *args: Any) -> list[Record]:
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    @retry_on_connection_error()
    async def fetchrow(self, query: str, *args: Any) -> Record | None:
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    @retry_on_connection_error()
    async def fetchval(self, query: str, *args: Any, column: int = 0) -> Any:
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column)

    async def health_check(self) -> bool:
        """True, если пул создан и SELECT 1 проходит."""
        if self._pool is None:
            return False
        try:
            return await self.fetchval("SELECT 1") == 1
        except Exception as e:
            await log_error(f"Проверка PostgreSQL не прошла: {e}")
            return False


_db_manager: DatabaseManager | None = None


def get_db() -> DatabaseManager:
    """Возвращает процессный экземпляр DatabaseManager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_db() -> DatabaseManager:
    """
    Подключается к БД по настройкам и применяет migrations/init.sql.

    Returns:
        Подключённый DatabaseManager
    """
    from src.config import settings

    db = get_db()
    await db.connect(
        dsn=settings.database.dsn,
        min_size=settings.database.DB_MIN_POOL_SIZE,
        max_size=settings.database.DB_MAX_POOL_SIZE,
        command_timeout=settings.database.DB_COMMAND_TIMEOUT,
    )
    await apply_schema(db)
    return db


async def apply_schema(db: DatabaseManager) -> bool:
    """
    Применяет migrations/init.sql под advisory lock.
    Скрипт идемпотентен (CREATE ... IF NOT EXISTS), поэтому его можно
    выполнять при каждом старте API и бота.

    Returns:
        True, если схема применена; False, если файла нет
    """
    from src.config.loader import get_project_root

    schema_path = get_project_root() / "migrations" / "init.sql"
    if not schema_path.exists():
        await log_warning(f"init.sql не найден, схема не применяется: {schema_path}")
        return False

    schema_sql = schema_path.read_text(encoding="utf-8")

    try:
        async with db.transaction() as conn:
            await conn.execute("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_KEY)
            await conn.execute(schema_sql)
    except asyncpg.DuplicateObjectError as e:
        # API и бот стартуют одновременно
        await log_warning(f"Схема уже создана другим процессом: {e}")
        return True

    await log_info("Схема БД применена", type_msg=TypeMsg.INFO)
    return True


async def close_db() -> None:
    """Закрывает пул при остановке процесса."""
    await get_db().disconnect()
