# src/services/api/repository.py
"""
Репозитории таблиц Caloria AI.

Запросы идут через DatabaseManager; ошибки БД пробрасываются,
их обрабатывает слой маршрутов.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from src.common.constants import (
    TABLE_MEAL_ENTRIES,
    TABLE_SLEEP_SESSIONS,
    TABLE_STEP_SESSIONS,
    TABLE_USER_PROFILES,
    TypeMsg,
)
from src.common.logger import log_info
from src.infra.database import DatabaseManager, record_to_dict
from src.shared.models.profile import PROFILE_FIELDS
from src.shared.models.tracking import MealEntryCreate, SleepSessionCreate, StepSessionCreate


STEP_UPDATE_FIELDS: tuple[str, ...] = ("date", "steps", "distance", "calories", "duration", "avg_pace")


def _affected_rows(status: str | None) -> int:
    """Число строк из статуса asyncpg: 'DELETE 1' -> 1."""
    if not status:
        return 0
    try:
        return int(status.split()[-1])
    except ValueError:
        return 0


def _set_clause(columns: list[str], start: int) -> str:
    return ", ".join(f"{column} = ${i}" for i, column in enumerate(columns, start=start))


class ProfileRepository:
    """Профили пользователей (user_profiles)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_telegram_id(self, telegram_id: str) -> dict[str, Any] | None:
        row = await self._db.fetchrow(
            f"SELECT * FROM {TABLE_USER_PROFILES} WHERE telegram_id = $1",
            telegram_id,
        )
        return record_to_dict(row)

    async def exists(self, telegram_id: str) -> bool:
        value = await self._db.fetchval(
            f"SELECT 1 FROM {TABLE_USER_PROFILES} WHERE telegram_id = $1",
            telegram_id,
        )
        return value is not None

    async def upsert(self, telegram_id: str, data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
        """
        Создаёт профиль или обновляет существующий по telegram_id.

        Args:
            telegram_id: Telegram ID пользователя
            data: Поля профиля (лишние ключи игнорируются)

        Returns:
            (строка профиля, True если профиль создан)
        """
        columns = [c for c in PROFILE_FIELDS if c in data]
        values = [data[c] for c in columns]

        insert_columns = ", ".join(["telegram_id", *columns])
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 2))
        updates = ", ".join([*(f"{c} = EXCLUDED.{c}" for c in columns), "updated_at = NOW()"])

        row = await self._db.fetchrow(
            f"""
            INSERT INTO {TABLE_USER_PROFILES} ({insert_columns})
            VALUES ({placeholders})
            ON CONFLICT (telegram_id) DO UPDATE SET {updates}
            RETURNING *, (xmax = 0) AS inserted
            """,
            telegram_id,
            *values,
        )
        profile = dict(row)
        created = bool(profile.pop("inserted", False))

        await log_info(
            f"Профиль {telegram_id} {'создан' if created else 'обновлён'}",
            type_msg=TypeMsg.DEBUG,
        )
        return profile, created

    async def update(self, telegram_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """
        Обновляет поля профиля и updated_at.

        Returns:
            Обновлённая строка или None, если профиля нет
        """
        columns = [c for c in PROFILE_FIELDS if c in updates]
        set_clause = _set_clause(columns, start=2)
        if set_clause:
            set_clause += ", "

        row = await self._db.fetchrow(
            f"""
            UPDATE {TABLE_USER_PROFILES}
            SET {set_clause}updated_at = NOW()
            WHERE telegram_id = $1
            RETURNING *
            """,
            telegram_id,
            *(updates[c] for c in columns),
        )
        return record_to_dict(row)

    async def delete(self, telegram_id: str) -> bool:
        status = await self._db.execute(
            f"DELETE FROM {TABLE_USER_PROFILES} WHERE telegram_id = $1",
            telegram_id,
        )
        return _affected_rows(status) > 0


class SleepRepository:
    """Записи сна (sleep_sessions)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_for_user(self, user_id: str, on_date: date | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        """Записи пользователя, новые первыми."""
        query = f"SELECT * FROM {TABLE_SLEEP_SESSIONS} WHERE user_id = $1"
        args: list[Any] = [user_id]
        if on_date is not None:
            query += " AND date = $2"
            args.append(on_date)
        query += " ORDER BY date DESC, created_at DESC"
        if limit:
            query += f" LIMIT {int(limit)}"

        rows = await self._db.fetch(query, *args)
        return [dict(row) for row in rows]

    async def create(self, session: SleepSessionCreate, duration: float) -> dict[str, Any]:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO {TABLE_SLEEP_SESSIONS}
                (user_id, date, bed_time, wake_time, duration, quality, notes)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
            """,
            session.user_id,
            session.date,
            session.bed_time,
            session.wake_time,
            duration,
            session.quality,
            session.notes,
        )
        return dict(row)


class StepRepository:
    """Записи шагов (step_sessions)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_for_user(self, user_id: str, on_date: date | None = None) -> list[dict[str, Any]]:
        query = f"SELECT * FROM {TABLE_STEP_SESSIONS} WHERE user_id = $1"
        args: list[Any] = [user_id]
        if on_date is not None:
            query += " AND date = $2"
            args.append(on_date)
        query += " ORDER BY date DESC, created_at DESC"

        rows = await self._db.fetch(query, *args)
        return [dict(row) for row in rows]

    async def create(self, session: StepSessionCreate) -> dict[str, Any]:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO {TABLE_STEP_SESSIONS}
                (user_id, date, steps, distance, calories, duration, avg_pace)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
            """,
            session.user_id,
            session.date,
            session.steps,
            session.distance,
            session.calories,
            session.duration,
            session.avg_pace,
        )
        return dict(row)

    async def update(self, session_id: UUID, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Обновляет запись; None, если записи нет."""
        columns = [c for c in STEP_UPDATE_FIELDS if c in updates]
        if not columns:
            row = await self._db.fetchrow(
                f"SELECT * FROM {TABLE_STEP_SESSIONS} WHERE id = $1",
                session_id,
            )
            return record_to_dict(row)

        row = await self._db.fetchrow(
            f"""
            UPDATE {TABLE_STEP_SESSIONS}
            SET {_set_clause(columns, start=2)}
            WHERE id = $1
            RETURNING *
            """,
            session_id,
            *(updates[c] for c in columns),
        )
        return record_to_dict(row)

    async def total_steps(self, user_id: str, on_date: date) -> int:
        value = await self._db.fetchval(
            f"SELECT COALESCE(SUM(steps), 0) FROM {TABLE_STEP_SESSIONS} WHERE user_id = $1 AND date = $2",
            user_id,
            on_date,
        )
        return int(value or 0)


class MealRepository:
    """Приёмы пищи (meal_entries)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_for_user(self, user_id: str, on_date: date | None = None) -> list[dict[str, Any]]:
        """Записи пользователя, последние добавленные первыми."""
        query = f"SELECT * FROM {TABLE_MEAL_ENTRIES} WHERE user_id = $1"
        args: list[Any] = [user_id]
        if on_date is not None:
            query += " AND date = $2"
            args.append(on_date)
        query += " ORDER BY created_at DESC"

        rows = await self._db.fetch(query, *args)
        return [dict(row) for row in rows]

    async def create(self, entry: MealEntryCreate) -> dict[str, Any]:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO {TABLE_MEAL_ENTRIES}
                (user_id, name, calories, protein, carbs, fat, meal_type, date)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
            """,
            entry.user_id,
            entry.name,
            entry.calories,
            entry.protein,
            entry.carbs,
            entry.fat,
            entry.meal_type,
            entry.date,
        )
        return dict(row)

    async def delete(self, entry_id: UUID) -> bool:
        status = await self._db.execute(
            f"DELETE FROM {TABLE_MEAL_ENTRIES} WHERE id = $1",
            entry_id,
        )
        return _affected_rows(status) > 0

    async def daily_totals(self, user_id: str, on_date: date) -> dict[str, Any]:
        """Количество приёмов пищи и сумма калорий за день."""
        row = await self._db.fetchrow(
            f"""
            SELECT COUNT(*) AS meals, COALESCE(SUM(calories), 0) AS calories
            FROM {TABLE_MEAL_ENTRIES}
            WHERE user_id = $1 AND date = $2
            """,
            user_id,
            on_date,
        )
        if row is None:
            return {"meals": 0, "calories": 0}
        return {"meals": int(row["meals"]), "calories": round(float(row["calories"]))}
