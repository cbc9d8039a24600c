from __future__ import annotations

"""Async storage layer for gamification progress."""
import json
import logging
import sqlite3
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from ..models.progress import ProgressRecord, StoredProgress

LOGGER = logging.getLogger(__name__)


class ProgressStorage:
    """Persist point balances and badges per user.

    Failures never reach the engine: loads fall back to an empty balance and
    saves are logged and dropped.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    async def init_schema(self) -> None:
        LOGGER.info("Initializing progress database at %s", self._db_path)
        conn = await self._connect()
        try:
            await conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS progress (
                    user_id INTEGER PRIMARY KEY,
                    points INTEGER NOT NULL DEFAULT 0,
                    level INTEGER NOT NULL DEFAULT 1,
                    badges_json TEXT NOT NULL DEFAULT '[]',
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );
                """
            )
            await conn.commit()
        finally:
            await conn.close()

    async def load_progress(self, user_id: int) -> StoredProgress:
        try:
            conn = await self._connect()
            try:
                cursor = await conn.execute(
                    "SELECT points, badges_json FROM progress WHERE user_id=?",
                    (user_id,),
                )
                row = await cursor.fetchone()
            finally:
                await conn.close()
            if row is None:
                LOGGER.debug("No stored progress for user %s", user_id)
                return StoredProgress()
            return StoredProgress(points=row["points"], badges=json.loads(row["badges_json"]))
        except (sqlite3.Error, ValueError, ValidationError):
            LOGGER.exception("Failed to load progress for user %s, starting from zero", user_id)
            return StoredProgress()

    async def save_progress(self, user_id: int, record: ProgressRecord) -> None:
        try:
            conn = await self._connect()
            try:
                await conn.execute(
                    """
                    INSERT INTO progress (user_id, points, level, badges_json, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                        points=excluded.points,
                        level=excluded.level,
                        badges_json=excluded.badges_json,
                        updated_at=excluded.updated_at
                    """,
                    (
                        user_id,
                        record.points,
                        record.level,
                        json.dumps(record.badges, ensure_ascii=False),
                        record.updated_at.isoformat(),
                    ),
                )
                await conn.commit()
            finally:
                await conn.close()
        except sqlite3.Error:
            LOGGER.exception("Failed to save progress for user %s", user_id)

    async def fetch_record(self, user_id: int) -> ProgressRecord | None:
        conn = await self._connect()
        try:
            cursor = await conn.execute(
                "SELECT points, level, badges_json, updated_at FROM progress WHERE user_id=?",
                (user_id,),
            )
            row = await cursor.fetchone()
        finally:
            await conn.close()
        if row is None:
            return None
        return ProgressRecord(
            level=row["level"],
            points=row["points"],
            badges=json.loads(row["badges_json"]),
            updated_at=row["updated_at"],
        )

    async def delete_progress(self, user_id: int) -> None:
        conn = await self._connect()
        try:
            LOGGER.info("Deleting progress for user %s", user_id)
            await conn.execute("DELETE FROM progress WHERE user_id=?", (user_id,))
            await conn.commit()
        finally:
            await conn.close()
