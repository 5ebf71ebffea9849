"""Append-only history of generated chronicles (SQLite)."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS chronicles (
    id TEXT PRIMARY KEY,
    week INTEGER,
    summary TEXT,
    story TEXT,
    model TEXT,
    created_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_chronicles_week ON chronicles (week, created_at);
"""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ChronicleDB:
    """Every story ever written, newest wins per week."""

    def __init__(self, db_path: str | Path):
        self._path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def open(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._path))
        await self._db.executescript(_SCHEMA)
        await self._db.commit()
        logger.debug("Chronicle DB ready at %s", self._path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()

    async def __aenter__(self) -> ChronicleDB:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def log_chronicle(
        self,
        week: int,
        story: str,
        summary: str = "",
        model: str = "",
    ) -> str:
        row_id = str(uuid.uuid4())
        await self._db.execute(
            "INSERT INTO chronicles (id, week, summary, story, model, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (row_id, week, summary, story, model, _now_iso()),
        )
        await self._db.commit()
        return row_id

    async def get_latest_chronicle(self, week: int) -> dict | None:
        cursor = await self._db.execute(
            "SELECT * FROM chronicles WHERE week = ? ORDER BY created_at DESC, rowid DESC LIMIT 1",
            (week,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        cols = [d[0] for d in cursor.description]
        return dict(zip(cols, row))

    async def get_recent_chronicles(self, limit: int = 12) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT * FROM chronicles ORDER BY created_at DESC, rowid DESC LIMIT ?", (limit,)
        )
        cols = [d[0] for d in cursor.description]
        rows = await cursor.fetchall()
        return [dict(zip(cols, row)) for row in rows]

    async def get_chronicle_count(self) -> int:
        cursor = await self._db.execute("SELECT COUNT(*) FROM chronicles")
        row = await cursor.fetchone()
        return row[0] if row else 0
