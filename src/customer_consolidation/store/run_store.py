"""SQLite-backed history of consolidation run summaries."""

import json
import sqlite3
from pathlib import Path
from typing import Optional

from customer_consolidation.models.run import RunSummary


class RunStore:
    """
    Persists one RunSummary per run for later inspection ("last run").
    The full summary is stored as JSON; counts are duplicated into columns.
    """

    def __init__(self, db_path: str | Path = "consolidation.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def _deserialize(self, row: sqlite3.Row) -> RunSummary:
        return RunSummary.model_validate(json.loads(row["data"]))

    def save(self, summary: RunSummary) -> int:
        """Record a finished run. Returns the run id."""
        data = summary.model_dump(mode="json")
        with self._connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO runs (started_at, finished_at, processed, successful, failed, data)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data["started_at"],
                    data["finished_at"],
                    summary.processed,
                    summary.successful,
                    summary.failed,
                    json.dumps(data),
                ),
            )
            conn.commit()
            return cursor.lastrowid or 0

    def last(self) -> Optional[RunSummary]:
        """Most recently recorded run, or None."""
        with self._connection() as conn:
            row = conn.execute("SELECT data FROM runs ORDER BY id DESC LIMIT 1").fetchone()
        return self._deserialize(row) if row else None

    def recent(self, limit: int = 10) -> list[RunSummary]:
        """Latest runs, newest first."""
        with self._connection() as conn:
            rows = conn.execute("SELECT data FROM runs ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        return [self._deserialize(r) for r in rows]
