"""
SQLite Repositories

File-based persistence for logs, drift events, nudges, profiles and
plan state. Each repository takes the database path; connections are
opened per operation, so repositories hold no connection state.

USAGE:
    init_database(settings.db_path)
    logs = SQLiteLogStore(settings.db_path)
"""

import json
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from models.drift import DriftLevel
from models.engagement import LogCategory, LogEvent
from models.nudge import StoredNudge
from models.plan import PlanMode, PlanState

logger = logging.getLogger(__name__)


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS activity_logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_type TEXT NOT NULL,
        value REAL,
        logged_at TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_activity_logs_user_time
        ON activity_logs (user_id, logged_at)
    """,
    """
    CREATE TABLE IF NOT EXISTS drift_events (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        drift_type TEXT NOT NULL,
        drift_level TEXT NOT NULL,
        engagement_score INTEGER NOT NULL,
        metadata TEXT,
        detected_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS nudges (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        message TEXT NOT NULL,
        nudge_type TEXT NOT NULL,
        tone TEXT NOT NULL,
        language TEXT NOT NULL DEFAULT 'en',
        is_read INTEGER NOT NULL DEFAULT 0,
        sent_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        user_id TEXT PRIMARY KEY,
        preferred_language TEXT NOT NULL DEFAULT 'en',
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS plan_states (
        user_id TEXT PRIMARY KEY,
        current_mode TEXT NOT NULL,
        mode_changed_at TEXT NOT NULL
    )
    """,
)


def init_database(db_path: str):
    """Create the database file and tables if missing."""
    directory = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(directory, exist_ok=True)

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        for statement in SCHEMA:
            cursor.execute(statement)
        conn.commit()

    logger.info("Database ready at %s", db_path)


@contextmanager
def get_connection(db_path: str):
    """Get database connection with context manager."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


class SQLiteLogStore:
    """Repository for activity log operations."""

    def __init__(self, db_path: str, clock=None):
        self.db_path = db_path
        self.clock = clock or datetime.now

    def add_log(
        self,
        user_id: str,
        category: LogCategory,
        logged_at: Optional[datetime] = None,
        value: Optional[float] = None,
    ) -> LogEvent:
        event = LogEvent(
            id=str(uuid.uuid4()),
            category=category,
            timestamp=logged_at or self.clock(),
            value=value,
        )
        with get_connection(self.db_path) as conn:
            conn.execute(
                "INSERT INTO activity_logs (id, user_id, log_type, value, logged_at) VALUES (?, ?, ?, ?, ?)",
                (event.id, user_id, event.category.value, event.value, event.timestamp.isoformat()),
            )
            conn.commit()
        return event

    def fetch_log_window(
        self, user_id: str, window_days: int = 14, now: Optional[datetime] = None
    ) -> List[LogEvent]:
        return self.list_logs(user_id, limit=-1, days=window_days, now=now)

    def list_logs(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[LogEvent]:
        where, values = self._filters(user_id, category, days, now)
        # LIMIT -1 means no limit in SQLite
        with get_connection(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT * FROM activity_logs WHERE {where} "
                "ORDER BY logged_at DESC LIMIT ? OFFSET ?",
                (*values, limit, offset),
            )
            return [self._to_event(row) for row in cursor.fetchall()]

    def count_logs(
        self,
        user_id: str,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        where, values = self._filters(user_id, category, days, now)
        with get_connection(self.db_path) as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM activity_logs WHERE {where}", values).fetchone()
            return row[0]

    def _filters(self, user_id, category, days, now):
        clauses = ["user_id = ?"]
        values: List[Any] = [user_id]
        if category is not None:
            clauses.append("log_type = ?")
            values.append(category.value)
        if days is not None:
            since = (now or self.clock()) - timedelta(days=days)
            clauses.append("logged_at >= ?")
            values.append(since.isoformat())
        return " AND ".join(clauses), values

    @staticmethod
    def _to_event(row: sqlite3.Row) -> LogEvent:
        return LogEvent(
            id=row["id"],
            category=LogCategory(row["log_type"]),
            timestamp=datetime.fromisoformat(row["logged_at"]),
            value=row["value"],
        )


class SQLiteDriftEventStore:
    """Repository for drift event records."""

    def __init__(self, db_path: str, clock=None):
        self.db_path = db_path
        self.clock = clock or datetime.now

    def record_drift_event(
        self,
        user_id: str,
        drift_type: str,
        drift_level: DriftLevel,
        engagement_score: int,
        metadata: Dict[str, Any],
    ) -> None:
        with get_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO drift_events
                (id, user_id, drift_type, drift_level, engagement_score, metadata, detected_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid.uuid4()),
                    user_id,
                    drift_type,
                    drift_level.value,
                    engagement_score,
                    json.dumps(metadata),
                    self.clock().isoformat(),
                ),
            )
            conn.commit()

    def list_drift_events(self, user_id: str) -> List[Dict[str, Any]]:
        with get_connection(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT * FROM drift_events WHERE user_id = ? ORDER BY detected_at DESC, rowid DESC",
                (user_id,),
            )
            events = []
            for row in cursor.fetchall():
                event = dict(row)
                event["metadata"] = json.loads(event["metadata"] or "{}")
                events.append(event)
            return events


class SQLiteNudgeStore:
    """Repository for sent nudges."""

    def __init__(self, db_path: str, clock=None):
        self.db_path = db_path
        self.clock = clock or datetime.now

    def record_nudge(
        self, user_id: str, message: str, nudge_type: str, tone: str, language: str
    ) -> StoredNudge:
        nudge = StoredNudge(
            id=str(uuid.uuid4()),
            user_id=user_id,
            message=message,
            nudge_type=nudge_type,
            tone=tone,
            language=language,
            is_read=False,
            sent_at=self.clock(),
        )
        with get_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO nudges (id, user_id, message, nudge_type, tone, language, is_read, sent_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (nudge.id, user_id, message, nudge_type, tone, language, nudge.sent_at.isoformat()),
            )
            conn.commit()
        return nudge

    def list_nudges(self, user_id: str, limit: int = 10, unread_only: bool = False) -> List[StoredNudge]:
        query = "SELECT * FROM nudges WHERE user_id = ?"
        if unread_only:
            query += " AND is_read = 0"
        query += " ORDER BY sent_at DESC, rowid DESC LIMIT ?"

        with get_connection(self.db_path) as conn:
            cursor = conn.execute(query, (user_id, limit))
            return [
                StoredNudge(
                    id=row["id"],
                    user_id=row["user_id"],
                    message=row["message"],
                    nudge_type=row["nudge_type"],
                    tone=row["tone"],
                    language=row["language"],
                    is_read=bool(row["is_read"]),
                    sent_at=datetime.fromisoformat(row["sent_at"]),
                )
                for row in cursor.fetchall()
            ]

    def unread_count(self, user_id: str) -> int:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM nudges WHERE user_id = ? AND is_read = 0", (user_id,)
            ).fetchone()
            return row[0]

    def mark_read(self, user_id: str, nudge_ids: Sequence[str]) -> int:
        if not nudge_ids:
            return 0
        placeholders = ", ".join("?" for _ in nudge_ids)
        with get_connection(self.db_path) as conn:
            cursor = conn.execute(
                f"UPDATE nudges SET is_read = 1 WHERE user_id = ? AND is_read = 0 AND id IN ({placeholders})",
                (user_id, *nudge_ids),
            )
            conn.commit()
            return cursor.rowcount


class SQLiteProfileStore:
    """Repository for user preferences."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def fetch_user_language_preference(self, user_id: str) -> Optional[str]:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT preferred_language FROM profiles WHERE user_id = ?", (user_id,)
            ).fetchone()
            return row["preferred_language"] if row else None

    def set_language(self, user_id: str, language: str) -> None:
        with get_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO profiles (user_id, preferred_language, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    preferred_language = excluded.preferred_language,
                    updated_at = excluded.updated_at
                """,
                (user_id, language, datetime.now().isoformat()),
            )
            conn.commit()


class SQLitePlanStateStore:
    """Repository for the last evaluated plan mode."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def load_plan_state(self, user_id: str) -> Optional[PlanState]:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT current_mode, mode_changed_at FROM plan_states WHERE user_id = ?", (user_id,)
            ).fetchone()
            if row is None:
                return None
            return PlanState(
                current_mode=PlanMode(row["current_mode"]),
                mode_changed_at=datetime.fromisoformat(row["mode_changed_at"]),
            )

    def save_plan_state(self, user_id: str, mode: PlanMode, mode_changed_at: datetime) -> None:
        with get_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO plan_states (user_id, current_mode, mode_changed_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    current_mode = excluded.current_mode,
                    mode_changed_at = excluded.mode_changed_at
                """,
                (user_id, mode.value, mode_changed_at.isoformat()),
            )
            conn.commit()
