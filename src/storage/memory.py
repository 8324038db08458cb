"""
In-Memory Stores

Dictionary-backed stores for tests, demos and local development.
In production, the SQLite repositories in storage.database are used.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from models.drift import DriftLevel
from models.engagement import LogCategory, LogEvent
from models.nudge import StoredNudge
from models.plan import PlanMode, PlanState


class InMemoryLogStore:
    """Simple in-memory log store."""

    def __init__(self, clock=None):
        self._logs: Dict[str, List[LogEvent]] = defaultdict(list)
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
        self._logs[user_id].append(event)
        return event

    def fetch_log_window(
        self, user_id: str, window_days: int = 14, now: Optional[datetime] = None
    ) -> List[LogEvent]:
        return self._query(user_id, days=window_days, now=now)

    def list_logs(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[LogEvent]:
        return self._query(user_id, category, days, now)[offset:offset + limit]

    def count_logs(
        self,
        user_id: str,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        return len(self._query(user_id, category, days, now))

    def clear(self, user_id: str):
        """Clear logs for a user."""
        self._logs[user_id] = []

    def _query(
        self,
        user_id: str,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[LogEvent]:
        logs = self._logs.get(user_id, [])
        if category is not None:
            logs = [log for log in logs if log.category == category]
        if days is not None:
            since = (now or self.clock()) - timedelta(days=days)
            logs = [log for log in logs if log.timestamp >= since]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)


class InMemoryDriftEventStore:
    def __init__(self, clock=None):
        self._events: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.clock = clock or datetime.now

    def record_drift_event(
        self,
        user_id: str,
        drift_type: str,
        drift_level: DriftLevel,
        engagement_score: int,
        metadata: Dict[str, Any],
    ) -> None:
        self._events[user_id].append({
            "id": str(uuid.uuid4()),
            "drift_type": drift_type,
            "drift_level": drift_level.value,
            "engagement_score": engagement_score,
            "metadata": dict(metadata),
            "detected_at": self.clock().isoformat(),
        })

    def list_drift_events(self, user_id: str) -> List[Dict[str, Any]]:
        return list(reversed(self._events.get(user_id, [])))


class InMemoryNudgeStore:
    def __init__(self, clock=None):
        self._nudges: Dict[str, List[StoredNudge]] = defaultdict(list)
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
        self._nudges[user_id].append(nudge)
        return nudge

    def list_nudges(self, user_id: str, limit: int = 10, unread_only: bool = False) -> List[StoredNudge]:
        # Insertion order breaks ties between equal timestamps
        nudges = list(reversed(self._nudges.get(user_id, [])))
        nudges.sort(key=lambda n: n.sent_at, reverse=True)
        if unread_only:
            nudges = [n for n in nudges if not n.is_read]
        return nudges[:limit]

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self._nudges.get(user_id, []) if not n.is_read)

    def mark_read(self, user_id: str, nudge_ids: Sequence[str]) -> int:
        wanted = set(nudge_ids)
        updated = 0
        for nudge in self._nudges.get(user_id, []):
            if nudge.id in wanted and not nudge.is_read:
                nudge.is_read = True
                updated += 1
        return updated


class InMemoryProfileStore:
    def __init__(self):
        self._languages: Dict[str, str] = {}

    def fetch_user_language_preference(self, user_id: str) -> Optional[str]:
        return self._languages.get(user_id)

    def set_language(self, user_id: str, language: str) -> None:
        self._languages[user_id] = language


class InMemoryPlanStateStore:
    def __init__(self):
        self._states: Dict[str, PlanState] = {}

    def load_plan_state(self, user_id: str) -> Optional[PlanState]:
        return self._states.get(user_id)

    def save_plan_state(self, user_id: str, mode: PlanMode, mode_changed_at: datetime) -> None:
        self._states[user_id] = PlanState(current_mode=mode, mode_changed_at=mode_changed_at)
