"""
Store Contracts

Structural interfaces for the external stores used by the services.
Both the in-memory and SQLite implementations satisfy them.

Reads may raise; callers decide whether a failure is fatal.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence

from models.drift import DriftLevel
from models.engagement import LogCategory, LogEvent
from models.nudge import StoredNudge
from models.plan import PlanMode, PlanState


class LogStore(Protocol):
    """Health log events, per user."""

    def fetch_log_window(
        self, user_id: str, window_days: int = 14, now: Optional[datetime] = None
    ) -> List[LogEvent]:
        """Events in the last window_days, newest first. May be empty."""
        ...

    def add_log(
        self,
        user_id: str,
        category: LogCategory,
        logged_at: Optional[datetime] = None,
        value: Optional[float] = None,
    ) -> LogEvent:
        ...

    def list_logs(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[LogEvent]:
        ...

    def count_logs(
        self,
        user_id: str,
        category: Optional[LogCategory] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        ...


class DriftEventStore(Protocol):
    """Append-only record of detected drift."""

    def record_drift_event(
        self,
        user_id: str,
        drift_type: str,
        drift_level: DriftLevel,
        engagement_score: int,
        metadata: Dict[str, Any],
    ) -> None:
        ...

    def list_drift_events(self, user_id: str) -> List[Dict[str, Any]]:
        ...


class NudgeStore(Protocol):
    """Sent nudges with read/unread state."""

    def record_nudge(
        self, user_id: str, message: str, nudge_type: str, tone: str, language: str
    ) -> StoredNudge:
        ...

    def list_nudges(self, user_id: str, limit: int = 10, unread_only: bool = False) -> List[StoredNudge]:
        """Newest first."""
        ...

    def unread_count(self, user_id: str) -> int:
        ...

    def mark_read(self, user_id: str, nudge_ids: Sequence[str]) -> int:
        """Mark the user's nudges as read. Returns the number updated."""
        ...


class ProfileStore(Protocol):
    """User preferences."""

    def fetch_user_language_preference(self, user_id: str) -> Optional[str]:
        ...

    def set_language(self, user_id: str, language: str) -> None:
        ...


class PlanStateStore(Protocol):
    """Last evaluated plan mode, per user."""

    def load_plan_state(self, user_id: str) -> Optional[PlanState]:
        ...

    def save_plan_state(self, user_id: str, mode: PlanMode, mode_changed_at: datetime) -> None:
        ...
