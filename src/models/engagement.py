"""
Engagement Data Models

Raw health-logging events and the per-day engagement aggregates
that the drift engine scores. Aggregates are derived on every
analysis request and never persisted.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class LogCategory(Enum):
    """Kinds of self-reported health logs."""
    GLUCOSE = "glucose"
    MEAL = "meal"
    ACTIVITY = "activity"
    MEDICATION = "medication"
    WEIGHT = "weight"
    BP = "bp"

    @classmethod
    def parse(cls, raw: str) -> "LogCategory":
        """Parse a category name, accepting 'diet' as an alias of meal."""
        key = (raw or "").strip().lower()
        if key == "diet":
            return cls.MEAL
        return cls(key)


@dataclass(frozen=True)
class LogEvent:
    """
    A single logged health event.
    Immutable once created; owned by the log store.
    """
    id: str
    category: LogCategory
    timestamp: datetime
    value: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "log_type": self.category.value,
            "logged_at": self.timestamp.isoformat(),
            "value": self.value,
        }


@dataclass
class DailyEngagement:
    """
    One day of the engagement window.

    Windows are ordered most-recent-first; index 0 is today.
    """
    date: date
    logs_count: int
    expected_logs: int
    timing_consistency: float  # 0-1
    completed_tasks: int
    total_tasks: int
    activity_minutes: float = 0.0
    meal_logs_count: int = 0
    glucose_checks: int = 0

    @property
    def frequency_ratio(self) -> float:
        """Share of expected logs recorded on this day."""
        return self.logs_count / self.expected_logs

    @property
    def completion_ratio(self) -> float:
        """Share of daily tasks completed."""
        return self.completed_tasks / self.total_tasks

    def is_well_formed(self) -> bool:
        """Check counts and ratios are usable for scoring."""
        if self.expected_logs <= 0 or self.total_tasks <= 0:
            return False
        if min(self.logs_count, self.completed_tasks, self.meal_logs_count, self.glucose_checks) < 0:
            return False
        if self.activity_minutes < 0:
            return False
        return 0.0 <= self.timing_consistency <= 1.0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "logsCount": self.logs_count,
            "expectedLogs": self.expected_logs,
            "timingConsistency": round(self.timing_consistency, 3),
            "completedTasks": self.completed_tasks,
            "totalTasks": self.total_tasks,
            "activityMinutes": self.activity_minutes,
            "mealLogsCount": self.meal_logs_count,
            "glucoseChecks": self.glucose_checks,
        }
