"""
Engagement Window Builder

Aggregates raw log events into one DailyEngagement per calendar day,
most recent first. The window is recomputed for every analysis.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from models.engagement import DailyEngagement, LogCategory, LogEvent


# Logs expected per day in a full care routine
EXPECTED_DAILY_LOGS = 6

# A day's task for a category is complete when it is logged at least once
TRACKED_TASK_CATEGORIES = (
    LogCategory.GLUCOSE,
    LogCategory.MEAL,
    LogCategory.ACTIVITY,
    LogCategory.MEDICATION,
    LogCategory.WEIGHT,
)

# Minutes credited to an activity log that carries no duration
DEFAULT_ACTIVITY_MINUTES = 15.0

# Hours of deviation from the usual logging hour that drop consistency to 0
TIMING_TOLERANCE_HOURS = 6.0


def build_window(
    events: Iterable[LogEvent],
    now: Optional[datetime] = None,
    days: int = 14,
) -> List[DailyEngagement]:
    """
    Build the engagement window from raw events.

    Args:
        events: Log events in any order; events outside the horizon are ignored
        now: Reference time (defaults to datetime.now())
        days: Horizon length

    Returns:
        `days` entries, index 0 = the day containing `now`
    """
    now = now or datetime.now()
    today = now.date()
    first_day = today - timedelta(days=days - 1)

    by_day: Dict[date, List[LogEvent]] = defaultdict(list)
    for event in events:
        day = event.timestamp.date()
        if first_day <= day <= today:
            by_day[day].append(event)

    usual_hours = _usual_hours(e for day_events in by_day.values() for e in day_events)

    window = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        day_events = by_day.get(day, [])
        counts = _category_counts(day_events)

        completed = sum(1 for c in TRACKED_TASK_CATEGORIES if counts.get(c, 0) > 0)
        activity_minutes = sum(
            e.value if e.value is not None else DEFAULT_ACTIVITY_MINUTES
            for e in day_events
            if e.category == LogCategory.ACTIVITY
        )

        window.append(DailyEngagement(
            date=day,
            logs_count=len(day_events),
            expected_logs=EXPECTED_DAILY_LOGS,
            timing_consistency=_timing_consistency(day_events, usual_hours),
            completed_tasks=completed,
            total_tasks=len(TRACKED_TASK_CATEGORIES),
            activity_minutes=float(activity_minutes),
            meal_logs_count=counts.get(LogCategory.MEAL, 0),
            glucose_checks=counts.get(LogCategory.GLUCOSE, 0),
        ))

    return window


def _category_counts(events: List[LogEvent]) -> Dict[LogCategory, int]:
    counts: Dict[LogCategory, int] = defaultdict(int)
    for event in events:
        counts[event.category] += 1
    return counts


def _hour_of(event: LogEvent) -> float:
    ts = event.timestamp
    return ts.hour + ts.minute / 60.0


def _usual_hours(events: Iterable[LogEvent]) -> Dict[LogCategory, float]:
    """Mean logging hour per category over the whole horizon."""
    totals: Dict[LogCategory, List[float]] = defaultdict(list)
    for event in events:
        totals[event.category].append(_hour_of(event))
    return {cat: sum(hours) / len(hours) for cat, hours in totals.items()}


def _timing_consistency(events: List[LogEvent], usual_hours: Dict[LogCategory, float]) -> float:
    """1.0 when every log lands on its category's usual hour; 0 for empty days."""
    if not events:
        return 0.0
    deviation = sum(abs(_hour_of(e) - usual_hours[e.category]) for e in events) / len(events)
    return max(0.0, 1.0 - deviation / TIMING_TOLERANCE_HOURS)
