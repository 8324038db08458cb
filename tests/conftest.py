"""
Shared fixtures for the drift, nudge and plan tests.
"""

from datetime import date, datetime, timedelta

import pytest

from models.engagement import DailyEngagement, LogCategory


FIXED_NOW = datetime(2026, 10, 18, 20, 0, 0)


def make_day(
    offset: int = 0,
    logs_count: int = 6,
    expected_logs: int = 6,
    timing_consistency: float = 1.0,
    completed_tasks: int = 5,
    total_tasks: int = 5,
    activity_minutes: float = 30.0,
    meal_logs_count: int = 3,
    glucose_checks: int = 4,
) -> DailyEngagement:
    """One window entry; offset 0 is the most recent day."""
    return DailyEngagement(
        date=FIXED_NOW.date() - timedelta(days=offset),
        logs_count=logs_count,
        expected_logs=expected_logs,
        timing_consistency=timing_consistency,
        completed_tasks=completed_tasks,
        total_tasks=total_tasks,
        activity_minutes=activity_minutes,
        meal_logs_count=meal_logs_count,
        glucose_checks=glucose_checks,
    )


def add_daily_logs(store, user_id, days, hours, categories, now=FIXED_NOW):
    """Add one log per (hour, category) pair on each day offset in `days`."""
    for d in days:
        day = now - timedelta(days=d)
        for hour, category in zip(hours, categories):
            store.add_log(user_id, category, logged_at=day.replace(hour=hour, minute=0))


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def engaged_window():
    """14 fully engaged days."""
    return [make_day(d) for d in range(14)]


@pytest.fixture
def drifting_window():
    """Recent week at 1 of 6 logs, previous week near full."""
    recent = [
        make_day(d, logs_count=1, timing_consistency=0.2, completed_tasks=1)
        for d in range(7)
    ]
    older = [make_day(d, logs_count=5) for d in range(7, 14)]
    return recent + older


STEADY_HOURS = (8, 10, 12, 14)
STEADY_CATEGORIES = (LogCategory.GLUCOSE, LogCategory.MEAL, LogCategory.ACTIVITY, LogCategory.BP)
