"""
Tests for building the engagement window from raw log events.
"""

from datetime import timedelta

import pytest

from conftest import FIXED_NOW
from drift.window import build_window
from models.engagement import LogCategory, LogEvent


def event(category, days_ago=0, hour=8, minute=0, value=None, event_id=None):
    ts = (FIXED_NOW - timedelta(days=days_ago)).replace(hour=hour, minute=minute)
    return LogEvent(
        id=event_id or f"{category.value}-{days_ago}-{hour}-{minute}",
        category=category,
        timestamp=ts,
        value=value,
    )


# =============================================================================
# SHAPE
# =============================================================================

class TestWindowShape:

    def test_one_entry_per_day_most_recent_first(self):
        window = build_window([], now=FIXED_NOW)

        assert len(window) == 14
        assert window[0].date == FIXED_NOW.date()
        assert window[13].date == FIXED_NOW.date() - timedelta(days=13)

    def test_custom_horizon(self):
        assert len(build_window([], now=FIXED_NOW, days=7)) == 7

    def test_fixed_expectations(self):
        day = build_window([], now=FIXED_NOW)[0]

        assert day.expected_logs == 6
        assert day.total_tasks == 5
        assert day.logs_count == 0
        assert day.timing_consistency == 0.0

    def test_events_outside_horizon_are_ignored(self):
        window = build_window([event(LogCategory.GLUCOSE, days_ago=20)], now=FIXED_NOW)

        assert sum(d.logs_count for d in window) == 0


# =============================================================================
# AGGREGATES
# =============================================================================

class TestDailyAggregates:

    def test_counts_and_completed_tasks(self):
        events = [
            event(LogCategory.GLUCOSE, hour=7),
            event(LogCategory.GLUCOSE, hour=12),
            event(LogCategory.MEAL, hour=8),
            event(LogCategory.BP, hour=9),
        ]

        today = build_window(events, now=FIXED_NOW)[0]

        assert today.logs_count == 4
        assert today.glucose_checks == 2
        assert today.meal_logs_count == 1
        # bp is not a tracked task category
        assert today.completed_tasks == 2

    def test_activity_minutes_default_when_missing(self):
        events = [
            event(LogCategory.ACTIVITY, hour=7),
            event(LogCategory.ACTIVITY, hour=18, value=30),
        ]

        today = build_window(events, now=FIXED_NOW)[0]

        assert today.activity_minutes == 45.0

    def test_events_land_on_their_own_day(self):
        events = [event(LogCategory.WEIGHT, days_ago=3)]

        window = build_window(events, now=FIXED_NOW)

        assert window[3].logs_count == 1
        assert window[3].completed_tasks == 1
        assert window[0].logs_count == 0


# =============================================================================
# TIMING CONSISTENCY
# =============================================================================

class TestTimingConsistency:

    def test_same_hour_every_day_is_fully_consistent(self):
        events = [event(LogCategory.GLUCOSE, days_ago=d, hour=8) for d in range(14)]

        window = build_window(events, now=FIXED_NOW)

        assert all(day.timing_consistency == pytest.approx(1.0) for day in window)

    def test_deviation_from_usual_hour(self):
        # Usual glucose hour is 11:00; each day is 3 hours off
        events = [
            event(LogCategory.GLUCOSE, days_ago=0, hour=8),
            event(LogCategory.GLUCOSE, days_ago=1, hour=14),
        ]

        window = build_window(events, now=FIXED_NOW)

        assert window[0].timing_consistency == pytest.approx(0.5)
        assert window[1].timing_consistency == pytest.approx(0.5)
        assert window[2].timing_consistency == 0.0

    def test_large_deviation_floors_at_zero(self):
        events = [
            event(LogCategory.MEAL, days_ago=0, hour=1),
            event(LogCategory.MEAL, days_ago=1, hour=19),
        ]

        window = build_window(events, now=FIXED_NOW)

        assert window[0].timing_consistency == 0.0
        assert window[0].is_well_formed()
