"""
Tests for the SQLite repositories.
"""

import sqlite3
from datetime import timedelta

import pytest

from conftest import FIXED_NOW, add_daily_logs
from models.drift import DriftLevel
from models.engagement import LogCategory
from models.plan import PlanMode, PlanState
from storage.database import (
    SQLiteDriftEventStore,
    SQLiteLogStore,
    SQLiteNudgeStore,
    SQLitePlanStateStore,
    SQLiteProfileStore,
    get_connection,
    init_database,
)


USER = "user-001"


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "data" / "engagement.db")
    init_database(path)
    return path


def test_init_creates_tables(db_path):
    with get_connection(db_path) as conn:
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }

    assert {"activity_logs", "drift_events", "nudges", "profiles", "plan_states"} <= tables


def test_init_is_repeatable(db_path):
    init_database(db_path)


# =============================================================================
# LOGS
# =============================================================================

class TestLogStore:

    @pytest.fixture
    def store(self, db_path, clock):
        return SQLiteLogStore(db_path, clock=clock)

    def test_round_trip(self, store):
        created = store.add_log(USER, LogCategory.GLUCOSE, logged_at=FIXED_NOW - timedelta(hours=2), value=118.5)

        [fetched] = store.fetch_log_window(USER, now=FIXED_NOW)

        assert fetched == created

    def test_window_excludes_old_and_other_users(self, store):
        store.add_log(USER, LogCategory.MEAL, logged_at=FIXED_NOW - timedelta(days=1))
        store.add_log(USER, LogCategory.MEAL, logged_at=FIXED_NOW - timedelta(days=20))
        store.add_log("someone-else", LogCategory.MEAL, logged_at=FIXED_NOW)

        assert len(store.fetch_log_window(USER, window_days=14, now=FIXED_NOW)) == 1

    def test_window_has_no_page_limit(self, store):
        add_daily_logs(store, USER, range(14), (6, 8, 10, 12, 14), (LogCategory.GLUCOSE,) * 5)

        assert len(store.fetch_log_window(USER, now=FIXED_NOW)) == 70

    def test_list_is_newest_first_with_paging(self, store):
        add_daily_logs(store, USER, range(3), (8, 12), (LogCategory.GLUCOSE, LogCategory.MEAL))

        page = store.list_logs(USER, limit=2, offset=1)

        assert [log.timestamp for log in page] == [
            FIXED_NOW.replace(hour=8),
            (FIXED_NOW - timedelta(days=1)).replace(hour=12),
        ]

    def test_count_with_filters(self, store):
        add_daily_logs(store, USER, range(10), (8, 12), (LogCategory.GLUCOSE, LogCategory.MEAL))

        assert store.count_logs(USER) == 20
        assert store.count_logs(USER, category=LogCategory.MEAL) == 10
        assert store.count_logs(USER, days=3, now=FIXED_NOW) == 6


# =============================================================================
# DRIFT EVENTS AND NUDGES
# =============================================================================

def test_drift_events(db_path, clock):
    store = SQLiteDriftEventStore(db_path, clock=clock)

    store.record_drift_event(USER, "frequency_drop", DriftLevel.MODERATE, 42, {"logsCount": 9})
    store.record_drift_event(USER, "irregular_timing", DriftLevel.MILD, 61, {})

    events = store.list_drift_events(USER)
    assert [e["drift_type"] for e in events] == ["irregular_timing", "frequency_drop"]
    assert events[1]["drift_level"] == "moderate"
    assert events[1]["metadata"] == {"logsCount": 9}
    assert events[1]["detected_at"] == FIXED_NOW.isoformat()


class TestNudgeStore:

    @pytest.fixture
    def store(self, db_path):
        times = iter(FIXED_NOW + timedelta(minutes=m) for m in range(10))
        return SQLiteNudgeStore(db_path, clock=lambda: next(times))

    def test_newest_first(self, store):
        store.record_nudge(USER, "first", "encouragement", "warm", "en")
        store.record_nudge(USER, "second", "supportive", "understanding", "es")

        nudges = store.list_nudges(USER)

        assert [n.message for n in nudges] == ["second", "first"]
        assert nudges[0].language == "es"
        assert nudges[0].is_read is False

    def test_mark_read_counts_only_changed_rows(self, store):
        first = store.record_nudge(USER, "first", "encouragement", "warm", "en")
        second = store.record_nudge(USER, "second", "encouragement", "warm", "en")

        assert store.mark_read(USER, [first.id]) == 1
        assert store.mark_read(USER, [first.id, second.id, "missing"]) == 1
        assert store.unread_count(USER) == 0

    def test_mark_read_is_scoped_to_user(self, store):
        other = store.record_nudge("someone-else", "hi", "encouragement", "warm", "en")

        assert store.mark_read(USER, [other.id]) == 0
        assert store.unread_count("someone-else") == 1

    def test_mark_read_with_no_ids(self, store):
        assert store.mark_read(USER, []) == 0

    def test_unread_only(self, store):
        first = store.record_nudge(USER, "first", "encouragement", "warm", "en")
        store.record_nudge(USER, "second", "encouragement", "warm", "en")
        store.mark_read(USER, [first.id])

        assert [n.message for n in store.list_nudges(USER, unread_only=True)] == ["second"]


# =============================================================================
# PROFILES AND PLAN STATE
# =============================================================================

def test_language_preference_upsert(db_path):
    store = SQLiteProfileStore(db_path)

    assert store.fetch_user_language_preference(USER) is None
    store.set_language(USER, "hi")
    store.set_language(USER, "es")

    assert store.fetch_user_language_preference(USER) == "es"


def test_plan_state_upsert(db_path):
    store = SQLitePlanStateStore(db_path)

    assert store.load_plan_state(USER) is None
    store.save_plan_state(USER, PlanMode.REDUCED, FIXED_NOW)
    store.save_plan_state(USER, PlanMode.MINIMAL, FIXED_NOW + timedelta(days=1))

    assert store.load_plan_state(USER) == PlanState(PlanMode.MINIMAL, FIXED_NOW + timedelta(days=1))


def test_store_errors_propagate(tmp_path):
    store = SQLiteLogStore(str(tmp_path / "not-initialized.db"))

    with pytest.raises(sqlite3.OperationalError):
        store.fetch_log_window(USER, now=FIXED_NOW)
