"""
Tests for the JSONL monitoring service and logging setup.
"""

import json
import logging
import os

from monitoring import MonitoringService, setup_logging


def test_events_are_written_as_json_lines(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path))

    monitoring.log_drift_detected("user-001", "moderate", "irregular_timing", 44)
    monitoring.log_plan_mode_changed("user-001", "full", "reduced")

    with open(tmp_path / "monitoring.jsonl", encoding="utf-8") as f:
        lines = [json.loads(line) for line in f]

    assert [e["event_type"] for e in lines] == ["drift_detected", "plan_mode_changed"]
    assert lines[0]["metadata"] == {
        "user_id": "user-001",
        "drift_level": "moderate",
        "drift_type": "irregular_timing",
        "engagement_score": 44,
    }


def test_filter_by_event_type(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path))
    monitoring.log_store_failure("record_nudge", "disk full", user_id="user-001")
    monitoring.log_api_error("/api/plan", "boom", 500)

    errors = monitoring.get_recent_events(event_type=MonitoringService.EVENT_API_ERROR)

    assert len(errors) == 1
    assert errors[0]["metadata"] == {"endpoint": "/api/plan", "status_code": 500}


def test_store_failure_severity(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path))

    monitoring.log_store_failure("fetch_log_window", "locked", fatal=True)
    monitoring.log_store_failure("record_nudge", "disk full")

    read, write = monitoring.get_recent_events()
    assert (read["event_type"], read["severity"]) == ("store_read_failure", "error")
    assert (write["event_type"], write["severity"]) == ("store_write_failure", "warning")


def test_error_count_only_counts_errors(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path))
    monitoring.log_store_failure("fetch_log_window", "locked", fatal=True)
    monitoring.log_store_failure("record_nudge", "disk full")
    monitoring.log_api_error("/api/drift/analyze", "locked", 500)

    assert monitoring.get_error_count() == {"store_read_failure": 1, "api_error": 1}


def test_recent_events_skips_corrupt_lines(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path))
    monitoring.log_event("custom", "info", "first")
    with open(monitoring.log_path, "a", encoding="utf-8") as f:
        f.write("{not json\n")
    monitoring.log_event("custom", "info", "second")

    assert [e["message"] for e in monitoring.get_recent_events()] == ["first", "second"]


def test_missing_log_file_has_no_events(tmp_path):
    assert MonitoringService(log_dir=str(tmp_path)).get_recent_events() == []


def test_rotation(tmp_path):
    monitoring = MonitoringService(log_dir=str(tmp_path), max_file_size_mb=0.0001)

    for n in range(10):
        monitoring.log_event("custom", "info", f"event {n}", {"padding": "x" * 50})

    rotated = [name for name in os.listdir(tmp_path) if name.startswith("monitoring.jsonl.")]
    assert rotated
    assert os.path.getsize(monitoring.log_path) <= 1024


def test_setup_logging_sets_level():
    root = logging.getLogger()
    original = root.level
    try:
        setup_logging("ERROR")

        assert root.level == logging.ERROR
        assert logging.getLogger("uvicorn.access").level == logging.ERROR
    finally:
        root.setLevel(original)


def test_unknown_level_falls_back_to_info():
    root = logging.getLogger()
    original = root.level
    try:
        setup_logging("LOUD")

        assert root.level == logging.INFO
    finally:
        root.setLevel(original)
