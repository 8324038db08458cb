"""
Monitoring Service

Lightweight operational monitoring for drift analysis.
Logs events to a JSON-lines file for debugging and quality tracking.

IMPORTANT: Events carry user ids and drift metadata only. Never put
raw health values in monitoring metadata.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Literal, Optional

logger = logging.getLogger(__name__)


@dataclass
class MonitoringEvent:
    """Event for monitoring and alerting."""
    event_type: str
    severity: Literal["info", "warning", "error", "critical"]
    message: str
    metadata: Dict[str, Any]
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "severity": self.severity,
            "message": self.message,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }


class MonitoringService:
    """
    File-based monitoring.

    Features:
    - JSON line logging (JSONL) for easy parsing
    - No external dependencies
    - Size-based log rotation
    """

    # Event types
    EVENT_DRIFT_DETECTED = "drift_detected"
    EVENT_PLAN_MODE_CHANGED = "plan_mode_changed"
    EVENT_STORE_READ_FAILURE = "store_read_failure"
    EVENT_STORE_WRITE_FAILURE = "store_write_failure"
    EVENT_API_ERROR = "api_error"

    def __init__(
        self,
        log_dir: str = "logs",
        log_file: str = "monitoring.jsonl",
        max_file_size_mb: float = 10.0,
    ):
        """
        Args:
            log_dir: Directory for log files
            log_file: Name of the log file
            max_file_size_mb: Max file size before rotation
        """
        self.log_dir = log_dir
        self.log_file = log_file
        self.log_path = os.path.join(log_dir, log_file)
        self.max_file_size = max_file_size_mb * 1024 * 1024

        os.makedirs(log_dir, exist_ok=True)

    def log_event(
        self,
        event_type: str,
        severity: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a monitoring event.

        Args:
            event_type: Type of event
            severity: info, warning, error, or critical
            message: Human-readable message
            metadata: Additional structured data
        """
        event = MonitoringEvent(
            event_type=event_type,
            severity=severity,
            message=message,
            metadata=metadata or {},
            timestamp=datetime.now().isoformat(),
        )
        self._emit(event)

    def log_drift_detected(
        self,
        user_id: str,
        drift_level: str,
        drift_type: Optional[str],
        engagement_score: int,
    ):
        self.log_event(
            event_type=self.EVENT_DRIFT_DETECTED,
            severity="info",
            message=f"Drift detected: {drift_level}",
            metadata={
                "user_id": user_id,
                "drift_level": drift_level,
                "drift_type": drift_type,
                "engagement_score": engagement_score,
            },
        )

    def log_plan_mode_changed(self, user_id: str, previous_mode: str, new_mode: str):
        self.log_event(
            event_type=self.EVENT_PLAN_MODE_CHANGED,
            severity="info",
            message=f"Plan mode changed: {previous_mode} -> {new_mode}",
            metadata={
                "user_id": user_id,
                "previous_mode": previous_mode,
                "new_mode": new_mode,
            },
        )

    def log_store_failure(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        fatal: bool = False,
    ):
        """Log a failed store call. Read failures are fatal to the request."""
        self.log_event(
            event_type=self.EVENT_STORE_READ_FAILURE if fatal else self.EVENT_STORE_WRITE_FAILURE,
            severity="error" if fatal else "warning",
            message=f"Store operation {operation} failed: {error_message}",
            metadata={
                "operation": operation,
                "user_id": user_id,
            },
        )

    def log_api_error(
        self,
        endpoint: str,
        error_message: str,
        status_code: Optional[int] = None,
    ):
        self.log_event(
            event_type=self.EVENT_API_ERROR,
            severity="error",
            message=f"API error on {endpoint}: {error_message}",
            metadata={
                "endpoint": endpoint,
                "status_code": status_code,
            },
        )

    def _emit(self, event: MonitoringEvent):
        """Append event to the log file."""
        try:
            self._rotate_if_needed()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(event.to_dict(), default=str) + "\n")
        except OSError:
            # Monitoring must never break a request
            logger.exception("Monitoring write failed: %s", json.dumps(event.to_dict(), default=str))

    def _rotate_if_needed(self):
        """Rotate log file if it exceeds max size."""
        if not os.path.exists(self.log_path):
            return

        if os.path.getsize(self.log_path) > self.max_file_size:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            rotated_path = os.path.join(self.log_dir, f"{self.log_file}.{timestamp}")
            os.rename(self.log_path, rotated_path)
            logger.info("Rotated monitoring log to %s", rotated_path)

    def get_recent_events(
        self,
        count: int = 100,
        event_type: Optional[str] = None,
    ) -> List[dict]:
        """
        Get recent monitoring events, oldest first.

        Args:
            count: Number of events to retrieve
            event_type: Filter by event type
        """
        if not os.path.exists(self.log_path):
            return []

        events = []
        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if event_type is None or event.get("event_type") == event_type:
                    events.append(event)

        return events[-count:]

    def get_error_count(self, hours: int = 24) -> Dict[str, int]:
        """Count error and critical events in the last N hours, by type."""
        cutoff = datetime.now() - timedelta(hours=hours)
        counts: Dict[str, int] = {}

        for event in self.get_recent_events(count=1000):
            try:
                event_time = datetime.fromisoformat(event["timestamp"])
            except (ValueError, KeyError):
                continue
            if event_time >= cutoff and event.get("severity") in ("error", "critical"):
                event_type = event.get("event_type", "unknown")
                counts[event_type] = counts.get(event_type, 0) + 1

        return counts
