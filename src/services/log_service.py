"""
Log Service

Create and list health logs with a per-page summary.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Optional

from models.engagement import LogCategory, LogEvent
from storage.base import LogStore

from .errors import StoreUnavailableError

logger = logging.getLogger(__name__)


LOGS_DISCLAIMER = "Logs are used for engagement tracking only, not for medical assessment."

MAX_PAGE_SIZE = 200

# Furthest back a log listing may reach
MAX_LOOKBACK_DAYS = 3650


class LogService:
    def __init__(self, log_store: LogStore, clock: Optional[Callable[[], datetime]] = None):
        self.log_store = log_store
        self.clock = clock or datetime.now

    def create(
        self,
        user_id: str,
        log_type: str,
        logged_at: Optional[datetime] = None,
        value: Optional[float] = None,
    ) -> LogEvent:
        """
        Store a log.

        Raises:
            ValueError: for an unknown log type or a timestamp in the future
        """
        category = LogCategory.parse(log_type)
        now = self.clock()
        if logged_at is not None and logged_at > now:
            raise ValueError("logged_at cannot be in the future")

        event = self.log_store.add_log(user_id, category, logged_at=logged_at or now, value=value)
        logger.debug("Stored %s log for user %s", category.value, user_id)
        return event

    def list(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        log_type: Optional[str] = None,
        days: Optional[int] = None,
    ) -> Dict:
        """
        Page of logs, newest first.

        Raises:
            ValueError: for an unknown log type or a days value out of range
            StoreUnavailableError: if the store cannot be read
        """
        category = LogCategory.parse(log_type) if log_type else None
        if days is not None and not 1 <= days <= MAX_LOOKBACK_DAYS:
            raise ValueError(f"days must be between 1 and {MAX_LOOKBACK_DAYS}")
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)
        now = self.clock()

        try:
            logs = self.log_store.list_logs(
                user_id, limit=limit, offset=offset, category=category, days=days, now=now,
            )
            total = self.log_store.count_logs(user_id, category=category, days=days, now=now)
        except Exception as e:
            logger.exception("Failed to list logs for user %s", user_id)
            raise StoreUnavailableError("list_logs", e) from e

        by_type = Counter(log.category.value for log in logs)

        return {
            "logs": [log.to_dict() for log in logs],
            "summary": {
                "total": len(logs),
                "byType": dict(by_type),
                "daysWithLogs": len({log.timestamp.date() for log in logs}),
            },
            "pagination": {
                "limit": limit,
                "offset": offset,
                "total": total,
            },
            "disclaimer": LOGS_DISCLAIMER,
        }
