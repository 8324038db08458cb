"""
Store Call Policies

Shared wrappers that apply the failure policy for each kind of store
call:
- the log window read is fatal (StoreUnavailableError)
- the language lookup falls back to the default language
- writes are logged, reported to monitoring and swallowed
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

from models.engagement import LogEvent
from monitoring.monitoring_service import MonitoringService
from nudges.templates import DEFAULT_LANGUAGE
from storage.base import LogStore, ProfileStore

from .errors import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load_log_window(
    log_store: LogStore,
    user_id: str,
    window_days: int,
    now: datetime,
    monitoring: Optional[MonitoringService] = None,
) -> List[LogEvent]:
    """Fetch the analysis window or raise StoreUnavailableError."""
    try:
        return log_store.fetch_log_window(user_id, window_days=window_days, now=now)
    except Exception as e:
        logger.exception("Failed to fetch activity logs for user %s", user_id)
        if monitoring:
            monitoring.log_store_failure("fetch_log_window", str(e), user_id=user_id, fatal=True)
        raise StoreUnavailableError("fetch_log_window", e) from e


def resolve_language(
    profile_store: Optional[ProfileStore],
    user_id: str,
    default: str = DEFAULT_LANGUAGE,
) -> str:
    """User's preferred language, or the default if missing or unreadable."""
    if profile_store is None:
        return default
    try:
        language = profile_store.fetch_user_language_preference(user_id)
    except Exception:
        logger.warning("Language lookup failed for user %s, using %s", user_id, default, exc_info=True)
        return default
    return language or default


def best_effort_write(
    operation: str,
    write: Callable[[], T],
    user_id: str,
    monitoring: Optional[MonitoringService] = None,
) -> Optional[T]:
    """Run a store write; on failure log it and return None."""
    try:
        return write()
    except Exception as e:
        logger.exception("Store write %s failed for user %s", operation, user_id)
        if monitoring:
            monitoring.log_store_failure(operation, str(e), user_id=user_id)
        return None
