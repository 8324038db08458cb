"""
Drift Analysis Service

Server-side analysis request: read the user's log window, analyze it,
persist the drift event and the selected nudge, and build the response.

DESIGN PRINCIPLES:
1. The log window read is the only fatal store call
2. Drift event and nudge writes are best-effort (at-least-once is fine)
3. Recommendations appear only for significant drift

IMPORTANT: This tracks engagement, not health. Every response carries
the disclaimer.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from drift.log_analyzer import LogDriftAnalyzer
from models.drift import DriftLevel
from monitoring.monitoring_service import MonitoringService
from nudges.policy import NudgePolicy
from nudges.templates import DEFAULT_LANGUAGE
from storage.base import DriftEventStore, LogStore, NudgeStore, ProfileStore

from .store_calls import best_effort_write, load_log_window, resolve_language

logger = logging.getLogger(__name__)


DRIFT_DISCLAIMER = (
    "This analysis is for engagement tracking only. It is not medical advice "
    "and does not assess health conditions."
)


class DriftAnalysisService:
    """
    Runs one drift analysis for an authenticated user.

    USAGE:
        service = DriftAnalysisService(log_store, drift_events, nudge_store, profiles)
        response = service.run(user_id)
    """

    def __init__(
        self,
        log_store: LogStore,
        drift_events: DriftEventStore,
        nudge_store: NudgeStore,
        profile_store: Optional[ProfileStore] = None,
        analyzer: Optional[LogDriftAnalyzer] = None,
        policy: Optional[NudgePolicy] = None,
        monitoring: Optional[MonitoringService] = None,
        window_days: int = 14,
        default_language: str = DEFAULT_LANGUAGE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.log_store = log_store
        self.drift_events = drift_events
        self.nudge_store = nudge_store
        self.profile_store = profile_store
        self.clock = clock or datetime.now
        self.analyzer = analyzer or LogDriftAnalyzer(clock=self.clock)
        self.policy = policy or NudgePolicy()
        self.monitoring = monitoring
        self.window_days = window_days
        self.default_language = default_language

    def run(self, user_id: str) -> Dict:
        """
        Analyze the user's recent logs.

        Raises:
            StoreUnavailableError: if the log window cannot be read
        """
        now = self.clock()
        language = resolve_language(self.profile_store, user_id, self.default_language)

        logs = load_log_window(self.log_store, user_id, self.window_days, now, self.monitoring)
        result = self.analyzer.analyze(logs, now=now)

        logger.info(
            "Drift analysis for user %s: level=%s type=%s score=%d (%d logs)",
            user_id, result.drift_level.value, result.drift_type,
            result.engagement_score, len(logs),
        )

        if result.drift_level != DriftLevel.NONE and result.drift_type:
            best_effort_write(
                "record_drift_event",
                lambda: self.drift_events.record_drift_event(
                    user_id,
                    result.drift_type,
                    result.drift_level,
                    result.engagement_score,
                    result.metadata,
                ),
                user_id,
                self.monitoring,
            )
            if self.monitoring:
                self.monitoring.log_drift_detected(
                    user_id, result.drift_level.value, result.drift_type, result.engagement_score,
                )

        nudge = self.policy.select_server_nudge(result, language)
        best_effort_write(
            "record_nudge",
            lambda: self.nudge_store.record_nudge(
                user_id, nudge.message, nudge.type, nudge.tone, nudge.language,
            ),
            user_id,
            self.monitoring,
        )

        recommendations = None
        if result.drift_level == DriftLevel.SIGNIFICANT:
            recommendations = {
                "suggestReducedPlan": True,
                "message": self.policy.recommendation_message(language),
            }

        return {
            "disclaimer": DRIFT_DISCLAIMER,
            "analysis": result.to_dict(),
            "nudge": nudge.to_dict(),
            "recommendations": recommendations,
            "timestamp": now.isoformat(),
        }
