"""
Insights Service

Dashboard bundle: canonical analysis, styled nudges and the plan export.

Live logs are analyzed by the raw-log analyzer and normalized through
LiveSource; the analyzer's own result is returned alongside as
serverResult. The live plan carries the stored plan state forward
without saving it. When the log store is unavailable, the dashboard
shows a synthetic demo window instead of an error (source = "synthetic").
"""

import logging
import random
from datetime import datetime
from typing import Callable, Dict, List, Optional

from drift.engine import DriftScoringEngine
from drift.log_analyzer import LogDriftAnalyzer
from drift.normalize import to_drift_analysis
from drift.synthetic import generate_synthetic_patient_data, sample_scenario
from models.drift import AnalysisSource, LiveSource, SyntheticSource
from models.nudge import Nudge
from models.plan import PlanState
from monitoring.monitoring_service import MonitoringService
from nudges.policy import NudgePolicy, get_nudge_styling
from nudges.templates import DEFAULT_LANGUAGE
from planning.state_machine import AdaptivePlanner, export_plan, should_restore_plan
from storage.base import LogStore, PlanStateStore, ProfileStore

from .errors import StoreUnavailableError
from .store_calls import load_log_window, resolve_language

logger = logging.getLogger(__name__)


INSIGHTS_DISCLAIMER = (
    "These insights describe logging habits only. They are not medical advice "
    "and do not assess health conditions."
)

# Drift pattern used for the fallback demo window
FALLBACK_PATTERN = "declining"


class InsightsService:
    """
    USAGE:
        service = InsightsService(log_store, profile_store, plan_states)
        bundle = service.build(user_id)
        demo = service.demo("drifting")
    """

    def __init__(
        self,
        log_store: LogStore,
        profile_store: Optional[ProfileStore] = None,
        plan_states: Optional[PlanStateStore] = None,
        analyzer: Optional[LogDriftAnalyzer] = None,
        engine: Optional[DriftScoringEngine] = None,
        policy: Optional[NudgePolicy] = None,
        planner: Optional[AdaptivePlanner] = None,
        monitoring: Optional[MonitoringService] = None,
        window_days: int = 14,
        default_language: str = DEFAULT_LANGUAGE,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.log_store = log_store
        self.profile_store = profile_store
        self.plan_states = plan_states
        self.clock = clock or datetime.now
        self.analyzer = analyzer or LogDriftAnalyzer(clock=self.clock)
        self.engine = engine or DriftScoringEngine(clock=self.clock)
        self.policy = policy or NudgePolicy()
        self.planner = planner or AdaptivePlanner(clock=self.clock)
        self.monitoring = monitoring
        self.window_days = window_days
        self.default_language = default_language
        self.rng = rng or random.Random()

    def build(self, user_id: str) -> Dict:
        """Insights for a user, falling back to demo data if logs are unavailable."""
        now = self.clock()
        language = resolve_language(self.profile_store, user_id, self.default_language)

        source: AnalysisSource
        try:
            logs = load_log_window(self.log_store, user_id, self.window_days, now, self.monitoring)
            source = LiveSource(self.analyzer.analyze(logs, now=now))
            previous = self._load_plan_state(user_id)
        except StoreUnavailableError:
            logger.warning("Log store unavailable for user %s, showing synthetic insights", user_id)
            demo = generate_synthetic_patient_data(
                user_id, FALLBACK_PATTERN, rng=self.rng, now=now, days=self.window_days,
            )
            source = SyntheticSource(demo.daily_engagement)
            previous = None

        bundle = self._bundle(source, language, now, previous)
        if isinstance(source, LiveSource):
            bundle["serverResult"] = source.result.to_dict()
        return bundle

    def demo(self, scenario: str, language: Optional[str] = None) -> Dict:
        """
        Insights for a named demo scenario (engaged, drifting, recovering).

        Raises:
            ValueError: for an unknown scenario
        """
        now = self.clock()
        patient = sample_scenario(scenario, rng=self.rng, now=now)
        bundle = self._bundle(
            SyntheticSource(patient.daily_engagement),
            language or self.default_language,
            now,
        )
        bundle["scenario"] = scenario
        bundle["patient"] = patient.to_dict()
        return bundle

    def _bundle(
        self,
        source: AnalysisSource,
        language: str,
        now: datetime,
        previous: Optional[PlanState] = None,
    ) -> Dict:
        analysis = to_drift_analysis(source, engine=self.engine, clock=self.clock)
        nudges = self.policy.generate_nudges(analysis, language)
        plan = self.planner.generate_plan(analysis, previous_plan=previous, now=now)

        return {
            "source": source.kind,
            "analysis": analysis.to_dict(),
            "nudges": _styled(nudges),
            "plan": export_plan(plan),
            "modeChangedAt": plan.mode_changed_at.isoformat(),
            "previousMode": plan.previous_mode.value,
            "shouldRestore": should_restore_plan(plan, analysis),
            "disclaimer": INSIGHTS_DISCLAIMER,
            "timestamp": now.isoformat(),
        }

    def _load_plan_state(self, user_id: str) -> Optional[PlanState]:
        if self.plan_states is None:
            return None
        try:
            return self.plan_states.load_plan_state(user_id)
        except Exception:
            logger.warning("Could not load plan state for user %s, starting fresh", user_id, exc_info=True)
            return None


def _styled(nudges: List[Nudge]) -> List[Dict]:
    return [
        {**nudge.to_dict(), "styling": dict(get_nudge_styling(nudge.tone))}
        for nudge in nudges
    ]
