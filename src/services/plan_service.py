"""
Plan Service

Evaluates the adaptive plan from the user's recent logs using the
window engine, and keeps the plan mode bookkeeping between calls.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from drift.engine import DriftScoringEngine, export_analysis
from drift.window import build_window
from monitoring.monitoring_service import MonitoringService
from planning.state_machine import AdaptivePlanner, export_plan, should_restore_plan
from storage.base import LogStore, PlanStateStore

from .store_calls import best_effort_write, load_log_window

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(
        self,
        log_store: LogStore,
        plan_states: PlanStateStore,
        engine: Optional[DriftScoringEngine] = None,
        planner: Optional[AdaptivePlanner] = None,
        monitoring: Optional[MonitoringService] = None,
        window_days: int = 14,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.log_store = log_store
        self.plan_states = plan_states
        self.clock = clock or datetime.now
        self.engine = engine or DriftScoringEngine(clock=self.clock)
        self.planner = planner or AdaptivePlanner(clock=self.clock)
        self.monitoring = monitoring
        self.window_days = window_days

    def evaluate(self, user_id: str) -> Dict:
        """
        Analyze the log window and resolve the plan.

        Raises:
            StoreUnavailableError: if the log window cannot be read
        """
        now = self.clock()
        logs = load_log_window(self.log_store, user_id, self.window_days, now, self.monitoring)

        window = build_window(logs, now=now, days=self.window_days)
        analysis = self.engine.analyze(window)

        try:
            previous = self.plan_states.load_plan_state(user_id)
        except Exception:
            logger.warning("Could not load plan state for user %s, starting fresh", user_id, exc_info=True)
            previous = None

        plan = self.planner.generate_plan(analysis, previous_plan=previous, now=now)

        if previous is not None and previous.current_mode != plan.current_mode:
            logger.info(
                "Plan mode for user %s: %s -> %s",
                user_id, previous.current_mode.value, plan.current_mode.value,
            )
            if self.monitoring:
                self.monitoring.log_plan_mode_changed(
                    user_id, previous.current_mode.value, plan.current_mode.value,
                )

        best_effort_write(
            "save_plan_state",
            lambda: self.plan_states.save_plan_state(user_id, plan.current_mode, plan.mode_changed_at),
            user_id,
            self.monitoring,
        )

        return {
            "plan": export_plan(plan),
            "modeChangedAt": plan.mode_changed_at.isoformat(),
            "previousMode": plan.previous_mode.value,
            "shouldRestore": should_restore_plan(plan, analysis),
            "analysis": export_analysis(analysis, generated_at=now),
        }
