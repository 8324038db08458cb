"""
Adaptive Plan State Machine

Resolves a plan mode (full / reduced / minimal) from a drift analysis
and computes the resulting task load.

DESIGN PRINCIPLES:
1. The mode depends only on the current analysis (drift level + trend)
2. Plan history is used for bookkeeping only (previous mode, change time)
3. Safety-related tasks are never reduced
4. auto_restore_at is a scheduling hint - nothing here acts on it

USAGE:
    planner = AdaptivePlanner()
    plan = planner.generate_plan(analysis, previous_plan=last_plan)
    if should_restore_plan(plan, later_analysis):
        plan = planner.generate_plan(later_analysis, previous_plan=plan)
"""

from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Sequence, Union

from drift.rounding import round_half_up
from models.drift import DriftAnalysis, DriftLevel, TrendDirection
from models.plan import AdaptivePlan, PlanMode, PlanModeInfo, PlanState, TaskCategory

from .categories import DEFAULT_TASK_CATEGORIES, validate_task_categories


PLAN_DISCLAIMER = (
    "Task adjustments are for engagement support only. All safety-critical tasks "
    "(glucose monitoring, medications) remain unchanged. This is not medical advice."
)

PLAN_PRIVACY_NOTE = "Plan adjustments are computed locally. No personal data is stored or shared."

AUTO_RESTORE_DAYS = 7

# shouldRestore thresholds
RESTORE_MIN_SCORE = 70
RESTORE_IMPROVING_MIN_SCORE = 60

PLAN_MODE_INFO = {
    PlanMode.MINIMAL: PlanModeInfo(
        label="Light Mode",
        description="Focusing on essentials while you recharge",
        color="text-info",
        icon="🌙",
    ),
    PlanMode.REDUCED: PlanModeInfo(
        label="Balanced Mode",
        description="A lighter load to help you ease back in",
        color="text-primary",
        icon="🌤️",
    ),
    PlanMode.FULL: PlanModeInfo(
        label="Full Plan",
        description="Your complete care routine",
        color="text-success",
        icon="☀️",
    ),
}


def task_count_for_mode(category: TaskCategory, mode: PlanMode) -> int:
    return category.count_for_mode(mode)


def determine_plan_mode(drift_level: DriftLevel, trend: TrendDirection) -> PlanMode:
    """
    Transition function.

    An improving trend starts restoring: significant and moderate drift
    go to reduced, anything else to full. Otherwise the level decides.
    """
    if trend == TrendDirection.IMPROVING:
        if drift_level in (DriftLevel.SIGNIFICANT, DriftLevel.MODERATE):
            return PlanMode.REDUCED
        return PlanMode.FULL

    if drift_level == DriftLevel.SIGNIFICANT:
        return PlanMode.MINIMAL
    if drift_level in (DriftLevel.MODERATE, DriftLevel.MILD):
        return PlanMode.REDUCED
    return PlanMode.FULL


def should_restore_plan(plan: AdaptivePlan, analysis: DriftAnalysis) -> bool:
    """
    Whether the caller should re-run the transition for a lighter plan.
    Never changes the plan itself.
    """
    if plan.current_mode == PlanMode.FULL:
        return False

    if analysis.drift_level == DriftLevel.NONE and analysis.overall_score >= RESTORE_MIN_SCORE:
        return True

    if analysis.trend == TrendDirection.IMPROVING and analysis.overall_score >= RESTORE_IMPROVING_MIN_SCORE:
        return True

    return False


def get_plan_mode_info(mode: PlanMode) -> PlanModeInfo:
    return PLAN_MODE_INFO.get(mode, PLAN_MODE_INFO[PlanMode.FULL])


class AdaptivePlanner:
    """
    Builds adaptive plans over a validated set of task categories.

    Raises PlanConfigurationError at construction if the categories
    break an invariant (see planning.categories).
    """

    def __init__(
        self,
        task_categories: Sequence[TaskCategory] = DEFAULT_TASK_CATEGORIES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        validate_task_categories(task_categories)
        self.task_categories = tuple(task_categories)
        self.clock = clock or datetime.now

    def generate_plan(
        self,
        analysis: DriftAnalysis,
        previous_plan: Optional[Union[AdaptivePlan, PlanState]] = None,
        now: Optional[datetime] = None,
    ) -> AdaptivePlan:
        """
        Evaluate the plan for an analysis.

        Args:
            analysis: Current drift analysis
            previous_plan: Last plan (or its stored state), used to carry
                mode_changed_at forward
            now: Evaluation time (defaults to the planner clock)
        """
        now = now or self.clock()
        new_mode = determine_plan_mode(analysis.drift_level, analysis.trend)
        previous_mode = previous_plan.current_mode if previous_plan else PlanMode.FULL

        if previous_plan is None or new_mode != previous_mode:
            mode_changed_at = now
        else:
            mode_changed_at = previous_plan.mode_changed_at

        total = sum(c.full_mode_count for c in self.task_categories)
        active = sum(task_count_for_mode(c, new_mode) for c in self.task_categories)
        reduction_percent = round_half_up((1 - active / total) * 100) if total else 0

        auto_restore_at = None
        if new_mode != PlanMode.FULL:
            auto_restore_at = now + timedelta(days=AUTO_RESTORE_DAYS)

        return AdaptivePlan(
            current_mode=new_mode,
            previous_mode=previous_mode,
            mode_changed_at=mode_changed_at,
            task_categories=list(self.task_categories),
            total_tasks=total,
            active_tasks=active,
            reduction_percent=reduction_percent,
            disclaimer=PLAN_DISCLAIMER,
            auto_restore_at=auto_restore_at,
        )


def export_plan(plan: AdaptivePlan) -> Dict:
    """Structured plan export for API responses."""
    return {
        "disclaimer": plan.disclaimer,
        "privacyNote": PLAN_PRIVACY_NOTE,
        "plan": {
            "mode": plan.current_mode.value,
            "modeInfo": get_plan_mode_info(plan.current_mode).to_dict(),
            "taskSummary": {
                "total": plan.total_tasks,
                "active": plan.active_tasks,
                "reductionPercent": plan.reduction_percent,
            },
            "safetyTasks": [
                {
                    "name": c.name,
                    "count": c.full_mode_count,
                    "note": "Never reduced",
                }
                for c in plan.task_categories if c.is_safety_related
            ],
            "adjustableTasks": [
                {
                    "name": c.name,
                    "fullCount": c.full_mode_count,
                    "currentCount": task_count_for_mode(c, plan.current_mode),
                }
                for c in plan.task_categories if not c.is_safety_related
            ],
            "autoRestoreDate": plan.auto_restore_at.isoformat() if plan.auto_restore_at else None,
        },
    }
