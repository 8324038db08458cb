# Models Package
from .engagement import LogCategory, LogEvent, DailyEngagement
from .drift import (
    DriftLevel,
    TrendDirection,
    IndicatorCategory,
    DriftIndicator,
    DriftAnalysis,
    LiveDriftResult,
    LiveSource,
    SyntheticSource,
    AnalysisSource,
)
from .nudge import NudgeType, NudgeTone, ActionType, NudgeTemplate, Nudge, ServerNudge, StoredNudge
from .plan import PlanMode, TaskCategory, PlanModeInfo, AdaptivePlan, PlanState

__all__ = [
    # Engagement
    "LogCategory", "LogEvent", "DailyEngagement",
    # Drift
    "DriftLevel", "TrendDirection", "IndicatorCategory", "DriftIndicator",
    "DriftAnalysis", "LiveDriftResult", "LiveSource", "SyntheticSource",
    "AnalysisSource",
    # Nudges
    "NudgeType", "NudgeTone", "ActionType", "NudgeTemplate", "Nudge",
    "ServerNudge", "StoredNudge",
    # Plans
    "PlanMode", "TaskCategory", "PlanModeInfo", "AdaptivePlan", "PlanState",
]
