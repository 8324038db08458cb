"""
Drift Scoring Engine

Converts a 14-day engagement window into a multi-factor engagement
score, a drift-severity classification and a trend direction.

DESIGN: Pure and deterministic. Identical windows give identical
analyses (apart from last_updated). Four independent indicators are
combined with transparent, fixed weights.

IMPORTANT: This measures logging engagement, NOT health.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from models.drift import (
    DriftAnalysis,
    DriftIndicator,
    DriftLevel,
    IndicatorCategory,
    TrendDirection,
)
from models.engagement import DailyEngagement

from .rounding import round_half_up

logger = logging.getLogger(__name__)


class DriftScoringEngine:
    """
    Multi-indicator drift scoring over a most-recent-first window.

    USAGE:
        engine = DriftScoringEngine()
        analysis = engine.analyze(window)
    """

    # =========================================================================
    # THRESHOLDS (ratios, 0-1)
    # =========================================================================

    SIGNIFICANT_BELOW = 0.3
    MODERATE_BELOW = 0.5
    MILD_BELOW = 0.7
    FREQUENCY_DROP_MILD = -0.2  # week-over-week ratio change

    VARIETY_MODERATE_BELOW = 0.4
    VARIETY_MILD_BELOW = 0.7

    TREND_DELTA = 0.1

    # Days in each comparison period
    PERIOD_DAYS = 7

    # Weights per indicator category (sum to 1.0)
    CATEGORY_WEIGHTS = {
        IndicatorCategory.FREQUENCY: 0.35,
        IndicatorCategory.TIMING: 0.20,
        IndicatorCategory.COMPLETENESS: 0.30,
        IndicatorCategory.VARIETY: 0.15,
    }

    SEVERITY_SCORES = {
        DriftLevel.NONE: 100,
        DriftLevel.MILD: 70,
        DriftLevel.MODERATE: 40,
        DriftLevel.SIGNIFICANT: 15,
    }

    # Overall score below which each drift level applies
    LEVEL_THRESHOLDS = (
        (30, DriftLevel.SIGNIFICANT),
        (50, DriftLevel.MODERATE),
        (70, DriftLevel.MILD),
    )

    NEUTRAL_SCORE = 50

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now

    def analyze(self, window: Sequence[DailyEngagement]) -> DriftAnalysis:
        """
        Analyze an engagement window.

        Args:
            window: Daily aggregates, most recent first

        Returns:
            DriftAnalysis. Empty or malformed windows yield the fixed
            maximum-drift analysis instead of raising.
        """
        window = list(window)

        if not window:
            return self.maximum_drift()

        malformed = [day for day in window if not day.is_well_formed()]
        if malformed:
            logger.warning(
                "Malformed engagement window (%d of %d days unusable), using maximum drift",
                len(malformed), len(window),
            )
            return self.maximum_drift(days_analyzed=len(window))

        indicators = [
            self._analyze_frequency(window),
            self._analyze_timing(window),
            self._analyze_completion(window),
            self._analyze_variety(window),
        ]

        overall_score = self.overall_score(indicators)
        drift_level = self.level_for_score(overall_score)
        trend = self._calculate_trend(window)

        return DriftAnalysis(
            overall_score=overall_score,
            drift_level=drift_level,
            trend=trend,
            indicators=indicators,
            days_analyzed=len(window),
            explanation=generate_explanation(indicators, trend),
            contributing_factors=[
                i.description for i in indicators if i.severity != DriftLevel.NONE
            ],
            last_updated=self.clock(),
        )

    def maximum_drift(self, days_analyzed: int = 0) -> DriftAnalysis:
        """Fixed result for windows with no usable data."""
        return DriftAnalysis(
            overall_score=0,
            drift_level=DriftLevel.SIGNIFICANT,
            trend=TrendDirection.DECLINING,
            indicators=[],
            days_analyzed=days_analyzed,
            explanation=(
                "We haven't seen any recent logs. Your care plan is still here "
                "whenever you're ready."
            ),
            contributing_factors=["No usable logs in the analysis window"],
            last_updated=self.clock(),
        )

    @classmethod
    def level_for_score(cls, score: float) -> DriftLevel:
        """Map an overall score (0-100) to a drift level."""
        for upper, level in cls.LEVEL_THRESHOLDS:
            if score < upper:
                return level
        return DriftLevel.NONE

    # =========================================================================
    # INDICATORS
    # =========================================================================

    def _analyze_frequency(self, window: List[DailyEngagement]) -> DriftIndicator:
        """Compare this week's logging ratio with last week's."""
        recent = window[:self.PERIOD_DAYS]
        previous = window[self.PERIOD_DAYS:self.PERIOD_DAYS * 2]

        recent_avg = _mean(d.frequency_ratio for d in recent)
        previous_avg = _mean(d.frequency_ratio for d in previous) if previous else recent_avg
        change = recent_avg - previous_avg

        if recent_avg < self.SIGNIFICANT_BELOW:
            severity = DriftLevel.SIGNIFICANT
        elif recent_avg < self.MODERATE_BELOW:
            severity = DriftLevel.MODERATE
        elif recent_avg < self.MILD_BELOW or change < self.FREQUENCY_DROP_MILD:
            severity = DriftLevel.MILD
        else:
            severity = DriftLevel.NONE

        return DriftIndicator(
            id="frequency",
            category=IndicatorCategory.FREQUENCY,
            label="Logging Frequency",
            description=f"{round_half_up(recent_avg * 100)}% of expected logs recorded this week",
            severity=severity,
            confidence=self._confidence(recent),
            data_points=len(recent),
        )

    def _analyze_timing(self, window: List[DailyEngagement]) -> DriftIndicator:
        recent = window[:self.PERIOD_DAYS]
        consistency = _mean(d.timing_consistency for d in recent)

        if consistency >= self.MILD_BELOW:
            description = "Logging at consistent times"
        else:
            description = (
                f"Timing varies more than usual "
                f"({round_half_up(consistency * 100)}% consistency)"
            )

        return DriftIndicator(
            id="timing",
            category=IndicatorCategory.TIMING,
            label="Timing Consistency",
            description=description,
            severity=self.severity_for_ratio(consistency),
            confidence=self._confidence(recent),
            data_points=len(recent),
        )

    def _analyze_completion(self, window: List[DailyEngagement]) -> DriftIndicator:
        recent = window[:self.PERIOD_DAYS]
        completion = _mean(d.completion_ratio for d in recent)

        return DriftIndicator(
            id="tasks",
            category=IndicatorCategory.COMPLETENESS,
            label="Task Completion",
            description=f"{round_half_up(completion * 100)}% of daily tasks completed",
            severity=self.severity_for_ratio(completion),
            confidence=self._confidence(recent),
            data_points=len(recent),
        )

    def _analyze_variety(self, window: List[DailyEngagement]) -> DriftIndicator:
        """Check glucose, meal and activity logs all appear this week."""
        recent = window[:self.PERIOD_DAYS]

        covered = [
            any(d.glucose_checks > 0 for d in recent),
            any(d.meal_logs_count > 0 for d in recent),
            any(d.activity_minutes > 0 for d in recent),
        ]
        variety = sum(covered) / len(covered)

        severity = self.variety_severity(variety)

        if variety >= self.VARIETY_MILD_BELOW:
            description = "Good variety of health data logged"
        else:
            description = "Some log types are missing recently"

        return DriftIndicator(
            id="variety",
            category=IndicatorCategory.VARIETY,
            label="Log Variety",
            description=description,
            severity=severity,
            confidence=self._confidence(recent),
            data_points=len(recent),
        )

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    @classmethod
    def overall_score(cls, indicators: List[DriftIndicator]) -> int:
        """Confidence-and-category weighted mean of severity scores."""
        total_weight = 0.0
        weighted_score = 0.0

        for indicator in indicators:
            weight = cls.CATEGORY_WEIGHTS[indicator.category] * indicator.confidence
            weighted_score += cls.SEVERITY_SCORES[indicator.severity] * weight
            total_weight += weight

        if total_weight <= 0:
            return cls.NEUTRAL_SCORE
        return round_half_up(weighted_score / total_weight)

    def _calculate_trend(self, window: List[DailyEngagement]) -> TrendDirection:
        """
        Compare the last 3 days with days 4-6 (day 3 is a gap).
        Fewer than 7 days is always stable.
        """
        if len(window) < self.PERIOD_DAYS:
            return TrendDirection.STABLE

        recent_score = _mean(d.frequency_ratio for d in window[0:3])
        older_score = _mean(d.frequency_ratio for d in window[4:7])
        change = recent_score - older_score

        if change > self.TREND_DELTA:
            return TrendDirection.IMPROVING
        if change < -self.TREND_DELTA:
            return TrendDirection.DECLINING
        return TrendDirection.STABLE

    # Helpers

    @classmethod
    def severity_for_ratio(cls, ratio: float) -> DriftLevel:
        """Shared 0.3/0.5/0.7 bands used by frequency, timing and completion."""
        if ratio < cls.SIGNIFICANT_BELOW:
            return DriftLevel.SIGNIFICANT
        if ratio < cls.MODERATE_BELOW:
            return DriftLevel.MODERATE
        if ratio < cls.MILD_BELOW:
            return DriftLevel.MILD
        return DriftLevel.NONE

    @classmethod
    def variety_severity(cls, variety: float) -> DriftLevel:
        if variety < cls.VARIETY_MODERATE_BELOW:
            return DriftLevel.MODERATE
        if variety < cls.VARIETY_MILD_BELOW:
            return DriftLevel.MILD
        return DriftLevel.NONE

    def _confidence(self, days: List[DailyEngagement]) -> float:
        return min(1.0, len(days) / self.PERIOD_DAYS)


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def generate_explanation(indicators: List[DriftIndicator], trend: TrendDirection) -> str:
    """Deterministic, human-readable summary of the indicators."""
    serious = [
        i for i in indicators
        if i.severity in (DriftLevel.MODERATE, DriftLevel.SIGNIFICANT)
    ]

    if not serious:
        return "You're doing great! Your engagement patterns show consistent self-care habits."

    if trend == TrendDirection.IMPROVING:
        return "We notice you're getting back on track. Small steps make a big difference!"

    issues = " and ".join(i.label.lower() for i in serious)
    return f"We've noticed some changes in your {issues}. Life gets busy sometimes, and that's okay."


def export_analysis(analysis: DriftAnalysis, generated_at: Optional[datetime] = None) -> Dict:
    """Structured export of an analysis for API responses."""
    generated_at = generated_at or datetime.now()
    return {
        "disclaimer": "This analysis is for informational purposes only and does not constitute medical advice.",
        "generated": generated_at.isoformat(),
        "privacyNote": "All data is processed locally. No personal health information is stored or transmitted.",
        "analysis": {
            "engagementScore": analysis.overall_score,
            "driftLevel": analysis.drift_level.value,
            "trend": analysis.trend.value,
            "explanation": analysis.explanation,
            "indicators": [
                {
                    "category": i.category.value,
                    "label": i.label,
                    "severity": i.severity.value,
                    "confidence": f"{round_half_up(i.confidence * 100)}%",
                }
                for i in analysis.indicators
            ],
            "contributingFactors": list(analysis.contributing_factors),
        },
    }
