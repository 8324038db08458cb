"""
Raw-Log Drift Analyzer

Server-side drift analysis over a flat list of timestamped logs.
Blends frequency, timing and variety into one engagement score and
names the dominant drift type.

NOTE: This is a simpler formula than DriftScoringEngine and uses a
7-vs-7 day trend comparison. The two are not meant to agree
numerically for the same data.
"""

import math
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from models.drift import DriftLevel, LiveDriftResult, TrendDirection
from models.engagement import LogEvent

from .rounding import clamp, round_half_up


class LogDriftAnalyzer:
    """
    Drift detection directly from raw logs.

    USAGE:
        analyzer = LogDriftAnalyzer()
        result = analyzer.analyze(logs)
    """

    WINDOW_DAYS = 14
    PERIOD_DAYS = 7

    # Assume at least this many logs/day as the baseline
    MIN_BASELINE_PER_DAY = 2.0

    # Frequency ratio vs baseline
    FREQUENCY_SIGNIFICANT = 0.3
    FREQUENCY_MODERATE = 0.5
    FREQUENCY_MILD = 0.7

    # Std-dev of log hours
    TIMING_SIGNIFICANT_HOURS = 6.0
    TIMING_MODERATE_HOURS = 4.0
    TIMING_SCALE_HOURS = 6.0

    # Variety score (0-100)
    VARIETY_SPARSE = 20
    EXPECTED_LOG_TYPES = 4  # glucose, bp, activity, diet

    # Blend weights
    FREQUENCY_WEIGHT = 0.4
    TIMING_WEIGHT = 0.3
    VARIETY_WEIGHT = 0.3

    # Week-over-week trend multipliers
    IMPROVING_FACTOR = 1.2
    DECLINING_FACTOR = 0.8

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now

    def analyze(self, logs: Sequence[LogEvent], now: Optional[datetime] = None) -> LiveDriftResult:
        """
        Analyze raw logs from the last 14 days.

        Args:
            logs: Log events (any order)
            now: Reference time (defaults to the analyzer clock)

        Returns:
            LiveDriftResult; empty input gives the fixed maximum-drift result
        """
        if not logs:
            return self.empty_result()

        now = now or self.clock()
        window_start = now - timedelta(days=self.WINDOW_DAYS)
        period_start = now - timedelta(days=self.PERIOD_DAYS)

        recent = [log for log in logs if log.timestamp >= period_start]
        older = [log for log in logs if window_start <= log.timestamp < period_start]

        # Frequency (logs per day vs baseline)
        recent_frequency = len(recent) / self.PERIOD_DAYS
        older_frequency = len(older) / self.PERIOD_DAYS
        baseline = max(older_frequency, self.MIN_BASELINE_PER_DAY)
        frequency_ratio = recent_frequency / baseline
        frequency_score = min(100, round_half_up(frequency_ratio * 100))

        # Timing (spread of log hours)
        std_dev = self._hour_std_dev(recent)
        timing_score = int(clamp(
            round_half_up((self.TIMING_SCALE_HOURS - std_dev) / self.TIMING_SCALE_HOURS * 100),
            0, 100,
        ))

        # Variety (distinct log types)
        log_types = sorted({log.category.value for log in recent})
        variety_score = round_half_up(len(log_types) / self.EXPECTED_LOG_TYPES * 100)

        engagement_score = round_half_up(
            frequency_score * self.FREQUENCY_WEIGHT
            + timing_score * self.TIMING_WEIGHT
            + variety_score * self.VARIETY_WEIGHT
        )

        drift_level, drift_type = self._classify(frequency_ratio, std_dev, variety_score)

        if recent_frequency > older_frequency * self.IMPROVING_FACTOR:
            trend = TrendDirection.IMPROVING
        elif recent_frequency < older_frequency * self.DECLINING_FACTOR:
            trend = TrendDirection.DECLINING
        else:
            trend = TrendDirection.STABLE

        return LiveDriftResult(
            drift_level=drift_level,
            drift_type=drift_type,
            engagement_score=engagement_score,
            frequency_score=frequency_score,
            timing_score=timing_score,
            variety_score=variety_score,
            trend=trend,
            metadata={
                "logsCount": len(logs),
                "recentLogsCount": len(recent),
                "olderLogsCount": len(older),
                "logTypes": log_types,
                "frequencyRatio": round(frequency_ratio, 2),
                "timingVariance": round(std_dev, 2),
                "daysAnalyzed": self.WINDOW_DAYS,
            },
        )

    def empty_result(self) -> LiveDriftResult:
        return LiveDriftResult(
            drift_level=DriftLevel.SIGNIFICANT,
            drift_type="frequency_drop",
            engagement_score=0,
            frequency_score=0,
            timing_score=0,
            variety_score=0,
            trend=TrendDirection.DECLINING,
            metadata={"logsCount": 0, "daysAnalyzed": self.WINDOW_DAYS},
        )

    def _classify(self, frequency_ratio: float, std_dev: float, variety_score: int):
        """First matching rule wins: frequency, then timing, then variety."""
        if frequency_ratio < self.FREQUENCY_SIGNIFICANT:
            return DriftLevel.SIGNIFICANT, "frequency_drop"
        if frequency_ratio < self.FREQUENCY_MODERATE:
            return DriftLevel.MODERATE, "frequency_drop"
        if frequency_ratio < self.FREQUENCY_MILD:
            return DriftLevel.MILD, "frequency_drop"
        if std_dev > self.TIMING_SIGNIFICANT_HOURS:
            return DriftLevel.SIGNIFICANT, "irregular_timing"
        if std_dev > self.TIMING_MODERATE_HOURS:
            return DriftLevel.MODERATE, "irregular_timing"
        if variety_score < self.VARIETY_SPARSE:
            return DriftLevel.MODERATE, "sparse_variety"
        return DriftLevel.NONE, None

    @staticmethod
    def _hour_std_dev(logs: List[LogEvent]) -> float:
        """Population std-dev of log hours (0 when there are no logs)."""
        hours = [log.timestamp.hour for log in logs]
        if not hours:
            return 0.0
        mean = sum(hours) / len(hours)
        variance = sum((h - mean) ** 2 for h in hours) / len(hours)
        return math.sqrt(variance)
