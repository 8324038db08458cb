"""
Drift Analysis Models

Output types of the drift scoring engine and the raw-log analyzer,
plus the tagged source union that normalizes both into one
canonical DriftAnalysis.

IMPORTANT: Drift describes logging behavior only. It is NOT a
clinical assessment.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .engagement import DailyEngagement


class DriftLevel(Enum):
    """
    Drift severity, ordered from least to most severe.
    Also used as the per-indicator severity.
    """
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class TrendDirection(Enum):
    """Direction of recent logging frequency."""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class IndicatorCategory(Enum):
    """The four independent drift indicators."""
    FREQUENCY = "frequency"
    TIMING = "timing"
    COMPLETENESS = "completeness"
    VARIETY = "variety"


@dataclass(frozen=True)
class DriftIndicator:
    """A single scored drift signal. One per category per analysis."""
    id: str
    category: IndicatorCategory
    label: str
    description: str
    severity: DriftLevel
    confidence: float  # 0-1
    data_points: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "label": self.label,
            "description": self.description,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "dataPoints": self.data_points,
        }


@dataclass
class DriftAnalysis:
    """
    Canonical drift analysis.

    overall_score is 0-100, higher = more engaged. drift_level is a
    monotone function of overall_score.
    """
    overall_score: int
    drift_level: DriftLevel
    trend: TrendDirection
    indicators: List[DriftIndicator]
    days_analyzed: int
    explanation: str
    contributing_factors: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=datetime.now)

    def indicator(self, category: IndicatorCategory) -> Optional[DriftIndicator]:
        """Get the indicator for a category, if present."""
        for item in self.indicators:
            if item.category == category:
                return item
        return None

    def has_issue(self, category: IndicatorCategory) -> bool:
        """Check whether an indicator exists with non-none severity."""
        item = self.indicator(category)
        return item is not None and item.severity != DriftLevel.NONE

    def to_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "driftLevel": self.drift_level.value,
            "trend": self.trend.value,
            "indicators": [i.to_dict() for i in self.indicators],
            "daysAnalyzed": self.days_analyzed,
            "explanation": self.explanation,
            "contributingFactors": list(self.contributing_factors),
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass
class LiveDriftResult:
    """
    Result of the raw-log (server) analyzer.

    Uses a simpler frequency/timing/variety blend than the window
    engine; the two are not expected to agree numerically.
    """
    drift_level: DriftLevel
    drift_type: Optional[str]
    engagement_score: int
    frequency_score: int
    timing_score: int
    variety_score: int
    trend: TrendDirection
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Shape used in the drift-analyze response."""
        return {
            "engagementScore": self.engagement_score,
            "driftLevel": self.drift_level.value,
            "driftType": self.drift_type,
            "trend": self.trend.value,
            "scores": {
                "frequency": self.frequency_score,
                "timing": self.timing_score,
                "variety": self.variety_score,
            },
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class LiveSource:
    """Analysis produced by the raw-log analyzer."""
    result: LiveDriftResult
    kind: str = "live"


@dataclass(frozen=True)
class SyntheticSource:
    """A precomputed engagement window (demo or locally generated data)."""
    window: List[DailyEngagement]
    kind: str = "synthetic"


AnalysisSource = Union[LiveSource, SyntheticSource]
