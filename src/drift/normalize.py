"""
Analysis Source Normalization

Live (raw-log) results and synthetic engagement windows both flow
into nudges and plans as one canonical DriftAnalysis.
"""

from datetime import datetime
from typing import Callable, Optional

from models.drift import (
    AnalysisSource,
    DriftAnalysis,
    DriftIndicator,
    DriftLevel,
    IndicatorCategory,
    LiveDriftResult,
    LiveSource,
    SyntheticSource,
)

from .engine import DriftScoringEngine, generate_explanation


def to_drift_analysis(
    source: AnalysisSource,
    engine: Optional[DriftScoringEngine] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> DriftAnalysis:
    """
    Normalize an analysis source.

    Synthetic windows are scored by the engine. Live results keep the
    server's trend; indicators are rebuilt from the three sub-scores and
    the overall score and drift level are derived from them the same way
    the engine does. The server's own engagement score and drift level
    stay on the LiveDriftResult. The live variant has no task data, so
    there is no completeness indicator.
    """
    if isinstance(source, SyntheticSource):
        engine = engine or DriftScoringEngine(clock=clock)
        return engine.analyze(source.window)

    if isinstance(source, LiveSource):
        return _from_live(source.result, engine or DriftScoringEngine(clock=clock))

    raise TypeError(f"Unsupported analysis source: {type(source).__name__}")


def _from_live(result: LiveDriftResult, engine: DriftScoringEngine) -> DriftAnalysis:
    days_analyzed = int(result.metadata.get("daysAnalyzed", 0))
    window_logs = int(result.metadata.get("logsCount", 0))
    if window_logs == 0:
        return engine.maximum_drift(days_analyzed=days_analyzed)

    # Timing and variety are only measured on the recent week
    recent_logs = int(result.metadata.get("recentLogsCount", 0))
    recent_confidence = 1.0 if recent_logs > 0 else 0.0

    indicators = [
        DriftIndicator(
            id="frequency",
            category=IndicatorCategory.FREQUENCY,
            label="Logging Frequency",
            description=f"{result.frequency_score}% of expected logs",
            severity=DriftScoringEngine.severity_for_ratio(result.frequency_score / 100),
            confidence=1.0,
            data_points=window_logs,
        ),
        DriftIndicator(
            id="timing",
            category=IndicatorCategory.TIMING,
            label="Timing Consistency",
            description=f"{result.timing_score}% consistency",
            severity=DriftScoringEngine.severity_for_ratio(result.timing_score / 100),
            confidence=recent_confidence,
            data_points=recent_logs,
        ),
        DriftIndicator(
            id="variety",
            category=IndicatorCategory.VARIETY,
            label="Log Variety",
            description=f"{len(result.metadata.get('logTypes', []))} log types recorded recently",
            severity=DriftScoringEngine.variety_severity(result.variety_score / 100),
            confidence=recent_confidence,
            data_points=recent_logs,
        ),
    ]

    overall_score = DriftScoringEngine.overall_score(indicators)

    return DriftAnalysis(
        overall_score=overall_score,
        drift_level=DriftScoringEngine.level_for_score(overall_score),
        trend=result.trend,
        indicators=indicators,
        days_analyzed=days_analyzed,
        explanation=generate_explanation(indicators, result.trend),
        contributing_factors=[
            i.description for i in indicators if i.severity != DriftLevel.NONE
        ],
        last_updated=engine.clock(),
    )
