"""
Tests for analysis-source normalization and synthetic demo data.
"""

import random
from datetime import timedelta

import pytest

from conftest import FIXED_NOW, STEADY_CATEGORIES, add_daily_logs
from drift.engine import DriftScoringEngine
from drift.log_analyzer import LogDriftAnalyzer
from drift.normalize import to_drift_analysis
from drift.synthetic import (
    generate_daily_engagement,
    generate_synthetic_patient_data,
    sample_scenario,
)
from models.drift import (
    DriftLevel,
    IndicatorCategory,
    LiveDriftResult,
    LiveSource,
    SyntheticSource,
    TrendDirection,
)
from models.engagement import LogCategory
from storage.memory import InMemoryLogStore


USER = "user-001"


@pytest.fixture
def live_result():
    return LiveDriftResult(
        drift_level=DriftLevel.SIGNIFICANT,
        drift_type="frequency_drop",
        engagement_score=41,
        frequency_score=20,
        timing_score=80,
        variety_score=50,
        trend=TrendDirection.DECLINING,
        metadata={
            "logsCount": 12,
            "recentLogsCount": 5,
            "olderLogsCount": 7,
            "logTypes": ["glucose", "meal"],
            "daysAnalyzed": 14,
        },
    )


# =============================================================================
# NORMALIZATION
# =============================================================================

class TestNormalization:

    def test_synthetic_source_uses_window_engine(self, clock, drifting_window):
        engine = DriftScoringEngine(clock=clock)

        analysis = to_drift_analysis(SyntheticSource(drifting_window), engine=engine)

        assert analysis.to_dict() == engine.analyze(drifting_window).to_dict()

    def test_live_source_derives_score_and_level_from_indicators(self, clock, live_result):
        analysis = to_drift_analysis(LiveSource(live_result), clock=clock)

        # Frequency significant, timing none, variety mild
        assert analysis.overall_score == 51
        assert analysis.drift_level == DriftLevel.MILD
        assert analysis.trend == TrendDirection.DECLINING
        assert analysis.days_analyzed == 14
        assert analysis.last_updated == FIXED_NOW

    def test_live_indicators_from_sub_scores(self, clock, live_result):
        analysis = to_drift_analysis(LiveSource(live_result), clock=clock)

        assert analysis.indicator(IndicatorCategory.FREQUENCY).severity == DriftLevel.SIGNIFICANT
        assert analysis.indicator(IndicatorCategory.TIMING).severity == DriftLevel.NONE
        assert analysis.indicator(IndicatorCategory.VARIETY).severity == DriftLevel.MILD
        # No task data in the live variant
        assert analysis.indicator(IndicatorCategory.COMPLETENESS) is None
        assert all(i.confidence == 1.0 for i in analysis.indicators)

    def test_live_source_without_recent_logs_scores_frequency_only(self, clock, live_result):
        live_result.metadata["recentLogsCount"] = 0

        analysis = to_drift_analysis(LiveSource(live_result), clock=clock)

        assert analysis.indicator(IndicatorCategory.FREQUENCY).confidence == 1.0
        assert analysis.indicator(IndicatorCategory.TIMING).confidence == 0.0
        assert analysis.indicator(IndicatorCategory.VARIETY).confidence == 0.0
        assert analysis.overall_score == 15
        assert analysis.drift_level == DriftLevel.SIGNIFICANT

    def test_empty_live_result_is_maximum_drift(self, clock):
        empty = LogDriftAnalyzer(clock=clock).empty_result()

        analysis = to_drift_analysis(LiveSource(empty), clock=clock)

        assert analysis.overall_score == 0
        assert analysis.drift_level == DriftLevel.SIGNIFICANT
        assert analysis.indicators == []
        assert analysis.days_analyzed == 14

    def test_live_score_comes_from_indicators_not_server_blend(self, clock):
        # Ten glucose logs over six days, alternating 05:00 and 13:00
        logs = InMemoryLogStore(clock=clock)
        for n in range(10):
            day = FIXED_NOW - timedelta(days=n % 6)
            logs.add_log(USER, LogCategory.GLUCOSE, logged_at=day.replace(hour=5 if n % 2 else 13, minute=n))
        result = LogDriftAnalyzer(clock=clock).analyze(logs.fetch_log_window(USER, now=FIXED_NOW))

        analysis = to_drift_analysis(LiveSource(result), clock=clock)

        assert result.engagement_score == 46
        assert result.drift_level == DriftLevel.NONE
        assert analysis.indicator(IndicatorCategory.FREQUENCY).severity == DriftLevel.NONE
        assert analysis.indicator(IndicatorCategory.TIMING).severity == DriftLevel.MODERATE
        assert analysis.indicator(IndicatorCategory.VARIETY).severity == DriftLevel.MODERATE
        assert analysis.overall_score == 70
        assert analysis.drift_level == DriftScoringEngine.level_for_score(analysis.overall_score)

    @pytest.mark.parametrize("days,hours,categories", [
        (range(14), (8, 10, 12, 14), STEADY_CATEGORIES),
        (range(7), (9,), (LogCategory.GLUCOSE,)),
        (range(7, 14), (8, 9, 10, 11, 12), (LogCategory.GLUCOSE,) * 5),
        (range(3), (6, 18), (LogCategory.MEAL, LogCategory.BP)),
        (range(14), (7, 19, 13), (LogCategory.GLUCOSE, LogCategory.MEDICATION, LogCategory.ACTIVITY)),
    ])
    def test_live_level_always_matches_score(self, clock, days, hours, categories):
        logs = InMemoryLogStore(clock=clock)
        add_daily_logs(logs, USER, days, hours, categories)
        result = LogDriftAnalyzer(clock=clock).analyze(logs.fetch_log_window(USER, now=FIXED_NOW))

        analysis = to_drift_analysis(LiveSource(result), clock=clock)

        assert analysis.drift_level == DriftScoringEngine.level_for_score(analysis.overall_score)

    def test_source_kinds(self, live_result, engaged_window):
        assert LiveSource(live_result).kind == "live"
        assert SyntheticSource(engaged_window).kind == "synthetic"

    def test_unknown_source_is_rejected(self):
        with pytest.raises(TypeError):
            to_drift_analysis({"overallScore": 50})


# =============================================================================
# SYNTHETIC DATA
# =============================================================================

class TestSyntheticData:

    def test_seeded_generation_is_reproducible(self):
        first = generate_synthetic_patient_data("p-1", "declining", rng=random.Random(7), now=FIXED_NOW)
        second = generate_synthetic_patient_data("p-1", "declining", rng=random.Random(7), now=FIXED_NOW)

        assert first.to_dict() == second.to_dict()
        assert [log.to_dict() for log in first.recent_logs] == [log.to_dict() for log in second.recent_logs]

    def test_window_is_most_recent_first(self):
        data = generate_synthetic_patient_data(rng=random.Random(1), now=FIXED_NOW)

        assert len(data.daily_engagement) == 14
        assert data.daily_engagement[0].date == FIXED_NOW.date()
        assert all(day.is_well_formed() for day in data.daily_engagement)

    def test_declining_pattern_drops_recently(self):
        window = generate_daily_engagement(14, "declining", random.Random(3), FIXED_NOW)

        recent = sum(d.logs_count for d in window[:7])
        older = sum(d.logs_count for d in window[7:])
        assert recent < older

    def test_engaged_scenario_outscores_drifting(self, clock):
        engine = DriftScoringEngine(clock=clock)

        engaged = sample_scenario("engaged", rng=random.Random(5), now=FIXED_NOW)
        drifting = sample_scenario("drifting", rng=random.Random(5), now=FIXED_NOW)

        engaged_score = engine.analyze(engaged.daily_engagement).overall_score
        drifting_score = engine.analyze(drifting.daily_engagement).overall_score
        assert engaged_score > drifting_score

    def test_unknown_scenario(self):
        with pytest.raises(ValueError):
            sample_scenario("vacation")

    def test_unknown_pattern(self):
        with pytest.raises(ValueError):
            generate_daily_engagement(14, "chaotic", random.Random(), FIXED_NOW)
