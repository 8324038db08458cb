"""
Tests for nudge selection.
"""

from types import MappingProxyType

import pytest

from conftest import FIXED_NOW
from models.drift import (
    DriftAnalysis,
    DriftIndicator,
    DriftLevel,
    IndicatorCategory,
    LiveDriftResult,
    TrendDirection,
)
from models.nudge import ActionType, NudgeTemplate, NudgeTone, NudgeType
from nudges import DEFAULT_SERVER_TEMPLATES, ENGLISH_NUDGES, NudgePolicy, get_nudge_styling
from nudges.templates import DEFAULT_TONE_STYLE, NUDGE_TONE_STYLES


def make_indicator(category, severity):
    return DriftIndicator(
        id=category.value,
        category=category,
        label=category.value.title(),
        description="",
        severity=severity,
        confidence=1.0,
        data_points=7,
    )


def make_analysis(score, level, trend=TrendDirection.STABLE, issues=()):
    indicators = [
        make_indicator(category, level if category in issues else DriftLevel.NONE)
        for category in IndicatorCategory
    ]
    return DriftAnalysis(
        overall_score=score,
        drift_level=level,
        trend=trend,
        indicators=indicators,
        days_analyzed=14,
        explanation="",
        last_updated=FIXED_NOW,
    )


def live_result(level, trend=TrendDirection.STABLE):
    return LiveDriftResult(
        drift_level=level,
        drift_type=None,
        engagement_score=50,
        frequency_score=50,
        timing_score=50,
        variety_score=50,
        trend=trend,
    )


@pytest.fixture
def policy():
    return NudgePolicy(pick_one=lambda options: options[0])


def ids(nudges):
    return [n.id for n in nudges]


# =============================================================================
# RULES
# =============================================================================

class TestGenerateNudges:

    def test_high_engagement_celebrates(self, policy):
        nudges = policy.generate_nudges(make_analysis(92, DriftLevel.NONE))

        assert ids(nudges) == ["nudge-celebration-1"]
        assert nudges[0].message.startswith("You completed 92% of your care tasks")
        assert nudges[0].tone == NudgeTone.CELEBRATORY

    def test_no_drift_below_celebration_threshold_is_silent(self, policy):
        assert policy.generate_nudges(make_analysis(79, DriftLevel.NONE)) == []

    def test_mild_frequency_drift(self, policy):
        analysis = make_analysis(65, DriftLevel.MILD, issues=(IndicatorCategory.FREQUENCY,))

        nudges = policy.generate_nudges(analysis)

        assert ids(nudges) == ["nudge-frequency-1"]
        assert nudges[0].action_label == "Log now"
        assert nudges[0].action_type == ActionType.LOG

    def test_mild_timing_drift(self, policy):
        analysis = make_analysis(65, DriftLevel.MILD, issues=(IndicatorCategory.TIMING,))

        nudges = policy.generate_nudges(analysis)

        assert ids(nudges) == ["nudge-timing-1"]
        assert nudges[0].action_type == ActionType.ADJUST

    def test_mild_frequency_and_timing_sorted_by_priority(self, policy):
        analysis = make_analysis(
            60, DriftLevel.MILD,
            issues=(IndicatorCategory.FREQUENCY, IndicatorCategory.TIMING),
        )

        assert ids(policy.generate_nudges(analysis)) == ["nudge-frequency-1", "nudge-timing-1"]

    def test_mild_without_frequency_or_timing_issue(self, policy):
        analysis = make_analysis(60, DriftLevel.MILD, issues=(IndicatorCategory.VARIETY,))

        assert policy.generate_nudges(analysis) == []

    def test_moderate_drift(self, policy):
        nudges = policy.generate_nudges(make_analysis(40, DriftLevel.MODERATE))

        assert ids(nudges) == ["nudge-support-1", "nudge-steps-1"]
        assert nudges[0].tone == NudgeTone.UNDERSTANDING

    def test_significant_stable(self, policy):
        nudges = policy.generate_nudges(make_analysis(20, DriftLevel.SIGNIFICANT))

        assert ids(nudges) == ["nudge-reduced-1"]

    def test_significant_improving(self, policy):
        analysis = make_analysis(20, DriftLevel.SIGNIFICANT, trend=TrendDirection.IMPROVING)

        nudges = policy.generate_nudges(analysis)

        # Priority 1, 1, 2; ties keep rule order
        assert ids(nudges) == ["nudge-reduced-1", "nudge-welcome-1", "nudge-improving-1"]

    def test_improving_moderate(self, policy):
        analysis = make_analysis(45, DriftLevel.MODERATE, trend=TrendDirection.IMPROVING)

        assert ids(policy.generate_nudges(analysis)) == [
            "nudge-improving-1", "nudge-support-1", "nudge-steps-1",
        ]

    @pytest.mark.parametrize("level,score", [
        (DriftLevel.NONE, 95),
        (DriftLevel.MILD, 55),
        (DriftLevel.MODERATE, 35),
        (DriftLevel.SIGNIFICANT, 10),
    ])
    @pytest.mark.parametrize("trend", list(TrendDirection))
    def test_output_is_sorted_and_small(self, policy, level, score, trend):
        analysis = make_analysis(score, level, trend=trend, issues=tuple(IndicatorCategory))

        nudges = policy.generate_nudges(analysis)

        priorities = [n.priority for n in nudges]
        assert priorities == sorted(priorities)
        assert len(nudges) <= 4


# =============================================================================
# LANGUAGES AND CATALOGS
# =============================================================================

class TestCatalog:

    def test_unknown_language_falls_back_to_english(self, policy):
        analysis = make_analysis(20, DriftLevel.SIGNIFICANT)

        assert policy.generate_nudges(analysis, language="fr") == policy.generate_nudges(analysis)

    def test_custom_catalog(self):
        short = dict(ENGLISH_NUDGES)
        short["reduced_plan"] = NudgeTemplate(
            type=NudgeType.SUPPORT,
            tone=NudgeTone.UNDERSTANDING,
            title="Fewer tasks",
            message="Fewer tasks for now.",
            emoji="🌱",
            priority=1,
        )
        policy = NudgePolicy(catalog={"en": ENGLISH_NUDGES, "xx": short})

        nudges = policy.generate_nudges(make_analysis(20, DriftLevel.SIGNIFICANT), language="xx")

        assert nudges[0].message == "Fewer tasks for now."

    def test_catalog_without_english_is_rejected(self):
        with pytest.raises(ValueError):
            NudgePolicy(catalog={"es": ENGLISH_NUDGES})

    def test_templates_are_immutable(self):
        with pytest.raises(TypeError):
            ENGLISH_NUDGES["high_engagement"] = None
        assert isinstance(ENGLISH_NUDGES, MappingProxyType)


# =============================================================================
# SERVER VARIANT
# =============================================================================

class TestServerNudge:

    @pytest.mark.parametrize("level,trend,category", [
        (DriftLevel.NONE, TrendDirection.IMPROVING, "celebration"),
        (DriftLevel.NONE, TrendDirection.STABLE, "encouragement"),
        (DriftLevel.MILD, TrendDirection.IMPROVING, "encouragement"),
        (DriftLevel.MILD, TrendDirection.DECLINING, "encouragement"),
        (DriftLevel.MODERATE, TrendDirection.STABLE, "gentle_reminder"),
        (DriftLevel.SIGNIFICANT, TrendDirection.IMPROVING, "supportive"),
    ])
    def test_category_mapping(self, level, trend, category):
        assert NudgePolicy.server_category(level, trend) == category

    @pytest.mark.parametrize("level,tone", [
        (DriftLevel.NONE, "warm"),
        (DriftLevel.MODERATE, "gentle"),
        (DriftLevel.SIGNIFICANT, "understanding"),
    ])
    def test_tone_follows_category(self, policy, level, tone):
        assert policy.select_server_nudge(live_result(level)).tone == tone

    def test_celebration_tone(self, policy):
        nudge = policy.select_server_nudge(live_result(DriftLevel.NONE, TrendDirection.IMPROVING))

        assert nudge.type == "celebration"
        assert nudge.tone == "celebratory"

    def test_deterministic_pick(self, policy):
        nudge = policy.select_server_nudge(live_result(DriftLevel.NONE))

        assert nudge.message == "You're doing a wonderful job staying consistent. Every small step matters!"
        assert nudge.language == "en"

    def test_spanish_pool(self, policy):
        nudge = policy.select_server_nudge(live_result(DriftLevel.MODERATE), language="es")

        assert nudge.language == "es"
        assert nudge.message == DEFAULT_SERVER_TEMPLATES["gentle_reminder"]["es"][0]

    def test_unsupported_language_uses_english(self, policy):
        nudge = policy.select_server_nudge(live_result(DriftLevel.SIGNIFICANT), language="fr")

        assert nudge.language == "en"
        assert nudge.message in DEFAULT_SERVER_TEMPLATES["supportive"]["en"]

    def test_message_always_from_pool(self):
        policy = NudgePolicy()

        for _ in range(20):
            nudge = policy.select_server_nudge(live_result(DriftLevel.MODERATE), language="hi")
            assert nudge.message in DEFAULT_SERVER_TEMPLATES["gentle_reminder"]["hi"]

    def test_recommendation_message(self):
        assert "reducing daily tasks" in NudgePolicy.recommendation_message("en")
        assert NudgePolicy.recommendation_message("de") == NudgePolicy.recommendation_message("en")
        assert NudgePolicy.recommendation_message("es") != NudgePolicy.recommendation_message("en")


def test_nudge_styling():
    assert get_nudge_styling(NudgeTone.CELEBRATORY) == NUDGE_TONE_STYLES[NudgeTone.CELEBRATORY]
    assert get_nudge_styling(None) == DEFAULT_TONE_STYLE
    assert set(get_nudge_styling(NudgeTone.WARM)) == {"bgClass", "borderClass", "iconClass"}
