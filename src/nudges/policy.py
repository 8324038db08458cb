"""
Nudge Selection Policy

Maps a drift analysis to a short list of tone-matched nudges.

DESIGN PRINCIPLES:
1. Rules are evaluated independently - every matching rule fires
2. Output is sorted by priority (stable, so ties keep template order)
3. Templates are immutable configuration passed in at construction
4. The only randomness (server message choice) goes through pick_one

USAGE:
    policy = NudgePolicy()
    nudges = policy.generate_nudges(analysis, language="en")

    # Deterministic server selection in tests
    policy = NudgePolicy(pick_one=lambda options: options[0])
"""

import logging
import random
from typing import Callable, List, Mapping, Optional, Sequence

from models.drift import DriftAnalysis, DriftLevel, IndicatorCategory, LiveDriftResult, TrendDirection
from models.nudge import Nudge, NudgeTemplate, NudgeTone, ServerNudge

from .templates import (
    DEFAULT_LANGUAGE,
    DEFAULT_NUDGE_CATALOG,
    DEFAULT_SERVER_TEMPLATES,
    DEFAULT_TONE_STYLE,
    NUDGE_TONE_STYLES,
    RECOMMENDATION_MESSAGES,
)

logger = logging.getLogger(__name__)


class NudgePolicy:
    """Rule-based nudge generation plus the server's single-nudge pick."""

    # Score at or above which a no-drift analysis earns a celebration
    CELEBRATION_MIN_SCORE = 80

    # Server message category -> tone
    SERVER_CATEGORY_TONES = {
        "celebration": NudgeTone.CELEBRATORY,
        "encouragement": NudgeTone.WARM,
        "gentle_reminder": NudgeTone.GENTLE,
        "supportive": NudgeTone.UNDERSTANDING,
    }

    def __init__(
        self,
        catalog: Mapping[str, Mapping[str, NudgeTemplate]] = DEFAULT_NUDGE_CATALOG,
        server_templates: Mapping[str, Mapping[str, Sequence[str]]] = DEFAULT_SERVER_TEMPLATES,
        pick_one: Callable[[Sequence[str]], str] = random.choice,
    ):
        if DEFAULT_LANGUAGE not in catalog:
            raise ValueError(f"Nudge catalog must include '{DEFAULT_LANGUAGE}' templates")
        self.catalog = catalog
        self.server_templates = server_templates
        self.pick_one = pick_one

    # =========================================================================
    # PER-ANALYSIS NUDGES
    # =========================================================================

    def generate_nudges(self, analysis: DriftAnalysis, language: str = DEFAULT_LANGUAGE) -> List[Nudge]:
        """
        Build the nudges for one analysis.

        Returns:
            0-4 nudges, sorted ascending by priority (1 = most urgent)
        """
        templates = self._templates_for(language)
        level = analysis.drift_level
        nudges = []

        if level == DriftLevel.NONE and analysis.overall_score >= self.CELEBRATION_MIN_SCORE:
            nudges.append(Nudge.from_template(
                "nudge-celebration-1",
                templates["high_engagement"],
                percent=analysis.overall_score,
            ))

        if analysis.trend == TrendDirection.IMPROVING and level != DriftLevel.NONE:
            nudges.append(Nudge.from_template("nudge-improving-1", templates["improving_trend"]))

        if level == DriftLevel.MILD:
            if analysis.has_issue(IndicatorCategory.FREQUENCY):
                nudges.append(Nudge.from_template("nudge-frequency-1", templates["missed_logging"]))
            if analysis.has_issue(IndicatorCategory.TIMING):
                nudges.append(Nudge.from_template("nudge-timing-1", templates["timing_shift"]))

        if level == DriftLevel.MODERATE:
            nudges.append(Nudge.from_template("nudge-support-1", templates["life_happens"]))
            nudges.append(Nudge.from_template("nudge-steps-1", templates["small_steps"]))

        if level == DriftLevel.SIGNIFICANT:
            nudges.append(Nudge.from_template("nudge-reduced-1", templates["reduced_plan"]))
            if analysis.trend == TrendDirection.IMPROVING:
                nudges.append(Nudge.from_template("nudge-welcome-1", templates["welcome_back"]))

        # sorted() is stable
        return sorted(nudges, key=lambda n: n.priority)

    def _templates_for(self, language: str) -> Mapping[str, NudgeTemplate]:
        templates = self.catalog.get(language)
        if templates is None:
            logger.debug("No nudge templates for language %r, using %s", language, DEFAULT_LANGUAGE)
            return self.catalog[DEFAULT_LANGUAGE]
        return templates

    # =========================================================================
    # SERVER VARIANT
    # =========================================================================

    @staticmethod
    def server_category(drift_level: DriftLevel, trend: TrendDirection) -> str:
        """Message category for a raw-log analysis result."""
        if trend == TrendDirection.IMPROVING and drift_level == DriftLevel.NONE:
            return "celebration"
        if drift_level in (DriftLevel.NONE, DriftLevel.MILD):
            return "encouragement"
        if drift_level == DriftLevel.MODERATE:
            return "gentle_reminder"
        return "supportive"

    def select_server_nudge(self, result: LiveDriftResult, language: str = DEFAULT_LANGUAGE) -> ServerNudge:
        """Pick one message from the matching category's language pool."""
        category = self.server_category(result.drift_level, result.trend)
        pools = self.server_templates[category]

        if language not in pools:
            language = DEFAULT_LANGUAGE

        return ServerNudge(
            message=self.pick_one(pools[language]),
            type=category,
            tone=self.SERVER_CATEGORY_TONES[category].value,
            language=language,
        )

    @staticmethod
    def recommendation_message(language: str = DEFAULT_LANGUAGE) -> str:
        """Localized reduced-plan suggestion."""
        return RECOMMENDATION_MESSAGES.get(language, RECOMMENDATION_MESSAGES[DEFAULT_LANGUAGE])


def get_nudge_styling(tone: Optional[NudgeTone]) -> Mapping[str, str]:
    """Presentation classes for a nudge tone."""
    return NUDGE_TONE_STYLES.get(tone, DEFAULT_TONE_STYLE)
