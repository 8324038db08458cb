# Nudges Package - Tone-Matched Motivational Messages
from .policy import NudgePolicy, get_nudge_styling
from .templates import (
    DEFAULT_LANGUAGE,
    DEFAULT_NUDGE_CATALOG,
    DEFAULT_SERVER_TEMPLATES,
    ENGLISH_NUDGES,
    NUDGE_TONE_STYLES,
    RECOMMENDATION_MESSAGES,
)

__all__ = [
    "NudgePolicy",
    "get_nudge_styling",
    "DEFAULT_LANGUAGE",
    "DEFAULT_NUDGE_CATALOG",
    "DEFAULT_SERVER_TEMPLATES",
    "ENGLISH_NUDGES",
    "NUDGE_TONE_STYLES",
    "RECOMMENDATION_MESSAGES",
]
