"""
Nudge Models

Short, tone-matched motivational messages. Nudges are generated
fresh per analysis; the nudge store may keep a read/unread copy.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class NudgeType(Enum):
    ENCOURAGEMENT = "encouragement"
    REMINDER = "reminder"
    CELEBRATION = "celebration"
    SUPPORT = "support"
    TIP = "tip"


class NudgeTone(Enum):
    """Emotional tone; drives visual styling in the presentation layer."""
    WARM = "warm"
    GENTLE = "gentle"
    CELEBRATORY = "celebratory"
    UNDERSTANDING = "understanding"


class ActionType(Enum):
    LOG = "log"
    VIEW = "view"
    ADJUST = "adjust"
    DISMISS = "dismiss"


@dataclass(frozen=True)
class NudgeTemplate:
    """
    Fixed nudge content. Only `message` may contain a placeholder
    such as {percent}.
    """
    type: NudgeType
    tone: NudgeTone
    title: str
    message: str
    emoji: str
    priority: int  # 1-5, lower = more urgent
    action_label: Optional[str] = None
    action_type: Optional[ActionType] = None


@dataclass(frozen=True)
class Nudge:
    """A nudge selected for the current analysis."""
    id: str
    type: NudgeType
    tone: NudgeTone
    title: str
    message: str
    emoji: str
    priority: int
    action_label: Optional[str] = None
    action_type: Optional[ActionType] = None

    @classmethod
    def from_template(cls, nudge_id: str, template: NudgeTemplate, **substitutions) -> "Nudge":
        message = template.message
        for key, value in substitutions.items():
            message = message.replace("{" + key + "}", str(value))
        return cls(
            id=nudge_id,
            type=template.type,
            tone=template.tone,
            title=template.title,
            message=message,
            emoji=template.emoji,
            priority=template.priority,
            action_label=template.action_label,
            action_type=template.action_type,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type.value,
            "tone": self.tone.value,
            "title": self.title,
            "message": self.message,
            "emoji": self.emoji,
            "priority": self.priority,
        }
        if self.action_label:
            data["actionLabel"] = self.action_label
        if self.action_type:
            data["actionType"] = self.action_type.value
        return data


@dataclass(frozen=True)
class ServerNudge:
    """
    Single nudge chosen by the server variant.
    `type` is a message category: encouragement, gentle_reminder,
    supportive or celebration.
    """
    message: str
    type: str
    tone: str
    language: str

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "type": self.type,
            "tone": self.tone,
            "language": self.language,
        }


@dataclass
class StoredNudge:
    """Persisted nudge as returned by the nudge store."""
    id: str
    user_id: str
    message: str
    nudge_type: str
    tone: str
    language: str
    is_read: bool
    sent_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "nudge_type": self.nudge_type,
            "tone": self.tone,
            "language": self.language,
            "is_read": self.is_read,
            "sent_at": self.sent_at.isoformat(),
        }
