"""
Adaptive Plan Models

Task categories and the plan produced for the current drift level.
Safety-related categories (glucose monitoring, medication) are never
reduced in any mode.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional


class PlanMode(Enum):
    """Task-load tiers, from heaviest to lightest."""
    FULL = "full"
    REDUCED = "reduced"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class TaskCategory:
    """
    Static task configuration.
    If is_safety_related, all three mode counts must be equal.
    """
    id: str
    name: str
    is_safety_related: bool
    full_mode_count: int
    reduced_mode_count: int
    minimal_mode_count: int

    def count_for_mode(self, mode: PlanMode) -> int:
        if mode == PlanMode.MINIMAL:
            return self.minimal_mode_count
        if mode == PlanMode.REDUCED:
            return self.reduced_mode_count
        return self.full_mode_count

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "isSafetyRelated": self.is_safety_related,
            "fullModeCount": self.full_mode_count,
            "reducedModeCount": self.reduced_mode_count,
            "minimalModeCount": self.minimal_mode_count,
        }


@dataclass(frozen=True)
class PlanModeInfo:
    """Display metadata for a plan mode."""
    label: str
    description: str
    color: str
    icon: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "description": self.description,
            "color": self.color,
            "icon": self.icon,
        }


@dataclass
class AdaptivePlan:
    """
    Plan evaluated for one drift analysis.

    auto_restore_at is a scheduling hint for the caller, set only
    when current_mode is not FULL.
    """
    current_mode: PlanMode
    previous_mode: PlanMode
    mode_changed_at: datetime
    task_categories: List[TaskCategory]
    total_tasks: int
    active_tasks: int
    reduction_percent: int
    disclaimer: str
    auto_restore_at: Optional[datetime] = None

    def active_count(self, category: TaskCategory) -> int:
        return category.count_for_mode(self.current_mode)

    def to_dict(self) -> dict:
        return {
            "currentMode": self.current_mode.value,
            "previousMode": self.previous_mode.value,
            "modeChangedAt": self.mode_changed_at.isoformat(),
            "autoRestoreAt": self.auto_restore_at.isoformat() if self.auto_restore_at else None,
            "taskCategories": [c.to_dict() for c in self.task_categories],
            "totalTasks": self.total_tasks,
            "activeTasks": self.active_tasks,
            "reductionPercent": self.reduction_percent,
            "disclaimer": self.disclaimer,
        }

    def to_state(self) -> "PlanState":
        return PlanState(current_mode=self.current_mode, mode_changed_at=self.mode_changed_at)


@dataclass
class PlanState:
    """
    Persisted plan bookkeeping between evaluations.
    Enough to carry mode_changed_at forward; counts are always recomputed.
    """
    current_mode: PlanMode
    mode_changed_at: datetime

    def to_dict(self) -> dict:
        return {
            "currentMode": self.current_mode.value,
            "modeChangedAt": self.mode_changed_at.isoformat(),
        }
