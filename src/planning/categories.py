"""
Task Category Configuration

Default care-task categories and the load-time validation that
protects safety-related tasks.

IMPORTANT: Safety-related categories (glucose monitoring, medication)
must have identical counts in every plan mode. A configuration that
breaks this is rejected when the planner is constructed.
"""

from typing import Sequence, Tuple

from models.plan import TaskCategory


class PlanConfigurationError(ValueError):
    """Raised when task categories violate a configuration invariant."""


DEFAULT_TASK_CATEGORIES: Tuple[TaskCategory, ...] = (
    TaskCategory(
        id="glucose",
        name="Glucose Monitoring",
        is_safety_related=True,
        full_mode_count=4,
        reduced_mode_count=4,
        minimal_mode_count=4,
    ),
    TaskCategory(
        id="medication",
        name="Medication Reminders",
        is_safety_related=True,
        full_mode_count=3,
        reduced_mode_count=3,
        minimal_mode_count=3,
    ),
    TaskCategory(
        id="meals",
        name="Meal Logging",
        is_safety_related=False,
        full_mode_count=3,
        reduced_mode_count=2,
        minimal_mode_count=1,
    ),
    TaskCategory(
        id="activity",
        name="Activity Tracking",
        is_safety_related=False,
        full_mode_count=2,
        reduced_mode_count=1,
        minimal_mode_count=0,
    ),
    TaskCategory(
        id="wellness",
        name="Wellness Check-ins",
        is_safety_related=False,
        full_mode_count=2,
        reduced_mode_count=1,
        minimal_mode_count=0,
    ),
    TaskCategory(
        id="education",
        name="Health Tips",
        is_safety_related=False,
        full_mode_count=1,
        reduced_mode_count=0,
        minimal_mode_count=0,
    ),
)


def validate_task_categories(categories: Sequence[TaskCategory]) -> None:
    """
    Check every category invariant.

    Raises:
        PlanConfigurationError: on the first violation found
    """
    seen_ids = set()

    for category in categories:
        if category.id in seen_ids:
            raise PlanConfigurationError(f"Duplicate task category id: {category.id}")
        seen_ids.add(category.id)

        counts = (
            category.full_mode_count,
            category.reduced_mode_count,
            category.minimal_mode_count,
        )

        if any(count < 0 for count in counts):
            raise PlanConfigurationError(f"Negative task count in category '{category.id}'")

        if category.is_safety_related and len(set(counts)) != 1:
            raise PlanConfigurationError(
                f"Safety-related category '{category.id}' must keep the same count "
                f"in every mode (got full={counts[0]}, reduced={counts[1]}, minimal={counts[2]})"
            )

        if not counts[0] >= counts[1] >= counts[2]:
            raise PlanConfigurationError(
                f"Category '{category.id}' counts must not increase as the plan lightens"
            )
