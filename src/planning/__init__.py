# Planning Package - Adaptive Care Plans
from .categories import DEFAULT_TASK_CATEGORIES, PlanConfigurationError, validate_task_categories
from .state_machine import (
    AdaptivePlanner,
    determine_plan_mode,
    export_plan,
    get_plan_mode_info,
    should_restore_plan,
    task_count_for_mode,
)

__all__ = [
    "DEFAULT_TASK_CATEGORIES",
    "PlanConfigurationError",
    "validate_task_categories",
    "AdaptivePlanner",
    "determine_plan_mode",
    "export_plan",
    "get_plan_mode_info",
    "should_restore_plan",
    "task_count_for_mode",
]
