"""
Models Package - Domain Entities

Dataclasses for recipes, schedules and progress. API schemas live in
cooking_path.models.schemas.
"""

from cooking_path.models.entities import (
    AdjustedRecipe,
    CookingSchedule,
    CookingStep,
    Difficulty,
    Priority,
    ProgressState,
    Recipe,
    ScheduleConfig,
    SkillLevel,
    StepStatus,
    StepType,
)

__all__ = [
    "AdjustedRecipe",
    "CookingSchedule",
    "CookingStep",
    "Difficulty",
    "Priority",
    "ProgressState",
    "Recipe",
    "ScheduleConfig",
    "SkillLevel",
    "StepStatus",
    "StepType",
]
