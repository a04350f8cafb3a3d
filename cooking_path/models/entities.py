"""
Cooking Path Domain Entities

Plain dataclasses for the scheduling engine. Recipes, steps and schedules
are frozen: a schedule is built once per "generate" and replaced wholesale,
never patched. ProgressState is the only mutable entity and is owned by
the ProgressTracker.

Entity Relationships:
    CookingSchedule (1) ──┬──> (*) CookingStep ──> (1) Recipe (by recipe_id/recipe_name)
                          └──> (*) Recipe
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class StepType(str, Enum):
    """
    How much attention a step needs.

    - prep: chopping, measuring, marinating (can run in parallel)
    - active: constant attention (stirring, sauteing)
    - passive: hands-off (baking, simmering)
    """
    PREP = "prep"
    ACTIVE = "active"
    PASSIVE = "passive"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StepStatus(str, Enum):
    UPCOMING = "upcoming"
    CURRENT = "current"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Recipe:
    """
    A generated recipe as handed to the scheduler.

    Durations and serving size are free text ("15 minutes", "Serves 4")
    exactly as the recipe generator produced them. `serving_adjustment`
    is 1 for an original recipe and the applied factor for an adjusted copy.
    """
    name: str
    ingredients: tuple[str, ...] = ()
    instructions: tuple[str, ...] = ()
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    cooking_time: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    serving_size: Optional[str] = None
    serving_adjustment: float = 1

    @property
    def is_adjusted(self) -> bool:
        return self.serving_adjustment != 1


# An adjusted recipe is a Recipe carrying serving_adjustment != 1
AdjustedRecipe = Recipe


@dataclass(frozen=True)
class ScheduleConfig:
    """Kitchen setup for one schedule generation."""
    skill_level: SkillLevel = SkillLevel.INTERMEDIATE
    preferred_serving_time: Optional[str] = None
    kitchen_equipment: tuple[str, ...] = ()


@dataclass(frozen=True)
class CookingStep:
    """One timed step of one recipe. Times are minutes from schedule start."""
    id: str
    recipe_id: str
    recipe_name: str
    step: str
    start_time: int
    duration: int
    type: StepType
    priority: Priority
    equipment: tuple[str, ...] = ()
    tips: Optional[str] = None

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration


@dataclass(frozen=True)
class CookingSchedule:
    """
    A complete coordinated timeline for the selected recipes.

    `source` records which planner produced the schedule
    ("claude" or "fallback").
    """
    total_time: int
    serving_time: str
    steps: tuple[CookingStep, ...]
    recipes: tuple[Recipe, ...]
    efficiency_tips: tuple[str, ...] = ()
    timeline_summary: str = ""
    source: str = "fallback"

    def get_step(self, step_id: str) -> Optional[CookingStep]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


@dataclass
class ProgressState:
    """Live progress through a schedule. Session-only, never persisted."""
    elapsed_seconds: int = 0
    is_timer_active: bool = False
    completed_step_ids: set[str] = field(default_factory=set)
    current_step_index: int = 0

    @property
    def elapsed_minutes(self) -> int:
        return self.elapsed_seconds // 60
