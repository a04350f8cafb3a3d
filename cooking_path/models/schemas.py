"""
Pydantic Schemas (Data Transfer Objects)

These schemas define the structure of data flowing in and out of the API,
and of the schedule proposals returned by Claude.

Naming Convention:
- *Input / *Request: Data received from clients
- *Response: Data returned to clients
- *Proposal: Untrusted structured output from Claude

The domain entities (models/entities.py) stay free of validation rules;
these schemas check the request at the API boundary and convert it.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from cooking_path.models.entities import (
    CookingSchedule,
    CookingStep,
    Difficulty,
    Recipe,
    ScheduleConfig,
    SkillLevel,
)
from cooking_path.services.timeline import format_minutes, format_step_window


# ============================================
# Recipe Schemas
# ============================================

class RecipeInput(BaseModel):
    """
    A generated recipe sent for scheduling.

    Durations and serving size are free text exactly as the recipe
    generator wrote them ("15 minutes", "Serves 4").
    """
    name: str = Field(..., min_length=1, max_length=200, description="Recipe name, unique within a request")
    ingredients: list[str] = Field(default_factory=list, description="Ingredient lines, e.g. '2 cups flour'")
    instructions: list[str] = Field(default_factory=list, description="Ordered instructions")
    prep_time: str | None = Field(None, description="e.g. '15 minutes'")
    cook_time: str | None = Field(None, description="e.g. '20 minutes'")
    cooking_time: str | None = Field(None, description="Overall time, used when cook_time is missing")
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    serving_size: str | None = Field(None, description="e.g. 'Serves 4'")

    def to_entity(self) -> Recipe:
        return Recipe(
            name=self.name,
            ingredients=tuple(self.ingredients),
            instructions=tuple(self.instructions),
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            cooking_time=self.cooking_time,
            difficulty=Difficulty(self.difficulty),
            serving_size=self.serving_size,
        )


class RecipeResponse(BaseModel):
    """Recipe as scheduled, including any serving adjustment."""
    name: str
    ingredients: list[str]
    instructions: list[str]
    prep_time: str | None
    cook_time: str | None
    cooking_time: str | None
    difficulty: str
    serving_size: str | None
    serving_adjustment: float

    @classmethod
    def from_entity(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            name=recipe.name,
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.instructions),
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            cooking_time=recipe.cooking_time,
            difficulty=recipe.difficulty.value,
            serving_size=recipe.serving_size,
            serving_adjustment=recipe.serving_adjustment,
        )


class AdjustRequest(BaseModel):
    """Preview a serving adjustment for one recipe."""
    recipe: RecipeInput
    factor: float = Field(..., gt=0, description="Serving multiplier, e.g. 0.5, 1.5, 2")


class AdjustResponse(BaseModel):
    recipe: RecipeResponse
    note: str = Field("", description="How the adjustment affects prep")


# ============================================
# Schedule Request Schemas
# ============================================

class ScheduleRequest(BaseModel):
    """
    Request to build a cooking path.

    Serving adjustments are keyed by recipe name; recipes not listed
    stay at 1x. Kitchen equipment may be a list or a comma-separated
    string ("stand mixer, air fryer").
    """
    recipes: list[RecipeInput] = Field(..., description="Recipes in the order they were selected")
    serving_adjustments: dict[str, float] = Field(default_factory=dict)
    skill_level: Literal["Beginner", "Intermediate", "Advanced"] = "Intermediate"
    preferred_serving_time: str | None = Field(None, description="Clock time such as '18:30' or '6:30 pm'")
    kitchen_equipment: list[str] = Field(default_factory=list)

    @field_validator("kitchen_equipment", mode="before")
    @classmethod
    def split_equipment(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("preferred_serving_time")
    @classmethod
    def blank_serving_time(cls, value):
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_recipe_names(self):
        names = [recipe.name for recipe in self.recipes]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Recipe names must be unique: {', '.join(duplicates)}")

        unknown = sorted(set(self.serving_adjustments) - set(names))
        if unknown:
            raise ValueError(f"Serving adjustments for unknown recipes: {', '.join(unknown)}")

        for name, factor in self.serving_adjustments.items():
            if factor <= 0:
                raise ValueError(f"Serving adjustment for {name} must be positive")
        return self

    def to_entities(self) -> list[Recipe]:
        return [recipe.to_entity() for recipe in self.recipes]

    def to_config(self) -> ScheduleConfig:
        return ScheduleConfig(
            skill_level=SkillLevel(self.skill_level),
            preferred_serving_time=self.preferred_serving_time,
            kitchen_equipment=tuple(self.kitchen_equipment),
        )


# ============================================
# Schedule Response Schemas
# ============================================

class StepResponse(BaseModel):
    """One timed step; times are minutes from the start of cooking."""
    id: str
    recipe_id: str
    recipe_name: str
    step: str
    start_time: int
    duration: int
    end_time: int
    window: str = Field(..., description="e.g. '15min → 30min'")
    type: str
    priority: str
    equipment: list[str]
    tips: str | None

    @classmethod
    def from_entity(cls, step: CookingStep) -> "StepResponse":
        return cls(
            id=step.id,
            recipe_id=step.recipe_id,
            recipe_name=step.recipe_name,
            step=step.step,
            start_time=step.start_time,
            duration=step.duration,
            end_time=step.end_time,
            window=format_step_window(step.start_time, step.duration),
            type=step.type.value,
            priority=step.priority.value,
            equipment=list(step.equipment),
            tips=step.tips,
        )


class ScheduleResponse(BaseModel):
    total_time: int
    total_time_display: str
    serving_time: str
    steps: list[StepResponse]
    recipes: list[RecipeResponse]
    efficiency_tips: list[str]
    timeline_summary: str
    source: str = Field(..., description="'claude' or 'fallback'")

    @classmethod
    def from_entity(cls, schedule: CookingSchedule) -> "ScheduleResponse":
        return cls(
            total_time=schedule.total_time,
            total_time_display=format_minutes(schedule.total_time),
            serving_time=schedule.serving_time,
            steps=[StepResponse.from_entity(step) for step in schedule.steps],
            recipes=[RecipeResponse.from_entity(recipe) for recipe in schedule.recipes],
            efficiency_tips=list(schedule.efficiency_tips),
            timeline_summary=schedule.timeline_summary,
            source=schedule.source,
        )


# ============================================
# Progress Schemas
# ============================================

class StepProgressResponse(BaseModel):
    id: str
    status: Literal["upcoming", "current", "active", "completed"]
    time_until: str = Field("", description="'in 5min', 'START NOW!', '3min remaining', 'should be done'")


class ProgressResponse(BaseModel):
    """Live progress read model for the current schedule."""
    elapsed_seconds: int
    elapsed_display: str
    is_timer_active: bool
    current_step_index: int
    current_step_id: str | None
    completed_step_ids: list[str]
    remaining_minutes: int
    remaining_display: str
    progress_percent: int
    steps: list[StepProgressResponse]


class SessionResponse(BaseModel):
    session_id: str
    schedule: ScheduleResponse
    progress: ProgressResponse


# ============================================
# Claude Proposal Schemas
# ============================================

class ProposedStep(BaseModel):
    id: str
    recipe_id: str
    recipe_name: str
    step: str
    start_time: int
    duration: int
    type: Literal["prep", "active", "passive"]
    priority: Literal["high", "medium", "low"]
    equipment: list[str] = Field(default_factory=list)
    tips: str | None = None


class ScheduleProposal(BaseModel):
    """Shape of the submit_cooking_schedule tool input."""
    total_time: int
    serving_time: str = ""
    steps: list[ProposedStep]
    efficiency_tips: list[str] = Field(default_factory=list)
    timeline_summary: str = ""
