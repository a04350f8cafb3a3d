"""
Schedule Service - builds the coordinated cooking timeline.

Two planners can produce a schedule:
- ClaudeSchedulePlanner (services/claude.py) asks Claude for a proposal
- FallbackSchedulePlanner runs the built-in stagger algorithm below

A Claude proposal is untrusted: it is checked against the timeline
invariants and replaced by the built-in schedule if the call fails or
the proposal is invalid.

The built-in algorithm:
1. Clamp each recipe's prep to 5-15 min and cook to 10-30 min
2. Start recipe i at i * 15 min (prep), cook straight after its prep
3. With a clock serving time, shift every recipe so its cook step
   ends exactly at that time instead
4. Sort by start time (stable: recipe order, then prep before cook)
5. Flag cook steps of different recipes that need the same equipment
   at the same time
"""

import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Optional, Protocol

from cooking_path.errors import (
    EmptySelection,
    InfeasibleSchedule,
    ScheduleValidationError,
    UnparsableDuration,
)
from cooking_path.models.entities import (
    CookingSchedule,
    CookingStep,
    Priority,
    Recipe,
    ScheduleConfig,
    SkillLevel,
    StepType,
)
from cooking_path.services.quantities import parse_minutes
from cooking_path.services.servings import describe_adjustment
from cooking_path.services.timeline import format_minutes

logger = logging.getLogger(__name__)

STAGGER_MINUTES = 15

DEFAULT_PREP_MINUTES = 10
DEFAULT_COOK_MINUTES = 20
PREP_RANGE = (5, 15)
COOK_RANGE = (10, 30)

DEFAULT_SERVING_TIME = "Ready when cooking is complete"

PREP_EQUIPMENT = ("cutting board", "knife", "mixing bowls")

BAKING_LANGUAGE = re.compile(r"\b(bak(e|ed|es|ing)|roast\w*|oven|broil\w*)\b", re.IGNORECASE)
BOILING_LANGUAGE = re.compile(r"\b(pasta|noodles?|spaghetti|boil\w*|simmer\w*|soup|stew)\b", re.IGNORECASE)
STIR_FRY_LANGUAGE = re.compile(r"\bstir[- ]?fr(y|ied|ying)\b", re.IGNORECASE)

# "18:30", "6:30 pm", "6:30PM", "6:30 p.m."
CLOCK_TIME = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(?:([ap])\.?\s*m\.?)?\s*$", re.IGNORECASE)

SKILL_TIPS = {
    SkillLevel.BEGINNER: "Read each step all the way through before starting it and set a timer for every cook step",
    SkillLevel.INTERMEDIATE: "Use passive cooking time to get ahead on the next dish's prep",
    SkillLevel.ADVANCED: "Overlap prep for the next dish with active cooking when the pan can be left for a minute",
}


class SchedulePlanner(Protocol):
    """Anything that can propose a schedule for a set of recipes."""

    def propose(self, recipes: list[Recipe], config: ScheduleConfig) -> CookingSchedule:
        ...


# ============================================
# Durations and serving time
# ============================================

def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(value, high))


def _phase_minutes(text: Optional[str], default: int, bounds: tuple[int, int], recipe: Recipe, phase: str) -> int:
    try:
        minutes = parse_minutes(text)
    except UnparsableDuration as e:
        logger.info(f"{recipe.name}: {e}, assuming {default} minutes of {phase}")
        minutes = default
    return _clamp(minutes, bounds)


def phase_durations(recipe: Recipe) -> tuple[int, int]:
    """(prep, cook) minutes used for scheduling a recipe."""
    prep = _phase_minutes(recipe.prep_time, DEFAULT_PREP_MINUTES, PREP_RANGE, recipe, "prep")
    cook = _phase_minutes(
        recipe.cook_time or recipe.cooking_time, DEFAULT_COOK_MINUTES, COOK_RANGE, recipe, "cooking"
    )
    return prep, cook


def parse_serving_time(text: Optional[str], now: datetime) -> Optional[int]:
    """
    Minutes from `now` until a clock serving time.

    Returns None when the text is not a clock time ("ASAP", "dinner"),
    in which case it is only used as a label. A time that has already
    passed today gives a negative offset; it is not moved to tomorrow.
    """
    if not text:
        return None

    match = CLOCK_TIME.match(text)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").lower()
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "p" else 0)
    if hour > 23 or minute > 59:
        return None

    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return int((target - now).total_seconds() // 60)


def check_serving_time(recipes: list[Recipe], config: ScheduleConfig, now: datetime) -> Optional[int]:
    """
    Validate the preferred serving time against the longest recipe.

    Returns:
        Minutes until serving, or None if no clock time was given

    Raises:
        InfeasibleSchedule: if the longest recipe cannot finish in time
    """
    target = parse_serving_time(config.preferred_serving_time, now)
    if target is None:
        if config.preferred_serving_time:
            logger.info(f"Serving time '{config.preferred_serving_time}' is not a clock time, using it as a label")
        return None

    required = max(sum(phase_durations(recipe)) for recipe in recipes)
    if target < required:
        raise InfeasibleSchedule(
            shortfall_minutes=required - target,
            available_minutes=target,
            required_minutes=required,
        )
    return target


# ============================================
# Step generation
# ============================================

def _recipe_text(recipe: Recipe) -> str:
    return " ".join((recipe.name, *recipe.instructions))


def cook_step_type(recipe: Recipe) -> StepType:
    """Baking-type recipes cook hands-off; everything else needs attention."""
    if BAKING_LANGUAGE.search(_recipe_text(recipe)):
        return StepType.PASSIVE
    return StepType.ACTIVE


def cook_equipment(recipe: Recipe, step_type: StepType) -> tuple[str, ...]:
    """Equipment class for a recipe's cook step."""
    if step_type == StepType.PASSIVE:
        return ("oven", "baking dish")

    text = _recipe_text(recipe)
    if BOILING_LANGUAGE.search(text):
        return ("large pot", "strainer")
    if STIR_FRY_LANGUAGE.search(text):
        return ("wok", "spatula")
    return ("skillet", "spatula")


def _recipe_steps(index: int, recipe: Recipe, start: int, prep: int, cook: int) -> list[CookingStep]:
    recipe_id = f"recipe-{index}"
    step_type = cook_step_type(recipe)

    prep_step = CookingStep(
        id=f"prep-{index}",
        recipe_id=recipe_id,
        recipe_name=recipe.name,
        step=f"Prepare ingredients for {recipe.name}",
        start_time=start,
        duration=prep,
        type=StepType.PREP,
        priority=Priority.MEDIUM,
        equipment=PREP_EQUIPMENT,
        tips=f"Organize all ingredients before starting to cook {recipe.name}",
    )
    cook_step = CookingStep(
        id=f"cook-{index}",
        recipe_id=recipe_id,
        recipe_name=recipe.name,
        step=f"{'Bake' if step_type == StepType.PASSIVE else 'Cook'} {recipe.name}",
        start_time=start + prep,
        duration=cook,
        type=step_type,
        priority=Priority.HIGH,
        equipment=cook_equipment(recipe, step_type),
        tips=(
            f"Hands-off time: check on {recipe.name} near the end"
            if step_type == StepType.PASSIVE
            else f"Monitor {recipe.name} closely during cooking for best results"
        ),
    )
    return [prep_step, cook_step]


def flag_equipment_conflicts(steps: list[CookingStep]) -> tuple[list[CookingStep], list[str]]:
    """
    Mark cook steps of different recipes that need the same equipment
    at overlapping times.

    Steps are never moved; conflicting steps become high priority and
    get a tip naming the other recipe.

    Returns:
        (steps in the same order, one efficiency tip per conflict)
    """
    cooking = [s for s in steps if s.type != StepType.PREP]
    notes: dict[str, list[str]] = {}
    tips = []

    for i, first in enumerate(cooking):
        for second in cooking[i + 1:]:
            if first.recipe_id == second.recipe_id:
                continue
            if not (first.start_time < second.end_time and second.start_time < first.end_time):
                continue
            shared = [item for item in first.equipment if item in second.equipment]
            if not shared:
                continue

            equipment = shared[0]
            overlap_start = max(first.start_time, second.start_time)
            notes.setdefault(first.id, []).append(f"shares the {equipment} with {second.recipe_name}")
            notes.setdefault(second.id, []).append(f"shares the {equipment} with {first.recipe_name}")
            tips.append(
                f"{first.recipe_name} and {second.recipe_name} both need the {equipment} "
                f"from {format_minutes(overlap_start)} - use a second one or cook them back to back"
            )

    if not notes:
        return steps, []

    flagged = []
    for step in steps:
        if step.id in notes:
            warning = "Heads up: " + ", ".join(notes[step.id]) + "."
            step = replace(
                step,
                priority=Priority.HIGH,
                tips=f"{step.tips} {warning}" if step.tips else warning,
            )
        flagged.append(step)
    return flagged, tips


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def efficiency_tips(recipes: list[Recipe], config: ScheduleConfig) -> list[str]:
    tips = [
        "Prepare all ingredients before starting any cooking",
        "Use multiple burners to cook dishes simultaneously",
        "Clean as you go to maintain an organized workspace",
        "Start with dishes that take the longest to cook",
        f"Coordinate {_plural(len(recipes), 'recipe')} for optimal timing",
        SKILL_TIPS[config.skill_level],
    ]
    if config.kitchen_equipment:
        tips.append(f"Put your {', '.join(config.kitchen_equipment)} to work to speed up prep")
    for recipe in recipes:
        note = describe_adjustment(recipe)
        if note:
            tips.append(f"Serving change - {note}")
    return tips


def timeline_summary(recipes: list[Recipe], config: ScheduleConfig) -> str:
    return (
        f"Smart cooking schedule for {_plural(len(recipes), 'recipe')}. "
        "We'll stagger preparation and cooking times to minimize kitchen chaos and ensure "
        "everything finishes around the same time. "
        f"This {config.skill_level.value.lower()}-friendly approach balances efficiency with manageable timing."
    )


def synthesize(
    recipes: list[Recipe],
    config: ScheduleConfig,
    now: Optional[datetime] = None,
) -> CookingSchedule:
    """
    Deterministic stagger schedule.

    Raises:
        EmptySelection: if no recipes are given
        InfeasibleSchedule: if a clock serving time is too close
    """
    if not recipes:
        raise EmptySelection()

    now = now or datetime.now()
    target = check_serving_time(recipes, config, now)
    durations = [phase_durations(recipe) for recipe in recipes]

    steps = []
    for index, (recipe, (prep, cook)) in enumerate(zip(recipes, durations)):
        if target is None:
            start = index * STAGGER_MINUTES
        else:
            # Everything finishes together at the serving time
            start = target - (prep + cook)
        steps.extend(_recipe_steps(index, recipe, start, prep, cook))

    steps.sort(key=lambda s: s.start_time)
    steps, conflict_tips = flag_equipment_conflicts(steps)

    schedule = CookingSchedule(
        total_time=max(step.end_time for step in steps),
        serving_time=config.preferred_serving_time or DEFAULT_SERVING_TIME,
        steps=tuple(steps),
        recipes=tuple(recipes),
        efficiency_tips=tuple(efficiency_tips(recipes, config) + conflict_tips),
        timeline_summary=timeline_summary(recipes, config),
        source="fallback",
    )
    logger.info(
        f"Built fallback schedule: {_plural(len(steps), 'step')}, {format_minutes(schedule.total_time)} total"
    )
    return schedule


class FallbackSchedulePlanner:
    """Planner backed by the built-in stagger algorithm."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now

    def propose(self, recipes: list[Recipe], config: ScheduleConfig) -> CookingSchedule:
        return synthesize(recipes, config, now=self.now)


# ============================================
# Proposal validation and selection
# ============================================

def validate_schedule(schedule: CookingSchedule, recipes: list[Recipe]) -> None:
    """
    Check a schedule against the timeline invariants.

    Every selected recipe must have steps, and a recipe's prep must be
    finished before its first cook step starts.

    Raises:
        ScheduleValidationError: listing every problem found
    """
    problems = []
    steps = schedule.steps

    if not steps:
        raise ScheduleValidationError(["schedule has no steps"])

    names = {recipe.name for recipe in recipes}
    seen_ids = set()
    previous_start = None

    for step in steps:
        if step.id in seen_ids:
            problems.append(f"duplicate step id '{step.id}'")
        seen_ids.add(step.id)

        if step.recipe_name not in names:
            problems.append(f"step '{step.id}' belongs to unknown recipe '{step.recipe_name}'")
        if step.start_time < 0:
            problems.append(f"step '{step.id}' starts before the schedule ({step.start_time})")
        if step.duration <= 0:
            problems.append(f"step '{step.id}' has non-positive duration ({step.duration})")
        if previous_start is not None and step.start_time < previous_start:
            problems.append(f"step '{step.id}' is out of order (starts at {step.start_time})")
        previous_start = step.start_time

    latest_end = max(step.end_time for step in steps)
    if schedule.total_time != latest_end:
        problems.append(f"total time {schedule.total_time} does not match last step end {latest_end}")

    for recipe in recipes:
        recipe_steps = [step for step in steps if step.recipe_name == recipe.name]
        if not recipe_steps:
            problems.append(f"recipe '{recipe.name}' has no steps")
            continue

        cook_starts = [step.start_time for step in recipe_steps if step.type != StepType.PREP]
        if not cook_starts:
            continue
        first_cook = min(cook_starts)
        for step in recipe_steps:
            if step.type == StepType.PREP and step.end_time > first_cook:
                problems.append(
                    f"prep step '{step.id}' of {recipe.name} ends at {step.end_time}, "
                    f"after cooking starts at {first_cook}"
                )

    if problems:
        raise ScheduleValidationError(problems)


def generate_schedule(
    recipes: list[Recipe],
    config: ScheduleConfig,
    planner: Optional[SchedulePlanner] = None,
    now: Optional[datetime] = None,
) -> CookingSchedule:
    """
    Produce a schedule, preferring the given planner's proposal.

    Args:
        recipes: Recipes in selection order (already serving-adjusted)
        config: Skill level, serving time and equipment
        planner: External planner to try first; None uses the fallback only
        now: Reference time for a clock serving time

    Raises:
        EmptySelection: if no recipes are given
        InfeasibleSchedule: if a clock serving time is too close
    """
    if not recipes:
        raise EmptySelection()

    now = now or datetime.now()
    check_serving_time(recipes, config, now)

    if planner is not None:
        try:
            proposal = planner.propose(recipes, config)
            validate_schedule(proposal, recipes)
        except ScheduleValidationError as e:
            logger.warning(f"Rejected schedule proposal, using fallback: {e}")
        except Exception as e:
            logger.warning(f"Schedule proposal failed, using fallback: {e}")
        else:
            steps, conflict_tips = flag_equipment_conflicts(list(proposal.steps))
            return replace(
                proposal,
                steps=tuple(steps),
                efficiency_tips=proposal.efficiency_tips + tuple(conflict_tips),
            )

    return synthesize(recipes, config, now=now)
