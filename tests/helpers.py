from cooking_path.models.entities import CookingSchedule, CookingStep, Priority, Recipe, StepType


def make_step(step_id, start, duration, recipe="Test Recipe", step_type=StepType.PREP, equipment=()):
    return CookingStep(
        id=step_id,
        recipe_id=f"recipe-{recipe}",
        recipe_name=recipe,
        step=f"Do {step_id}",
        start_time=start,
        duration=duration,
        type=step_type,
        priority=Priority.MEDIUM,
        equipment=equipment,
    )


def make_schedule(*steps, total_time=None, recipes=None):
    return CookingSchedule(
        total_time=max(s.end_time for s in steps) if total_time is None else total_time,
        serving_time="",
        steps=tuple(steps),
        recipes=tuple(recipes or (Recipe(name="Test Recipe"),)),
    )
