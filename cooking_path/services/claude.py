"""
Claude Schedule Planner

Asks Claude to coordinate several recipes into one cooking timeline.

How it works:
- The recipes, serving adjustments and kitchen setup are formatted into
  a single prompt
- Claude must answer through the submit_cooking_schedule tool, so the
  reply arrives as structured JSON matching the tool's input schema
- The JSON is parsed into a CookingSchedule; anything that doesn't fit
  raises ScheduleValidationError

The proposal is not trusted beyond that: generate_schedule() in
services/scheduler.py checks the timeline invariants and falls back to
the built-in planner on any failure.
"""

import logging

import anthropic
from pydantic import ValidationError

from cooking_path.config import get_settings
from cooking_path.errors import ScheduleValidationError
from cooking_path.models.entities import (
    CookingSchedule,
    CookingStep,
    Priority,
    Recipe,
    ScheduleConfig,
    StepType,
)
from cooking_path.models.schemas import ScheduleProposal
from cooking_path.services.servings import describe_adjustment

logger = logging.getLogger(__name__)


class ClaudeSchedulePlanner:
    """
    Schedule planner backed by the Claude API.

    Attributes:
        client: Anthropic API client
        model: Claude model name
        max_tokens: Response token limit
    """

    SYSTEM_PROMPT = """You are a professional kitchen scheduler creating an optimized cooking timeline for multiple recipes.

Create a schedule that:
1. Minimizes total cooking time through parallel preparation
2. Reduces kitchen downtime (start marinating while other prep continues)
3. Coordinates the dishes so they finish together or in a logical sequence
4. Respects equipment limits (usually one oven and limited stovetop space)
5. Matches the cook's skill level
6. Accounts for serving adjustments: bigger batches need more prep, smaller ones less
7. Uses realistic timing: a recipe with prep 15min + cook 20min is not a 4 hour job
8. Works backwards from the preferred serving time when one is given

TIMING RULES:
- start_time is whole minutes from the moment cooking begins (0 = now)
- duration is whole minutes, at least 2, most steps 5-15
- Prep must finish before that recipe's cooking starts
- Start times should be multiples of 5 minutes
- List steps in ascending start_time order
- total_time must equal the end (start_time + duration) of the last finishing step

STEP TYPES:
- "prep": chopping, measuring, marinating (can be done in parallel)
- "active": needs constant attention (stirring, sauteing)
- "passive": hands-off cooking (baking, simmering)

PRIORITY LEVELS:
- "high": critical timing, cannot be delayed
- "medium": some flexibility
- "low": whenever convenient

Use each recipe's exact name as recipe_name. Always answer by calling the submit_cooking_schedule tool.
"""

    SCHEDULE_TOOLS = [
        {
            "name": "submit_cooking_schedule",
            "description": "Submit the coordinated cooking schedule for all recipes.",
            "input_schema": {
                "type": "object",
                "properties": {
                    "total_time": {"type": "integer", "description": "Total minutes until everything is done"},
                    "serving_time": {"type": "string", "description": "When everything will be ready"},
                    "steps": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string"},
                                "recipe_id": {"type": "string"},
                                "recipe_name": {"type": "string"},
                                "step": {"type": "string"},
                                "start_time": {"type": "integer"},
                                "duration": {"type": "integer"},
                                "type": {"type": "string", "enum": ["prep", "active", "passive"]},
                                "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                                "equipment": {"type": "array", "items": {"type": "string"}},
                                "tips": {"type": "string"}
                            },
                            "required": [
                                "id", "recipe_id", "recipe_name", "step",
                                "start_time", "duration", "type", "priority"
                            ]
                        }
                    },
                    "efficiency_tips": {"type": "array", "items": {"type": "string"}},
                    "timeline_summary": {"type": "string"}
                },
                "required": ["total_time", "serving_time", "steps", "efficiency_tips", "timeline_summary"]
            }
        }
    ]

    def __init__(self, client=None):
        settings = get_settings()
        self.client = client or anthropic.Anthropic(api_key=settings.anthropic_api_key)
        self.model = settings.claude_model
        self.max_tokens = settings.claude_max_tokens

    def format_recipes_for_claude(self, recipes: list[Recipe]) -> str:
        """Format the selected recipes as prompt text."""
        blocks = []
        for index, recipe in enumerate(recipes, start=1):
            lines = [
                f"Recipe {index}: {recipe.name}",
                f"- Serving Size: {recipe.serving_size or 'Serves 2-4'}",
                f"- Prep Time: {recipe.prep_time or '10 minutes'}",
                f"- Cook Time: {recipe.cook_time or recipe.cooking_time or '?'}",
                f"- Difficulty: {recipe.difficulty.value}",
                f"- Serving Adjustment Factor: {recipe.serving_adjustment:g}x",
                f"- Key Ingredients: {', '.join(recipe.ingredients[:5])}",
                f"- Brief Instructions: {' | '.join(recipe.instructions[:3])}",
            ]
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    def build_prompt(self, recipes: list[Recipe], config: ScheduleConfig) -> str:
        adjustments = [describe_adjustment(r) for r in recipes if r.is_adjusted]
        if adjustments:
            serving_notes = "Some recipes have been adjusted for different serving sizes:\n" + "\n".join(
                f"- {note}" for note in adjustments
            )
        else:
            serving_notes = "All recipes are at their original serving sizes."

        return (
            "RECIPES TO COORDINATE:\n\n"
            f"{self.format_recipes_for_claude(recipes)}\n\n"
            "KITCHEN SETUP:\n"
            f"- Skill Level: {config.skill_level.value}\n"
            f"- Available Equipment: {', '.join(config.kitchen_equipment) or 'Standard home kitchen'}\n"
            f"- Preferred Serving Time: {config.preferred_serving_time or 'ASAP'}\n\n"
            f"SERVING SIZE CONSIDERATIONS:\n{serving_notes}"
        )

    def propose(self, recipes: list[Recipe], config: ScheduleConfig) -> CookingSchedule:
        """
        Ask Claude for a schedule.

        Raises:
            ScheduleValidationError: if the reply does not match the schema
            anthropic.APIError: on API failures
        """
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=self.SYSTEM_PROMPT,
            messages=[{"role": "user", "content": self.build_prompt(recipes, config)}],
            tools=self.SCHEDULE_TOOLS,
            tool_choice={"type": "tool", "name": "submit_cooking_schedule"},
        )

        for block in response.content:
            if block.type == "tool_use" and block.name == "submit_cooking_schedule":
                schedule = self._to_schedule(block.input, recipes)
                logger.info(f"Claude proposed {len(schedule.steps)} steps, {schedule.total_time} minutes")
                return schedule

        raise ScheduleValidationError(["Claude did not submit a schedule"])

    def _to_schedule(self, data: dict, recipes: list[Recipe]) -> CookingSchedule:
        try:
            proposal = ScheduleProposal.model_validate(data)
        except ValidationError as e:
            raise ScheduleValidationError(
                [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            )

        steps = tuple(
            CookingStep(
                id=s.id,
                recipe_id=s.recipe_id,
                recipe_name=s.recipe_name,
                step=s.step,
                start_time=s.start_time,
                duration=s.duration,
                type=StepType(s.type),
                priority=Priority(s.priority),
                equipment=tuple(s.equipment),
                tips=s.tips,
            )
            for s in proposal.steps
        )
        return CookingSchedule(
            total_time=proposal.total_time,
            serving_time=proposal.serving_time,
            steps=steps,
            recipes=tuple(recipes),
            efficiency_tips=tuple(proposal.efficiency_tips),
            timeline_summary=proposal.timeline_summary,
            source="claude",
        )
