"""
Serving Service - applies serving-size multipliers to recipes.

Adjusting never touches the original recipe: a new Recipe is returned
with scaled ingredients, a recomputed serving size and, for large or
small batches, a corrected prep time. Cook time is left alone because
doneness depends on temperature, not on how much is in the pan.
"""

import logging
from dataclasses import replace
from typing import Mapping

from cooking_path.models.entities import Recipe
from cooking_path.services.quantities import (
    ceil_scaled,
    floor_scaled,
    parse_count,
    parse_minutes,
    scale_ingredient_line,
)

logger = logging.getLogger(__name__)

DEFAULT_SERVINGS = 2
DEFAULT_PREP_MINUTES = 10
MIN_REDUCED_PREP_MINUTES = 5

# Above this factor prep takes 30% longer, below the lower one 20% shorter
LARGE_BATCH_FACTOR = 2
SMALL_BATCH_FACTOR = 0.75


def adjust_prep_time(prep_time: str | None, factor: float) -> str | None:
    """Recompute the prep time string for a batch size change."""
    if factor > LARGE_BATCH_FACTOR:
        minutes = parse_minutes(prep_time, DEFAULT_PREP_MINUTES)
        return f"{minutes + ceil_scaled(minutes, 0.3)} minutes"

    if factor < SMALL_BATCH_FACTOR:
        minutes = parse_minutes(prep_time, DEFAULT_PREP_MINUTES)
        return f"{max(MIN_REDUCED_PREP_MINUTES, floor_scaled(minutes, 0.8))} minutes"

    return prep_time


def adjust_serving_size(serving_size: str | None, factor: float) -> str:
    servings = parse_count(serving_size, DEFAULT_SERVINGS)
    return f"Serves {ceil_scaled(servings, factor)}"


def adjust_recipe(recipe: Recipe, factor: float) -> Recipe:
    """
    Scale a recipe to `factor` times its servings.

    Args:
        recipe: The recipe to adjust (not modified)
        factor: Positive serving multiplier, e.g. 0.5 or 2

    Returns:
        The same recipe for factor 1, otherwise an adjusted copy
        carrying serving_adjustment=factor

    Raises:
        ValueError: if factor is not positive
    """
    if factor <= 0:
        raise ValueError(f"Serving factor must be positive, got {factor}")

    if factor == 1:
        return recipe

    adjusted = replace(
        recipe,
        ingredients=tuple(scale_ingredient_line(line, factor) for line in recipe.ingredients),
        serving_size=adjust_serving_size(recipe.serving_size, factor),
        prep_time=adjust_prep_time(recipe.prep_time, factor),
        serving_adjustment=factor,
    )
    logger.debug(f"Adjusted {recipe.name} by {factor}x: {adjusted.serving_size}, prep {adjusted.prep_time}")
    return adjusted


def adjust_recipes(recipes: list[Recipe], adjustments: Mapping[str, float] | None) -> list[Recipe]:
    """Apply per-recipe factors keyed by recipe name; unlisted recipes stay at 1x."""
    adjustments = adjustments or {}
    return [adjust_recipe(recipe, adjustments.get(recipe.name, 1)) for recipe in recipes]


def describe_adjustment(recipe: Recipe) -> str:
    """
    One-line note on how a serving change affects the recipe.

    Returns an empty string for unadjusted recipes.
    """
    factor = recipe.serving_adjustment
    if factor == 1:
        return ""

    note = f"{recipe.name}: {factor:g}x servings"
    if factor > 1.5:
        note += " (+extra prep time)"
    elif factor < 0.8:
        note += " (reduced prep time)"
    return note
