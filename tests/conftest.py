import os

# Tests never call Claude; set before cooking_path reads its settings
os.environ["AI_PLANNER_ENABLED"] = "false"
os.environ["ANTHROPIC_API_KEY"] = ""

from datetime import datetime

import pytest

from cooking_path.config import get_settings
from cooking_path.models.entities import Recipe, ScheduleConfig

get_settings.cache_clear()


@pytest.fixture
def pasta():
    return Recipe(
        name="Garlic Pasta",
        ingredients=("2 cups pasta", "1/2 tsp salt", "3 cloves garlic"),
        instructions=("Boil the pasta", "Fry the garlic in oil", "Toss together"),
        prep_time="10 minutes",
        cook_time="20 minutes",
        serving_size="Serves 4",
    )


@pytest.fixture
def chicken():
    return Recipe(
        name="Lemon Chicken",
        ingredients=("2 chicken breasts", "1 lemon"),
        instructions=("Season the chicken", "Sear in a hot pan"),
        prep_time="15 minutes",
        cook_time="30 minutes",
        serving_size="Serves 2",
    )


@pytest.fixture
def config():
    return ScheduleConfig()


@pytest.fixture
def six_pm():
    return datetime(2025, 3, 14, 18, 0)
