from dataclasses import replace
from types import SimpleNamespace

import pytest

from cooking_path.errors import ScheduleValidationError
from cooking_path.models.entities import ScheduleConfig, SkillLevel, StepType
from cooking_path.services.claude import ClaudeSchedulePlanner
from cooking_path.services.scheduler import generate_schedule


class FakeMessages:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(content=self.content)


class FakeClient:
    def __init__(self, content):
        self.messages = FakeMessages(content)


def tool_reply(data):
    return [
        SimpleNamespace(type="text", text="Here is your schedule."),
        SimpleNamespace(type="tool_use", name="submit_cooking_schedule", input=data),
    ]


@pytest.fixture
def proposal_data():
    return {
        "total_time": 45,
        "serving_time": "Ready in 45 minutes",
        "steps": [
            {
                "id": "p1", "recipe_id": "r1", "recipe_name": "Lemon Chicken",
                "step": "Season the chicken", "start_time": 0, "duration": 15,
                "type": "prep", "priority": "medium", "equipment": ["cutting board"],
            },
            {
                "id": "p2", "recipe_id": "r2", "recipe_name": "Garlic Pasta",
                "step": "Chop garlic and boil water", "start_time": 5, "duration": 10,
                "type": "prep", "priority": "low",
            },
            {
                "id": "c1", "recipe_id": "r1", "recipe_name": "Lemon Chicken",
                "step": "Sear the chicken", "start_time": 15, "duration": 30,
                "type": "active", "priority": "high", "equipment": ["skillet"],
                "tips": "Don't move it for the first 3 minutes",
            },
            {
                "id": "c2", "recipe_id": "r2", "recipe_name": "Garlic Pasta",
                "step": "Boil the pasta", "start_time": 25, "duration": 20,
                "type": "passive", "priority": "high", "equipment": ["large pot"],
            },
        ],
        "efficiency_tips": ["Boil the water while the chicken sears"],
        "timeline_summary": "Chicken first, pasta joins halfway.",
    }


def test_proposal_is_parsed(pasta, chicken, config, proposal_data):
    client = FakeClient(tool_reply(proposal_data))
    planner = ClaudeSchedulePlanner(client=client)

    schedule = planner.propose([pasta, chicken], config)

    assert schedule.source == "claude"
    assert schedule.total_time == 45
    assert schedule.recipes == (pasta, chicken)
    assert [step.id for step in schedule.steps] == ["p1", "p2", "c1", "c2"]
    assert schedule.get_step("c2").type == StepType.PASSIVE
    assert schedule.get_step("c1").equipment == ("skillet",)
    assert schedule.get_step("p2").equipment == ()
    assert schedule.efficiency_tips == ("Boil the water while the chicken sears",)


def test_request_forces_the_schedule_tool(pasta, config, proposal_data):
    client = FakeClient(tool_reply(proposal_data))
    planner = ClaudeSchedulePlanner(client=client)

    planner.propose([pasta], config)

    request = client.messages.calls[0]
    assert request["tool_choice"] == {"type": "tool", "name": "submit_cooking_schedule"}
    assert request["tools"][0]["name"] == "submit_cooking_schedule"
    assert request["system"] == ClaudeSchedulePlanner.SYSTEM_PROMPT


def test_prompt_describes_recipes_and_kitchen(pasta, chicken):
    planner = ClaudeSchedulePlanner(client=FakeClient([]))
    config = ScheduleConfig(
        skill_level=SkillLevel.ADVANCED,
        preferred_serving_time="19:30",
        kitchen_equipment=("air fryer",),
    )

    prompt = planner.build_prompt([replace(pasta, serving_adjustment=2), chicken], config)

    assert "Recipe 1: Garlic Pasta" in prompt
    assert "Recipe 2: Lemon Chicken" in prompt
    assert "- Serving Adjustment Factor: 2x" in prompt
    assert "- Garlic Pasta: 2x servings (+extra prep time)" in prompt
    assert "- Skill Level: Advanced" in prompt
    assert "- Available Equipment: air fryer" in prompt
    assert "- Preferred Serving Time: 19:30" in prompt


def test_prompt_defaults(pasta, config):
    prompt = ClaudeSchedulePlanner(client=FakeClient([])).build_prompt([pasta], config)

    assert "Standard home kitchen" in prompt
    assert "Preferred Serving Time: ASAP" in prompt
    assert "All recipes are at their original serving sizes." in prompt


def test_reply_without_tool_call(pasta, config):
    client = FakeClient([SimpleNamespace(type="text", text="Sorry, I can't help with that.")])

    with pytest.raises(ScheduleValidationError, match="did not submit"):
        ClaudeSchedulePlanner(client=client).propose([pasta], config)


def test_malformed_proposal(pasta, config, proposal_data):
    proposal_data["steps"][0]["type"] = "resting"
    del proposal_data["steps"][1]["duration"]
    client = FakeClient(tool_reply(proposal_data))

    with pytest.raises(ScheduleValidationError) as exc_info:
        ClaudeSchedulePlanner(client=client).propose([pasta], config)

    assert len(exc_info.value.problems) == 2


def test_proposal_used_by_generate_schedule(pasta, chicken, config, proposal_data):
    planner = ClaudeSchedulePlanner(client=FakeClient(tool_reply(proposal_data)))

    schedule = generate_schedule([pasta, chicken], config, planner=planner)

    assert schedule.source == "claude"
    assert schedule.timeline_summary == "Chicken first, pasta joins halfway."


def test_inconsistent_proposal_falls_back(pasta, chicken, config, proposal_data):
    proposal_data["total_time"] = 240
    planner = ClaudeSchedulePlanner(client=FakeClient(tool_reply(proposal_data)))

    schedule = generate_schedule([pasta, chicken], config, planner=planner)

    assert schedule.source == "fallback"
    assert schedule.total_time == 60
