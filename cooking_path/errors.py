"""
Cooking Path Errors

Recoverable and surfaced failures of the scheduling engine.

Which errors reach the caller:
- InvalidQuantityToken: recovered while scaling an ingredient line
- UnparsableDuration: recovered with a default duration
- ScheduleValidationError: recovered by falling back to the built-in planner
- EmptySelection, InfeasibleSchedule: surfaced to the caller
"""


class CookingPathError(Exception):
    """Base class for all cooking path errors."""


class InvalidQuantityToken(CookingPathError):
    """A numeric or fraction token in an ingredient line cannot be scaled."""

    def __init__(self, token: str, reason: str = "malformed quantity"):
        self.token = token
        self.reason = reason
        super().__init__(f"Cannot scale quantity '{token}': {reason}")


class UnparsableDuration(CookingPathError):
    """A duration string contains no digits."""

    def __init__(self, text: str | None):
        self.text = text
        super().__init__(f"No minutes found in duration '{text}'")


class EmptySelection(CookingPathError):
    """No recipes were selected for scheduling."""

    def __init__(self):
        super().__init__("Select at least one recipe to build a cooking path")


class InfeasibleSchedule(CookingPathError):
    """
    The preferred serving time leaves too little time to cook everything.

    Attributes:
        shortfall_minutes: How many more minutes the longest recipe needs
        available_minutes: Minutes between now and the serving time
        required_minutes: Prep + cook time of the longest recipe
    """

    def __init__(self, shortfall_minutes: int, available_minutes: int, required_minutes: int):
        self.shortfall_minutes = shortfall_minutes
        self.available_minutes = available_minutes
        self.required_minutes = required_minutes
        super().__init__(
            f"Serving time is {available_minutes} minutes away but the longest recipe "
            f"needs {required_minutes} minutes ({shortfall_minutes} minutes short)"
        )


class ScheduleValidationError(CookingPathError):
    """A proposed schedule breaks one or more timeline invariants."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid schedule: " + "; ".join(problems))
