"""
Cooking Path Session

One session = one schedule + its progress + the ticker driving the clock.

Session Lifecycle:
1. Created with a freshly generated schedule (timer stopped)
2. Timer toggled on/off; the ticker runs only while the timer is on
3. Steps marked complete as the cook goes
4. Schedule regenerated (fresh progress) or progress reset
5. Closed when the user leaves; the ticker is cancelled

A regenerated schedule is built completely before anything is
replaced, so a failed or cancelled regeneration leaves the current
schedule and progress as they were.
"""

import logging
from typing import Awaitable, Callable

from cooking_path.models.entities import CookingSchedule
from cooking_path.services.progress import ProgressTracker, Ticker

logger = logging.getLogger(__name__)


class CookingPathSession:
    """
    Owns the schedule, progress tracker and ticker for one cook.

    Attributes:
        session_id: Key in the session registry
        tracker: Progress through the current schedule
        ticker: Advances the tracker's clock while the timer runs
    """

    def __init__(self, session_id: str, schedule: CookingSchedule, tick_interval: float = 1.0):
        self.session_id = session_id
        self.tick_interval = tick_interval
        self.tracker = ProgressTracker(schedule)
        self.ticker = Ticker(self.tracker.tick, tick_interval)

    @property
    def schedule(self) -> CookingSchedule:
        return self.tracker.schedule

    def toggle_timer(self) -> bool:
        """
        Pause or resume cooking.

        Must be called from the event loop: resuming starts the ticker task.
        """
        active = self.tracker.toggle_timer()
        if active:
            self.ticker.start()
        else:
            self.ticker.cancel()
        return active

    def mark_step_complete(self, step_id: str):
        self.tracker.mark_step_complete(step_id)

    def reset(self):
        self.ticker.cancel()
        self.tracker.reset()

    def replace_schedule(self, schedule: CookingSchedule):
        """Swap in a new schedule with fresh progress."""
        self.ticker.cancel()
        self.tracker = ProgressTracker(schedule)
        self.ticker = Ticker(self.tracker.tick, self.tick_interval)
        logger.info(f"Session {self.session_id}: schedule replaced ({len(schedule.steps)} steps)")

    async def regenerate(self, build: Callable[[], Awaitable[CookingSchedule]]) -> CookingSchedule:
        """
        Build a new schedule and swap it in once it is complete.

        Errors (and cancellation) from `build` propagate with the
        current schedule and progress untouched.
        """
        schedule = await build()
        self.replace_schedule(schedule)
        return schedule

    def close(self):
        self.ticker.cancel()
