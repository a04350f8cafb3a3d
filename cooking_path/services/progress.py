"""
Progress Service - live tracking of a cooking schedule.

Step status is derived from three things only: the elapsed minutes, the
step's time window and the set of steps the cook has marked complete.
Marking a step complete always wins over the clock.

    completed  manually completed, or the clock is past the step's end
    active     the clock is inside [start, start + duration)
    current    the step starts within the next 2 minutes
    upcoming   everything else, and every step while the timer is paused

The clock itself is advanced by a Ticker: a cancellable asyncio task
that calls ProgressTracker.tick() once per interval.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Optional

from cooking_path.models.entities import CookingSchedule, CookingStep, ProgressState, StepStatus
from cooking_path.services.timeline import SHOULD_BE_DONE, START_NOW, format_clock, format_minutes

logger = logging.getLogger(__name__)

# A step is "current" this many minutes before it starts
LOOKAHEAD_MINUTES = 2


class ProgressTracker:
    """
    Clock-driven progress through one schedule.

    None of the operations raise: they are plain state transitions over
    a schedule that was validated when it was built.

    Attributes:
        schedule: The schedule being cooked
        state: Mutable progress for this schedule only
    """

    def __init__(self, schedule: CookingSchedule):
        self.schedule = schedule
        self.state = ProgressState()

    # State accessors
    @property
    def elapsed_minutes(self) -> int:
        return self.state.elapsed_minutes

    @property
    def is_timer_active(self) -> bool:
        return self.state.is_timer_active

    def snapshot(self) -> ProgressState:
        """Copy of the current state that later ticks won't change."""
        return replace(self.state, completed_step_ids=set(self.state.completed_step_ids))

    # Operations
    def tick(self):
        """Advance the clock one second while the timer runs."""
        if self.state.is_timer_active:
            self.state.elapsed_seconds += 1

    def toggle_timer(self) -> bool:
        """Pause or resume. Elapsed time is kept. Returns the new state."""
        self.state.is_timer_active = not self.state.is_timer_active
        logger.debug(f"Timer {'started' if self.state.is_timer_active else 'paused'} at {self.state.elapsed_seconds}s")
        return self.state.is_timer_active

    def mark_step_complete(self, step_id: str):
        """
        Mark a step as done.

        While the timer runs, the current step pointer moves to the next
        step (never past the last one). The clock is not touched.
        """
        if self.schedule.get_step(step_id) is None:
            logger.warning(f"Ignoring completion of unknown step '{step_id}'")
            return

        self.state.completed_step_ids.add(step_id)

        if self.state.is_timer_active:
            next_index = self.state.current_step_index + 1
            if next_index < len(self.schedule.steps):
                self.state.current_step_index = next_index

    def reset(self):
        """Back to a stopped clock with nothing completed."""
        self.state.elapsed_seconds = 0
        self.state.is_timer_active = False
        self.state.completed_step_ids.clear()
        self.state.current_step_index = 0

    # Derived read model
    def step_status(self, step: CookingStep) -> StepStatus:
        if step.id in self.state.completed_step_ids:
            return StepStatus.COMPLETED
        if not self.state.is_timer_active:
            return StepStatus.UPCOMING

        now = self.elapsed_minutes
        if step.start_time <= now < step.end_time:
            return StepStatus.ACTIVE
        if now >= step.end_time:
            return StepStatus.COMPLETED
        if now >= step.start_time - LOOKAHEAD_MINUTES:
            return StepStatus.CURRENT
        return StepStatus.UPCOMING

    def time_until(self, step: CookingStep) -> str:
        """Countdown label for a step; empty while the timer is paused."""
        if not self.state.is_timer_active:
            return ""

        now = self.elapsed_minutes
        time_until = step.start_time - now
        if time_until > 0:
            return f"in {format_minutes(time_until)}"
        if time_until == 0:
            return START_NOW

        remaining = step.end_time - now
        if remaining > 0:
            return f"{format_minutes(remaining)} remaining"
        return SHOULD_BE_DONE

    @property
    def current_step(self) -> Optional[CookingStep]:
        if self.state.current_step_index >= len(self.schedule.steps):
            return None
        return self.schedule.steps[self.state.current_step_index]

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.schedule.total_time - self.elapsed_minutes)

    @property
    def progress_percent(self) -> int:
        if self.schedule.total_time <= 0:
            return 100
        return min(100, round(self.elapsed_minutes / self.schedule.total_time * 100))

    @property
    def elapsed_display(self) -> str:
        return format_clock(self.state.elapsed_seconds)


class Ticker:
    """
    Repeating timer task on the running event loop.

    Calls `callback` every `interval` seconds until cancelled. Must be
    cancelled whenever the timer pauses or the schedule goes away,
    otherwise the task keeps running for the life of the loop.
    """

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        self.callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Start ticking; does nothing if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            self.callback()
