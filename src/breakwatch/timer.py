#!/usr/bin/env python3
"""Break countdown: the shared timer state and the loop that advances it."""

from dataclasses import dataclass, replace
from threading import Event, Lock
from time import monotonic
from typing import Callable, Optional

from breakwatch.logger import logger


def format_time(seconds: int) -> str:
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


@dataclass(frozen=True)
class TimerSettings:
    """Bounds and step sizes for a BreakTimer, all in seconds.

    max_interval and max_breaks use 0 for "no limit".
    """

    interval: int
    min_interval: int
    step: int
    max_interval: int = 0
    tick: int = 1
    max_breaks: int = 0

    def __post_init__(self):
        for name in ('interval', 'min_interval', 'step', 'tick'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.max_interval < 0 or self.max_breaks < 0:
            raise ValueError("max_interval and max_breaks cannot be negative")
        if self.min_interval > self.interval:
            raise ValueError("min_interval cannot exceed interval")
        if self.max_interval and self.max_interval < self.interval:
            raise ValueError("max_interval cannot be below interval")


@dataclass
class TimerState:
    interval: int
    remaining: int
    breaks: int = 0


@dataclass(frozen=True)
class IntervalChange:
    old: int
    new: int
    action: str

    @property
    def message(self) -> str:
        return f"Break interval {self.action} to {format_time(self.new)}"


class BreakTimer:
    """Counts down to the next break and accepts live interval changes.

    The state is shared between the tick thread and the key handler, so
    every read and write goes through ``_lock``. ``notify`` is called with
    a copy of the state after the countdown has been reset, outside the lock.
    """

    def __init__(self, settings: TimerSettings,
                 notify: Optional[Callable[[TimerState], None]] = None):
        self.settings = settings
        self.state = TimerState(interval=settings.interval,
                                remaining=settings.interval)
        self.finished = Event()
        self._notify = notify
        self._lock = Lock()

    def snapshot(self) -> TimerState:
        with self._lock:
            return replace(self.state)

    def tick(self) -> bool:
        """Advance the countdown by one quantum. Returns True if a break fired."""
        with self._lock:
            self.state.remaining = max(
                0, self.state.remaining - self.settings.tick)
            if self.state.remaining > 0:
                return False
            self.state.breaks += 1
            self.state.remaining = self.state.interval
            snapshot = replace(self.state)

        logger.debug("Break due", extra={
            "interval": snapshot.interval, "breaks": snapshot.breaks})
        if self._notify is not None:
            try:
                self._notify(snapshot)
            except Exception as e:
                logger.error(f"Failed to deliver break notification: {e}")

        if self.settings.max_breaks and snapshot.breaks >= self.settings.max_breaks:
            logger.debug(f"Reached {self.settings.max_breaks} breaks")
            self.finished.set()
        return True

    def increase_interval(self, delta: Optional[int] = None) -> IntervalChange:
        delta = self._check_delta(delta)
        with self._lock:
            old = self.state.interval
            new = old + delta
            if self.settings.max_interval:
                new = min(new, self.settings.max_interval)
            self.state.interval = new
            # the running countdown is extended by whatever was actually added
            self.state.remaining = min(self.state.remaining + new - old, new)

        action = "increased" if new > old else "already at maximum"
        return IntervalChange(old, new, action)

    def decrease_interval(self, delta: Optional[int] = None) -> IntervalChange:
        delta = self._check_delta(delta)
        with self._lock:
            old = self.state.interval
            new = max(old - delta, self.settings.min_interval)
            self.state.interval = new
            self.state.remaining = min(self.state.remaining, new)

        action = "decreased" if new < old else "already at minimum"
        return IntervalChange(old, new, action)

    def run(self, stop_event: Event):
        """Tick once per quantum until stop_event is set or max_breaks is reached."""
        quantum = self.settings.tick
        deadline = monotonic() + quantum
        while not stop_event.wait(max(0.0, deadline - monotonic())):
            deadline += quantum
            self.tick()
            if self.finished.is_set():
                stop_event.set()

    def _check_delta(self, delta):
        if delta is None:
            return self.settings.step
        if delta <= 0:
            raise ValueError(f"Interval change must be positive, got {delta}")
        return delta
