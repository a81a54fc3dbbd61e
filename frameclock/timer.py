"""Timers that fire scheduled events against a frame clock's logical time.

A ``Timer`` keeps a queue of ``TimerEvent`` entries ordered by the logical time
at which they are due.  It never reads wall time: the bound clock's ``now`` is
its only time base, so pausing or scaling the clock pauses or scales every
timer bound to it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimeBase(Protocol):
    @property
    def now(self) -> float: ...


class TickResult(str, Enum):
    ALIVE = "alive"
    FINISHED = "finished"


@dataclass(slots=True, eq=False)
class TimerEvent:
    timer: "Timer"
    delay: float
    tick: float
    repeat_count: int
    loop: bool
    callback: Callable[..., Any]
    args: tuple[Any, ...] = ()
    pending_delete: bool = False

    def fire(self) -> None:
        self.callback(*self.args)


class Timer:
    """Queue of timed events driven by a clock.

    - ``add`` fires once, ``repeat`` fires ``repeat_count + 1`` times, ``loop``
      fires until removed.
    - ``tick`` fires every due event and reports whether the timer should stay
      registered with its clock.
    - An ``auto_destroy`` timer destroys itself once its last non-repeating
      event has fired.
    """

    def __init__(self, clock: TimeBase, *, auto_destroy: bool = True) -> None:
        self._clock = clock
        self._auto_destroy = bool(auto_destroy)

        self._events: list[TimerEvent] = []
        self._running = False
        self._paused = False
        self._expired = False
        self._started = 0.0
        self._next_tick = 0.0
        self._marked = 0
        self._pause_started = 0.0

        self.on_complete: list[Callable[[Timer], None]] = []

    @property
    def auto_destroy(self) -> bool:
        return self._auto_destroy

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def next(self) -> float:
        """Logical time at which the earliest queued event is due."""
        return self._next_tick

    @property
    def duration(self) -> float:
        """Time remaining until the next event fires, or 0 when idle."""
        now = self._clock.now
        if self._running and self._next_tick > now:
            return self._next_tick - now
        return 0.0

    @property
    def length(self) -> int:
        return len(self._events)

    @property
    def ms(self) -> float:
        """Time elapsed since the timer started, or 0 when not running."""
        if not self._running:
            return 0.0
        return self._clock.now - self._started

    @property
    def seconds(self) -> float:
        return self.ms * 0.001

    def add(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerEvent:
        return self._create(delay, False, 0, callback, args)

    def repeat(self, delay: float, repeat_count: int, callback: Callable[..., Any], *args: Any) -> TimerEvent:
        if repeat_count < 0:
            raise ValueError("repeat_count must be >= 0")
        return self._create(delay, False, int(repeat_count), callback, args)

    def loop(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerEvent:
        return self._create(delay, True, 0, callback, args)

    def start(self, delay: float = 0.0) -> None:
        if self._running:
            return
        self._started = self._clock.now + float(delay)
        self._running = True
        for event in self._events:
            event.tick = event.delay + self._started
        self._order()

    def stop(self, clear_events: bool = True) -> None:
        self._running = False
        if clear_events:
            self._drop_events()

    def remove(self, event: TimerEvent) -> bool:
        if event.timer is not self or event not in self._events:
            return False
        if not event.pending_delete:
            event.pending_delete = True
            self._marked += 1
        return True

    def remove_all(self) -> None:
        self._drop_events()

    def pause(self) -> None:
        if not self._running or self._paused:
            return
        self._pause_started = self._clock.now
        self._paused = True

    def resume(self) -> None:
        if not self._paused:
            return
        paused_for = self._clock.now - self._pause_started
        for event in self._events:
            event.tick += paused_for
        self._next_tick += paused_for
        self._paused = False

    def destroy(self) -> None:
        self.on_complete.clear()
        self._running = False
        self._drop_events()

    def update(self) -> bool:
        """Advance the timer; returns False once it should be dropped."""

        return self.tick() is TickResult.ALIVE

    def tick(self) -> TickResult:
        if self._paused:
            return TickResult.ALIVE

        now = self._clock.now

        if self._marked:
            self._events = [e for e in self._events if not e.pending_delete]
            self._marked = 0

        if self._running and self._events and now >= self._next_tick:
            self._fire_due(now)
            if len(self._events) > self._marked:
                self._order()
            else:
                self._expired = True
                logger.debug("Timer %#x expired (auto_destroy=%s)", id(self), self._auto_destroy)
                for listener in list(self.on_complete):
                    listener(self)

        if self._expired and self._auto_destroy:
            self.destroy()
            return TickResult.FINISHED
        return TickResult.ALIVE

    def _fire_due(self, now: float) -> None:
        # Queue is sorted by tick, so stop at the first event not yet due.
        for event in list(self._events):
            if not self._running:
                break
            if event.pending_delete:
                continue
            if now < event.tick:
                break

            late_by = now - event.tick
            new_tick = now + event.delay - late_by
            if new_tick < 0:
                new_tick = now + event.delay

            if event.loop:
                event.tick = new_tick
            elif event.repeat_count > 0:
                event.repeat_count -= 1
                event.tick = new_tick
            else:
                event.pending_delete = True
                self._marked += 1
            event.fire()

    def _create(
        self,
        delay: float,
        loop: bool,
        repeat_count: int,
        callback: Callable[..., Any],
        args: tuple[Any, ...],
    ) -> TimerEvent:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        delay = float(delay)
        event = TimerEvent(
            timer=self,
            delay=delay,
            tick=self._clock.now + delay,
            repeat_count=repeat_count,
            loop=loop,
            callback=callback,
            args=args,
        )
        self._events.append(event)
        self._order()
        self._expired = False
        return event

    def _drop_events(self) -> None:
        # Marked so a firing pass already in progress skips them.
        for event in self._events:
            event.pending_delete = True
        self._events.clear()
        self._marked = 0

    def _order(self) -> None:
        if not self._events:
            return
        self._events.sort(key=lambda e: e.tick)
        for event in self._events:
            if not event.pending_delete:
                self._next_tick = event.tick
                break
