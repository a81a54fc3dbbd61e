from __future__ import annotations

import logging
from typing import Any

from .timer import TickResult, Timer

logger = logging.getLogger(__name__)


class Clock:
    """Logical game clock advanced once per frame by its owning session.

    - ``now`` only moves inside :meth:`update`, by ``elapsed * time_scale``.
    - While ``paused`` is set, :meth:`update` does nothing at all.
    - ``events`` is a built-in timer that is never pruned or replaced.
    - Timers made with :meth:`create` are ticked every update and dropped in
      the same update in which they report they are finished.

    Single-threaded: call only from the session's frame loop.
    """

    def __init__(self, session: Any) -> None:
        self.session = session
        self._now = 0.0
        self.time_scale = 1.0
        self.paused = False

        self._events = Timer(self, auto_destroy=False)
        self._timers: list[Timer] = []
        # Bumped whenever the managed list is wiped.
        self._generation = 0

        self._events.start()

    @property
    def now(self) -> float:
        return self._now

    @property
    def events(self) -> Timer:
        return self._events

    @property
    def timers(self) -> tuple[Timer, ...]:
        return tuple(self._timers)

    def create(self, auto_destroy: bool = True) -> Timer:
        """Create a stand-alone timer that this clock updates every frame.

        The timer is not started; call ``start()`` on it once its events are
        queued.  An ``auto_destroy`` timer is dropped once all of its
        non-looping events have fired.
        """

        timer = Timer(self, auto_destroy=auto_destroy)
        self._timers.append(timer)
        logger.debug("Created timer %#x (auto_destroy=%s), %d managed", id(timer), auto_destroy, len(self._timers))
        return timer

    def remove_all(self) -> None:
        """Destroy every created timer and clear the built-in timer's events."""

        for timer in self._timers:
            timer.destroy()
        logger.debug("Removed %d managed timers", len(self._timers))
        self._timers.clear()
        self._generation += 1

        self._events.remove_all()

    def update(self, elapsed: float) -> None:
        if self.paused:
            return

        self._now += elapsed * self.time_scale

        # Built-in timer is exempt from pruning.
        self._events.tick()

        timers = self._timers
        i = 0
        n = len(timers)
        generation = self._generation
        # Timers appended by callbacks during the scan wait for the next update.
        while i < n:
            timer = timers[i]
            alive = timer.tick() is TickResult.ALIVE
            if self._generation != generation:
                # A callback called remove_all(); anything in the list now is new.
                break
            if alive:
                i += 1
                continue
            del timers[i]
            logger.debug("Pruned finished timer %#x", id(timer))
            n -= 1

    def elapsed_since(self, since: float) -> float:
        return self._now - since

    def reset(self) -> None:
        self._now = 0.0
        self.remove_all()
        logger.debug("Clock reset")
