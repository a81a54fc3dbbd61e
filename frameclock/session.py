from __future__ import annotations

import logging

from .clock import Clock
from .config import ClockConfig
from .time_source import RealTimeSource, TimeSource, frame_delta_ms

logger = logging.getLogger(__name__)


class GameSession:
    """Owns the game clock and feeds it one delta per frame.

    - ``tick()`` measures wall time through the injected ``TimeSource``.
    - ``step()`` takes a delta directly (fixed-step loops, replays, tests).
    Deltas are in milliseconds.
    """

    def __init__(self, *, time_source: TimeSource | None = None, config: ClockConfig | None = None) -> None:
        self._time_source = time_source or RealTimeSource()
        self._config = config or ClockConfig()
        self._last_s: float | None = None
        self._frame = 0

        self.clock = Clock(self)
        self.clock.time_scale = float(self._config.time_scale)
        self.clock.paused = bool(self._config.start_paused)

    @property
    def config(self) -> ClockConfig:
        return self._config

    @property
    def frame(self) -> int:
        return self._frame

    def tick(self) -> float:
        """Measure the wall time since the previous tick and step the clock.

        Returns the elapsed milliseconds that were fed to the clock.
        """

        now_s = self._time_source.now()
        limit = self._config.max_elapsed_ms
        elapsed_ms = frame_delta_ms(self._last_s, now_s, max_elapsed_ms=limit)
        if limit is not None and elapsed_ms == limit:
            logger.debug("Frame delta clamped to %.1fms", limit)
        self._last_s = now_s
        self.step(elapsed_ms)
        return elapsed_ms

    def step(self, elapsed_ms: float) -> None:
        self.clock.update(elapsed_ms)
        self._frame += 1

    def shutdown(self) -> None:
        self.clock.remove_all()
