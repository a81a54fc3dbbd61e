"""Wall-time sources and the conversion from wall time to frame deltas.

Sources report monotonic seconds; the clock is fed milliseconds.
``frame_delta_ms`` is the single place that conversion happens.
"""

from __future__ import annotations

import time
from typing import Protocol


class TimeSource(Protocol):
    def now(self) -> float:
        """Return monotonic seconds."""


class RealTimeSource:
    def now(self) -> float:
        return time.monotonic()


def frame_delta_ms(previous_s: float | None, now_s: float, *, max_elapsed_ms: float | None = None) -> float:
    """Milliseconds between two source readings, as fed to the clock.

    The first reading of a session (``previous_s is None``) yields 0.  A source
    that steps backwards yields 0 rather than a negative delta.  When
    ``max_elapsed_ms`` is set, longer gaps are capped to it.
    """

    if previous_s is None:
        return 0.0
    elapsed_ms = max(0.0, (now_s - previous_s) * 1000.0)
    if max_elapsed_ms is not None and elapsed_ms > max_elapsed_ms:
        return float(max_elapsed_ms)
    return elapsed_ms
