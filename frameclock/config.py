from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_TIME_SCALE = "FRAMECLOCK_TIME_SCALE"
ENV_START_PAUSED = "FRAMECLOCK_START_PAUSED"
ENV_MAX_ELAPSED_MS = "FRAMECLOCK_MAX_ELAPSED_MS"
ENV_LOG_LEVEL = "FRAMECLOCK_LOG_LEVEL"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class ClockConfig:
    """Session-level clock settings.

    ``max_elapsed_ms`` bounds the delta a single wall-time frame may feed into
    the clock (a debugger pause or window drag otherwise arrives as one huge
    frame).  ``None`` disables the bound.
    """

    time_scale: float = 1.0
    start_paused: bool = False
    max_elapsed_ms: float | None = 250.0
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.time_scale < 0.0:
            raise ValueError("time_scale must be >= 0")
        if self.max_elapsed_ms is not None and self.max_elapsed_ms <= 0.0:
            raise ValueError("max_elapsed_ms must be > 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log_level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClockConfig":
        env = os.environ if environ is None else environ
        defaults = cls()

        raw_scale = env.get(ENV_TIME_SCALE, "").strip()
        time_scale = defaults.time_scale if raw_scale == "" else float(raw_scale)

        raw_paused = env.get(ENV_START_PAUSED, "").strip().lower()
        start_paused = defaults.start_paused if raw_paused == "" else raw_paused in _TRUE_VALUES

        raw_max = env.get(ENV_MAX_ELAPSED_MS, "").strip().lower()
        max_elapsed_ms: float | None
        if raw_max == "":
            max_elapsed_ms = defaults.max_elapsed_ms
        elif raw_max in ("none", "off", "0"):
            max_elapsed_ms = None
        else:
            max_elapsed_ms = float(raw_max)

        log_level = env.get(ENV_LOG_LEVEL, "").strip() or defaults.log_level

        return cls(
            time_scale=time_scale,
            start_paused=start_paused,
            max_elapsed_ms=max_elapsed_ms,
            log_level=log_level,
        )
