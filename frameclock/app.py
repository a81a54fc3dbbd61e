"""Pygame front end for the frame clock.

A single screen shows the clock state and lets the player poke at it:
- Space / P: pause or unpause the clock
- Up / Down: double or halve the time scale
- N: create a managed timer that fires 3 times, 500ms apart, then auto-destroys
- L: add a 1s looping event to the built-in timer
- R: reset the clock
- Esc: quit

Timing and timer logic live in frameclock.clock / frameclock.timer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import pygame

from .config import ClockConfig
from .session import GameSession

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60
LOG_LINES = 8


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


class PygameTimeSource:
    """Time source backed by pygame's millisecond tick counter."""

    def now(self) -> float:
        return float(pygame.time.get_ticks()) / 1000.0


class App:
    """Window shell: forwards input to the active screen and quits on close."""

    def __init__(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        self._surface = surface
        self._font = font
        self._screen: Screen | None = None
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    def show(self, screen: Screen) -> None:
        self._screen = screen

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if self._screen is not None:
            self._screen.handle_event(event)

    def render(self) -> None:
        if self._screen is not None:
            self._screen.render(self._surface)


class ClockScreen:
    def __init__(self, app: App, session: GameSession) -> None:
        self._app = app
        self._session = session
        self._log: list[str] = []
        self._timers_created = 0
        self._loops_added = 0
        self._small_font = pygame.font.Font(None, 24)

    @property
    def log_lines(self) -> list[str]:
        return list(self._log)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        clock = self._session.clock
        key = event.key
        if key in (pygame.K_SPACE, pygame.K_p):
            clock.paused = not clock.paused
            self._note("paused" if clock.paused else "resumed")
        elif key == pygame.K_UP:
            clock.time_scale = min(clock.time_scale * 2.0, 16.0)
            self._note(f"time scale x{clock.time_scale:g}")
        elif key == pygame.K_DOWN:
            clock.time_scale = max(clock.time_scale / 2.0, 1.0 / 16.0)
            self._note(f"time scale x{clock.time_scale:g}")
        elif key == pygame.K_n:
            self._create_timer()
        elif key == pygame.K_l:
            self._add_loop()
        elif key == pygame.K_r:
            clock.reset()
            self._note("clock reset")
        elif key in (pygame.K_ESCAPE, pygame.K_q):
            self._app.quit()

    def _create_timer(self) -> None:
        self._timers_created += 1
        label = f"timer {self._timers_created}"
        timer = self._session.clock.create()
        timer.repeat(500.0, 2, self._on_fire, label)
        timer.on_complete.append(lambda _t: self._note(f"{label} done"))
        timer.start()
        self._note(f"{label} created")

    def _add_loop(self) -> None:
        self._loops_added += 1
        label = f"loop {self._loops_added}"
        self._session.clock.events.loop(1000.0, self._on_fire, label)
        self._note(f"{label} added")

    def _on_fire(self, label: str) -> None:
        self._note(f"{label} fired @ {self._session.clock.now / 1000.0:.2f}s")

    def _note(self, line: str) -> None:
        logger.debug(line)
        self._log.append(line)
        if len(self._log) > LOG_LINES:
            del self._log[: len(self._log) - LOG_LINES]

    def render(self, surface: pygame.Surface) -> None:
        clock = self._session.clock
        surface.fill((10, 10, 14))

        state = "PAUSED" if clock.paused else "running"
        lines = [
            f"Clock: {clock.now / 1000.0:8.2f}s  ({state})",
            f"Time scale: x{clock.time_scale:g}",
            f"Managed timers: {len(clock.timers)}   Built-in events: {clock.events.length}",
        ]
        y = 30
        for line in lines:
            surface.blit(self._app.font.render(line, True, (235, 235, 245)), (40, y))
            y += 40

        y += 10
        for line in self._log:
            surface.blit(self._small_font.render(line, True, (180, 180, 190)), (40, y))
            y += 24

        hint = "Space pause  Up/Down scale  N timer  L loop  R reset  Esc quit"
        hint_surf = self._small_font.render(hint, True, (140, 140, 160))
        w, h = surface.get_size()
        surface.blit(hint_surf, hint_surf.get_rect(midbottom=(w // 2, h - 16)))


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    config: ClockConfig | None = None,
) -> int:
    config = config or ClockConfig.from_env()

    pygame.init()
    pygame.display.set_caption("Frame Clock")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    frame_limiter = pygame.time.Clock()

    app = App(surface=surface, font=font)
    session = GameSession(time_source=PygameTimeSource(), config=config)
    app.show(ClockScreen(app, session))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            session.tick()
            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            frame_limiter.tick(TARGET_FPS)
    finally:
        session.shutdown()
        pygame.quit()

    return 0
