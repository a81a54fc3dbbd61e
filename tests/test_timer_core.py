from __future__ import annotations

from dataclasses import dataclass

import pytest

from frameclock.timer import TickResult, Timer


@dataclass
class FakeClock:
    now: float = 0.0

    def advance(self, dt: float) -> None:
        self.now += float(dt)


def _started_timer(clock: FakeClock, *, auto_destroy: bool = True) -> Timer:
    timer = Timer(clock, auto_destroy=auto_destroy)
    timer.start()
    return timer


def test_add_fires_once_then_auto_destroys() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[str] = []
    timer.add(100.0, fired.append, "boom")

    clock.advance(99.0)
    assert timer.tick() is TickResult.ALIVE
    assert fired == []

    clock.advance(1.0)
    assert timer.tick() is TickResult.FINISHED
    assert fired == ["boom"]
    assert timer.expired
    assert not timer.running
    assert timer.length == 0


def test_update_reports_liveness_as_bool() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    timer.add(10.0, lambda: None)
    assert timer.update() is True
    clock.advance(10.0)
    assert timer.update() is False


def test_repeat_fires_count_plus_one_times() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[float] = []
    timer.repeat(50.0, 2, lambda: fired.append(clock.now))

    results = []
    for _ in range(4):
        clock.advance(50.0)
        results.append(timer.tick())

    assert fired == [50.0, 100.0, 150.0]
    assert results == [TickResult.ALIVE, TickResult.ALIVE, TickResult.FINISHED, TickResult.FINISHED]


def test_loop_never_expires_and_compensates_for_lateness() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    count = [0]
    event = timer.loop(100.0, lambda: count.__setitem__(0, count[0] + 1))

    clock.advance(130.0)
    assert timer.tick() is TickResult.ALIVE
    assert count[0] == 1
    # Fired 30 late, so the next tick is pulled back to keep the cadence.
    assert event.tick == 200.0
    assert timer.next == 200.0

    for _ in range(10):
        clock.advance(100.0)
        assert timer.tick() is TickResult.ALIVE
    assert count[0] == 11
    assert not timer.expired


def test_events_fire_in_due_order_with_args() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[tuple[str, int]] = []
    timer.add(30.0, lambda *a: fired.append(a), "c", 3)
    timer.add(10.0, lambda *a: fired.append(a), "a", 1)
    timer.add(20.0, lambda *a: fired.append(a), "b", 2)
    assert timer.next == 10.0

    clock.advance(25.0)
    timer.tick()
    assert fired == [("a", 1), ("b", 2)]
    assert timer.next == 30.0

    clock.advance(5.0)
    timer.tick()
    assert fired[-1] == ("c", 3)


def test_timer_that_is_not_started_does_not_fire() -> None:
    clock = FakeClock()
    timer = Timer(clock)
    fired: list[int] = []
    timer.add(10.0, fired.append, 1)

    clock.advance(50.0)
    assert timer.tick() is TickResult.ALIVE
    assert fired == []


def test_start_rebases_queued_events_on_start_time() -> None:
    clock = FakeClock(now=1000.0)
    timer = Timer(clock)
    fired: list[int] = []
    event = timer.add(100.0, fired.append, 1)

    clock.advance(500.0)
    timer.start(delay=50.0)
    assert event.tick == 1650.0
    assert timer.ms == -50.0

    clock.advance(149.0)
    timer.tick()
    assert fired == []
    clock.advance(1.0)
    timer.tick()
    assert fired == [1]


def test_start_is_ignored_while_running() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    event = timer.add(10.0, lambda: None)
    clock.advance(5.0)
    timer.start()
    assert event.tick == 10.0


def test_stop_clears_events_unless_told_not_to() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    timer.add(10.0, lambda: None)
    timer.stop(clear_events=False)
    assert not timer.running
    assert timer.length == 1

    timer.stop()
    assert timer.length == 0


def test_pause_and_resume_shift_pending_events() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[float] = []
    timer.add(100.0, lambda: fired.append(clock.now))

    clock.advance(40.0)
    timer.pause()
    assert timer.paused

    clock.advance(500.0)
    assert timer.tick() is TickResult.ALIVE
    assert fired == []

    timer.resume()
    assert not timer.paused
    assert timer.next == 600.0

    clock.advance(59.0)
    timer.tick()
    assert fired == []
    clock.advance(1.0)
    timer.tick()
    assert fired == [600.0]


def test_pause_requires_running_timer() -> None:
    timer = Timer(FakeClock())
    timer.pause()
    assert not timer.paused


def test_remove_prevents_event_from_firing() -> None:
    clock = FakeClock()
    timer = _started_timer(clock, auto_destroy=False)
    fired: list[str] = []
    keep = timer.add(10.0, fired.append, "keep")
    drop = timer.add(10.0, fired.append, "drop")

    assert timer.remove(drop) is True
    other = Timer(clock)
    assert other.remove(keep) is False

    clock.advance(10.0)
    timer.tick()
    assert fired == ["keep"]
    assert timer.expired
    assert timer.tick() is TickResult.ALIVE
    assert timer.length == 0


def test_remove_all_keeps_timer_usable() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[int] = []
    timer.loop(10.0, fired.append, 1)
    timer.remove_all()
    assert timer.length == 0
    assert timer.running

    clock.advance(20.0)
    assert timer.tick() is TickResult.ALIVE
    timer.add(5.0, fired.append, 2)
    clock.advance(5.0)
    timer.tick()
    assert fired == [2]


def test_on_complete_listeners_receive_timer() -> None:
    clock = FakeClock()
    timer = _started_timer(clock, auto_destroy=False)
    seen: list[Timer] = []
    timer.on_complete.append(seen.append)
    timer.add(10.0, lambda: None)

    clock.advance(10.0)
    timer.tick()
    assert seen == [timer]


def test_destroy_drops_events_and_listeners() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    timer.on_complete.append(lambda _t: None)
    timer.add(10.0, lambda: None)
    timer.destroy()
    assert timer.length == 0
    assert timer.on_complete == []
    assert not timer.running


def test_callback_removing_sibling_event_skips_it() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    fired: list[str] = []
    second = None

    def first() -> None:
        fired.append("first")
        timer.remove(second)

    timer.add(10.0, first)
    second = timer.add(10.0, fired.append, "second")

    clock.advance(10.0)
    assert timer.tick() is TickResult.FINISHED
    assert fired == ["first"]


def test_duration_ms_and_seconds() -> None:
    clock = FakeClock()
    timer = Timer(clock)
    assert timer.ms == 0.0
    assert timer.duration == 0.0

    timer.start()
    timer.add(1000.0, lambda: None)
    clock.advance(250.0)
    assert timer.ms == 250.0
    assert timer.seconds == pytest.approx(0.25)
    assert timer.duration == 750.0


def test_negative_arguments_are_rejected() -> None:
    timer = Timer(FakeClock())
    with pytest.raises(ValueError):
        timer.add(-1.0, lambda: None)
    with pytest.raises(ValueError):
        timer.repeat(10.0, -1, lambda: None)
    with pytest.raises(ValueError):
        timer.loop(-0.5, lambda: None)


def test_queue_is_observed_through_length_only() -> None:
    clock = FakeClock()
    timer = _started_timer(clock)
    timer.add(10.0, lambda: None)
    timer.loop(5.0, lambda: None)
    assert timer.length == 2
    # ``events`` names the clock's built-in timer; a Timer has no such member.
    assert not hasattr(timer, "events")
