from __future__ import annotations

from timers import TimerQueue


def test_runs_callbacks_in_due_order(timers) -> None:
    ran = []
    timers.call_later(1.0, lambda: ran.append("b"))
    timers.call_later(0.5, lambda: ran.append("a"))
    timers.call_later(1.0, lambda: ran.append("c"))
    assert timers.advance(0.4) == 0
    assert timers.advance(1.0) == 3
    assert ran == ["a", "b", "c"]


def test_nested_callbacks_use_their_own_due_time(timers) -> None:
    ran = []
    timers.call_later(0.6, lambda: timers.call_later(1.0, lambda: ran.append("late")))
    timers.advance(1.7)
    assert ran == ["late"]


def test_cancel_and_cancel_all(timers) -> None:
    ran = []
    h = timers.call_later(0.1, lambda: ran.append("x"))
    timers.call_later(0.2, lambda: ran.append("y"))
    timers.cancel(h)
    assert timers.pending() == 1
    timers.cancel_all()
    timers.advance(1)
    assert ran == []


def test_run_due_follows_the_clock() -> None:
    now = [10.0]
    timers = TimerQueue(clock=lambda: now[0])
    ran = []
    timers.call_later(0.3, lambda: ran.append(1))
    assert timers.run_due() == 0
    now[0] = 10.5
    assert timers.run_due() == 1
    assert ran == [1]
