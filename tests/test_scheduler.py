import threading
import time

import pytest

from tetris_engine.game import ManualGravityClock, ThreadedGravityClock


def test_manual_clock_fires_once_per_interval():
    clock = ManualGravityClock()
    calls = []
    clock.schedule(0.5, lambda: calls.append(1))
    assert clock.advance(0.3) == 0
    assert clock.advance(0.3) == 1
    assert clock.advance(1.0) == 2
    assert len(calls) == 3


def test_manual_clock_cancel_and_inactive_advance():
    clock = ManualGravityClock()
    calls = []
    assert clock.advance(5.0) == 0
    clock.schedule(0.1, lambda: calls.append(1))
    assert clock.is_active
    clock.cancel()
    assert not clock.is_active
    assert clock.interval is None
    assert clock.advance(5.0) == 0
    assert calls == []


def test_manual_clock_reschedule_restarts_wait():
    clock = ManualGravityClock()
    first, second = [], []
    clock.schedule(1.0, lambda: first.append(1))
    clock.advance(0.9)
    clock.schedule(0.5, lambda: second.append(1))
    assert clock.elapsed == 0.0
    clock.advance(0.4)
    assert first == [] and second == []
    clock.advance(0.1)
    assert first == [] and second == [1]


def test_manual_clock_callback_may_cancel():
    clock = ManualGravityClock()
    calls = []

    def once():
        calls.append(1)
        clock.cancel()

    clock.schedule(0.1, once)
    assert clock.advance(1.0) == 1
    assert calls == [1]


@pytest.mark.parametrize("clock_cls", [ManualGravityClock, ThreadedGravityClock])
def test_non_positive_interval_rejected(clock_cls):
    with pytest.raises(ValueError):
        clock_cls().schedule(0, lambda: None)


def test_threaded_clock_fires_and_cancels():
    clock = ThreadedGravityClock()
    fired = threading.Event()
    clock.schedule(0.01, fired.set)
    try:
        assert fired.wait(2.0)
        assert clock.is_active
    finally:
        clock.cancel()
    clock.join(2.0)
    assert not clock.is_active
    assert clock.interval is None


def test_threaded_clock_reschedule_supersedes_previous_timer():
    clock = ThreadedGravityClock()
    stale = []
    fresh = threading.Event()
    clock.schedule(0.5, lambda: stale.append(1))
    clock.schedule(0.01, fresh.set)
    try:
        assert fresh.wait(2.0)
        assert clock.interval == pytest.approx(0.01)
    finally:
        clock.cancel()
        clock.join(2.0)
    # The first arming was stopped before its interval elapsed
    time.sleep(0.6)
    assert stale == []


class GatedClock(ThreadedGravityClock):
    """Holds each timed-out wait until the test releases it."""

    def __init__(self) -> None:
        super().__init__(name="gated-gravity-clock")
        self.timed_out = threading.Event()
        self.release = threading.Event()

    def _wait_for_tick(self, stop_event, interval):
        stopped = stop_event.wait(interval)
        if not stopped:
            self.timed_out.set()
            self.release.wait(2.0)
        return stopped


@pytest.mark.parametrize("rearm", [True, False])
def test_threaded_clock_drops_tick_superseded_after_timeout(rearm):
    clock = GatedClock()
    stale = []
    clock.schedule(0.01, lambda: stale.append(1))
    old_thread = clock._thread
    assert clock.timed_out.wait(2.0)
    # The old arming has timed out but not yet fired
    if rearm:
        clock.schedule(10.0, lambda: None)
    else:
        clock.cancel()
    clock.release.set()
    old_thread.join(2.0)
    assert not old_thread.is_alive()
    assert stale == []
    clock.cancel()
