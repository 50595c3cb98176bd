from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol


logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class GravityScheduler(Protocol):
    """Repeating timer owned by a single engine.

    `schedule` supersedes any previous arming; `cancel` disarms.
    """

    interval: Optional[float]

    def schedule(self, interval: float, callback: TickCallback) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_active(self) -> bool: ...


class ManualGravityClock:
    """Gravity clock advanced explicitly by the caller.

    Used by frame loops (pass the frame delta to `advance`), by the gym
    environment and by tests.
    """

    def __init__(self) -> None:
        self.interval: Optional[float] = None
        self._callback: Optional[TickCallback] = None
        self._elapsed = 0.0

    @property
    def is_active(self) -> bool:
        return self._callback is not None

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def schedule(self, interval: float, callback: TickCallback) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = float(interval)
        self._callback = callback
        self._elapsed = 0.0

    def cancel(self) -> None:
        self.interval = None
        self._callback = None
        self._elapsed = 0.0

    def advance(self, seconds: float) -> int:
        """Advance time and fire one tick per elapsed interval; returns ticks fired."""
        if self._callback is None:
            return 0
        self._elapsed += seconds
        fired = 0
        # The callback may re-arm (new interval, elapsed reset) or cancel
        while self._callback is not None and self.interval is not None and self._elapsed >= self.interval:
            self._elapsed -= self.interval
            self._callback()
            fired += 1
        return fired


class ThreadedGravityClock:
    """Background-thread repeating timer.

    Each arming gets its own thread, stop event and generation number.
    Re-arming or cancelling bumps the generation, and a thread fires only
    while its generation is still current.
    """

    def __init__(self, name: str = "gravity-clock") -> None:
        self.name = name
        self.interval: Optional[float] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._stop_event is not None

    def schedule(self, interval: float, callback: TickCallback) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        with self._lock:
            self._cancel_locked()
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(self._generation, float(interval), callback, stop_event),
                name=self.name,
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            self.interval = float(interval)
        logger.debug("Gravity clock armed at %.2fs", interval)
        thread.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def join(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._stop_event is not None:
            self._stop_event.set()
        self._stop_event = None
        self.interval = None

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _wait_for_tick(self, stop_event: threading.Event, interval: float) -> bool:
        """Block for one interval; True when the arming was stopped."""
        return stop_event.wait(interval)

    def _run(self, generation: int, interval: float, callback: TickCallback,
             stop_event: threading.Event) -> None:
        while not self._wait_for_tick(stop_event, interval):
            # The wait may time out just as the clock is re-armed
            if not self._is_current(generation):
                return
            callback()
