"""
Timer Scheduling for the Host Loop
==================================

The instruction clock is configurable (1-2000 Hz), but the delay and
sound timers must count down at a fixed 60 Hz. Both are derived from one
monotonic master clock started when the loop starts.

TimerScheduler tracks which 60 Hz boundaries have already been consumed.
Every call to poll() compares the number of whole timer periods elapsed
since the start with the number already ticked:

    elapsed  |----|----|----|----|-- ...      (one '|' per 1/60 s)
    consumed      1    2    3
    poll()         -> 1 when a new boundary has passed, else 0

A boundary is consumed exactly once, so several fast cycles inside one
period never tick twice. When the loop is slower than 60 Hz, all boundaries
that passed since the previous poll are returned together so the timers
keep real time.
"""

import time
from typing import Callable

from .timers import TIMER_FREQ


Clock = Callable[[], float]


class TimerScheduler:
    """
    Edge detector for 60 Hz timer periods on a monotonic clock.

    Example:
        >>> now = [0.0]
        >>> sched = TimerScheduler(clock=lambda: now[0])
        >>> sched.poll()
        0
        >>> now[0] = 1 / 60
        >>> sched.poll()
        1
        >>> sched.poll()
        0
    """

    def __init__(self, frequency: float = TIMER_FREQ, clock: Clock = time.monotonic):
        """
        Args:
            frequency: Timer rate in Hz
            clock: Monotonic time source returning seconds
        """
        if frequency <= 0:
            raise ValueError(f"Timer frequency must be positive, got {frequency}")
        self.period = 1.0 / frequency
        self._clock = clock
        self._start = clock()
        self._consumed = 0

    def restart(self) -> None:
        """Restart the master clock; no boundary is pending afterwards."""
        self._start = self._clock()
        self._consumed = 0

    @property
    def elapsed(self) -> float:
        """Seconds since the master clock started."""
        return self._clock() - self._start

    def poll(self) -> int:
        """
        Consume timer boundaries crossed since the last poll.

        Returns:
            Number of timer ticks due now (0 when still inside the
            current period)
        """
        # Small epsilon keeps exact multiples of the period from rounding down
        periods = int(self.elapsed / self.period + 1e-9)
        due = periods - self._consumed
        if due <= 0:
            return 0
        self._consumed = periods
        return due

    @property
    def consumed(self) -> int:
        """Total timer boundaries consumed since the last restart."""
        return self._consumed
