"""
Search Context Module - Limits, clock and cancellation shared by a counter run.
"""

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .yielding import qt_process_events

Clock = Callable[[], float]
Yielder = Callable[[], None]


@dataclass(frozen=True)
class SearchLimits:
    """
    Bounds for one counter invocation.

    Attributes:
        max_count: Stop after this many solutions (math.inf for no cap)
        timeout_ms: Wall-clock budget in milliseconds
        max_depth: Branches deeper than this are dead ends (math.inf for none)
    """
    max_count: float = math.inf
    timeout_ms: float = 2000.0
    max_depth: float = math.inf

    def __post_init__(self):
        # The cap is compared against an integer count; a fractional cap would be overshot.
        if self.max_count != math.inf and (
                math.isnan(self.max_count) or self.max_count != int(self.max_count)):
            raise ValueError(f"max_count must be a whole number or math.inf, got {self.max_count}")
        if self.max_count < 1:
            raise ValueError(f"max_count must be at least 1, got {self.max_count}")
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must not be negative, got {self.timeout_ms}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")


@dataclass
class SearchContext:
    """
    Capabilities injected into a counter run.

    Timing and cancellation are passed in rather than read from globals so a
    test can drive a search with a fake clock.

    Attributes:
        cancel_flag: Threading event acting as the cancellation token
        clock: Returns the current time in seconds
        yield_every_ms: Minimum time between cooperative yields (<= 0 disables)
        yielder: Called at a cooperative yield point
        start_time: Clock reading when the run started (set by the counter)
    """
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    clock: Clock = time.perf_counter
    yield_every_ms: float = 16.0
    yielder: Yielder = qt_process_events
    start_time: Optional[float] = None

    def start(self) -> None:
        self.start_time = self.clock()

    def is_cancelled(self) -> bool:
        return self.cancel_flag.is_set()

    def cancel(self) -> None:
        self.cancel_flag.set()

    def elapsed_ms(self) -> float:
        """Milliseconds since start(), or 0.0 before the run started."""
        if self.start_time is None:
            return 0.0
        return (self.clock() - self.start_time) * 1000.0

    def remaining_ms(self, limits: SearchLimits) -> float:
        """
        Milliseconds left before the timeout.

        Returns:
            Remaining time (may be negative if exceeded)
        """
        return limits.timeout_ms - self.elapsed_ms()
