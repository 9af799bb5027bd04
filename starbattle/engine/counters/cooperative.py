"""
Cooperative Counter - Same search, but yields to the host and honors cancellation.

Meant for interactive callers that must not freeze a UI thread. Every
YIELD_MASK + 1 visited nodes the counter checks the cancel flag and, if at
least yield_every_ms has passed since the last yield, hands control to the
context's yielder. The search resumes on the same call stack afterwards.
"""

import logging
import math
import threading
from typing import Optional

from ..base import SearchRun, SolutionCounter
from ..board import BoardState
from ..context import Clock, SearchContext, SearchLimits, Yielder
from ..factory import register_counter
from ..result import SearchResult

logger = logging.getLogger(__name__)

# Checkpoint every 1024 nodes; masked so the check is a single AND.
YIELD_MASK = 0x3FF


@register_counter
class CooperativeCounter(SolutionCounter):
    """
    Counter that periodically yields and stops on the cancel flag.

    A cancelled run reports aborted=True and timed_out=True.
    """
    name = "cooperative"
    description = "Cooperative - yields to the event loop and supports cancellation"

    def _on_entry(self, run: SearchRun) -> bool:
        if run.context.is_cancelled():
            run.abort()
            return True
        return False

    def _on_node(self, run: SearchRun) -> None:
        if run.metrics.nodes_visited & YIELD_MASK:
            return

        context = run.context
        if context.is_cancelled():
            run.abort()
            return
        if context.yield_every_ms <= 0:
            return

        now = context.clock()
        if (now - run.last_yield) * 1000.0 >= context.yield_every_ms:
            context.yielder()
            run.metrics.yields += 1
            run.last_yield = context.clock()
            # The host may have cancelled while it had control.
            if context.is_cancelled():
                logger.debug(f"[{self.name}] Cancelled during yield")
                run.abort()


def count_solutions_cooperative(
    state: BoardState,
    max_count: float = math.inf,
    timeout_ms: float = 2000.0,
    max_depth: float = math.inf,
    cancel_flag: Optional[threading.Event] = None,
    yield_every_ms: float = 16.0,
    yielder: Optional[Yielder] = None,
    clock: Optional[Clock] = None,
) -> SearchResult:
    """
    Count completions of state with the cooperative counter.

    Args:
        state: Board to complete; restored before returning
        max_count: Stop after this many solutions
        timeout_ms: Wall-clock budget
        max_depth: Depth bound for the recursion
        cancel_flag: Event that stops the search when set
        yield_every_ms: Minimum time between yields (<= 0 disables yielding)
        yielder: Called at yield points (defaults to pumping the Qt event loop)
        clock: Optional time source in seconds (for tests)

    Returns:
        SearchResult (aborted=True if cancelled)
    """
    limits = SearchLimits(max_count=max_count, timeout_ms=timeout_ms, max_depth=max_depth)
    context = SearchContext(yield_every_ms=yield_every_ms)
    if cancel_flag is not None:
        context.cancel_flag = cancel_flag
    if yielder is not None:
        context.yielder = yielder
    if clock is not None:
        context.clock = clock
    return CooperativeCounter().count(state, limits, context)
