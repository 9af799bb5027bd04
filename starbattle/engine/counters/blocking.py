"""
Blocking Counter - Runs the search to completion on the caller's stack.
"""

import math
from typing import Optional

from ..base import SearchRun, SolutionCounter
from ..board import BoardState
from ..context import Clock, SearchContext, SearchLimits
from ..factory import register_counter
from ..result import SearchResult


@register_counter
class BlockingCounter(SolutionCounter):
    """
    Counter that never suspends and ignores the cancel flag.

    Stops only on its limits: timeout, count cap and depth bound.
    """
    name = "blocking"
    description = "Blocking - exhaustive search bounded by time, count and depth"

    def _on_entry(self, run: SearchRun) -> bool:
        return False

    def _on_node(self, run: SearchRun) -> None:
        pass


def count_solutions(
    state: BoardState,
    max_count: float = math.inf,
    timeout_ms: float = 2000.0,
    max_depth: float = math.inf,
    clock: Optional[Clock] = None,
) -> SearchResult:
    """
    Count completions of state with the blocking counter.

    Args:
        state: Board to complete; restored before returning
        max_count: Stop after this many solutions
        timeout_ms: Wall-clock budget
        max_depth: Depth bound for the recursion
        clock: Optional time source in seconds (for tests)

    Returns:
        SearchResult
    """
    limits = SearchLimits(max_count=max_count, timeout_ms=timeout_ms, max_depth=max_depth)
    context = SearchContext(clock=clock) if clock is not None else SearchContext()
    return BlockingCounter().count(state, limits, context)
