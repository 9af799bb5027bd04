"""
Result Module - Outcome of a solution counter run.
"""

from dataclasses import dataclass, field

# Why a run stopped
STOP_EXHAUSTED = "exhausted"
STOP_FAST_REJECT = "fast-reject"
STOP_TIMEOUT = "timeout"
STOP_CAP = "cap"
STOP_CANCELLED = "cancelled"


@dataclass
class SearchMetrics:
    """
    Performance metrics for one counter run.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        nodes_visited: Search nodes that passed the stop checks and the feasibility bound
        pruned_branches: Subtrees cut by the feasibility bound
        yields: Times control was handed back to the host (cooperative only)
        counter_name: Name of the counter variant that produced the result
        stop_reason: One of the STOP_* constants
        depth_limited: True if any branch was cut by the depth bound
    """
    computation_time_ms: float = 0.0
    nodes_visited: int = 0
    pruned_branches: int = 0
    yields: int = 0
    counter_name: str = ""
    stop_reason: str = STOP_EXHAUSTED
    depth_limited: bool = False


@dataclass
class SearchResult:
    """
    Result of counting completions of a partial board.

    Callers must check timed_out (and aborted) before trusting count as final.

    Attributes:
        count: Solutions found, never above the max_count limit
        timed_out: Search stopped on the clock (or was cancelled)
        capped_at_max: count reached max_count and the run did not time out
        aborted: Stopped by the cancel flag (cooperative counter only)
        metrics: Performance statistics
    """
    count: int = 0
    timed_out: bool = False
    capped_at_max: bool = False
    aborted: bool = False
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    @property
    def is_exhaustive(self) -> bool:
        """True if the search space was fully explored within its bounds."""
        return not (self.timed_out or self.capped_at_max or self.aborted)
