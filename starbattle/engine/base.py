"""
Base Counter Module - Abstract solution counter and the shared search step.

Both counter variants run the same backtracking search. They differ only in
two hooks: what happens at every recursive entry (cancellation) and at every
visited node (cooperative yielding). The blocking variant implements both as
no-ops.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .board import BoardState, Cell, Mark
from .context import SearchContext, SearchLimits
from .feasibility import UnitCounts, can_place_star, is_structurally_invalid
from .result import (
    STOP_CANCELLED,
    STOP_CAP,
    STOP_EXHAUSTED,
    STOP_FAST_REJECT,
    STOP_TIMEOUT,
    SearchMetrics,
    SearchResult,
)

logger = logging.getLogger(__name__)


class SearchRun:
    """
    Mutable bookkeeping for one count() call.

    Owns the board's grid for the duration of the call; every write goes
    through placed(), which restores the cell on every exit path.
    """

    def __init__(self, state: BoardState, counts: UnitCounts,
                 limits: SearchLimits, context: SearchContext, counter_name: str):
        self.state = state
        self.counts = counts
        self.limits = limits
        self.context = context
        self.order: List[Cell] = state.unset_cells()
        self.count = 0
        self.timed_out = False
        self.aborted = False
        self.last_yield = context.start_time
        self.metrics = SearchMetrics(counter_name=counter_name)

    @property
    def halted(self) -> bool:
        return self.timed_out or self.aborted or self.count >= self.limits.max_count

    def abort(self) -> None:
        """Stop now; an aborted result is never trusted as final."""
        self.aborted = True
        self.timed_out = True

    @contextmanager
    def placed(self, row: int, col: int, mark: Mark) -> Iterator[None]:
        """Write mark into an unset cell and undo it when the block exits."""
        self.state.cells[row][col] = mark
        self.counts.place(row, col, mark)
        try:
            yield
        finally:
            self.counts.undo(row, col, mark)
            self.state.cells[row][col] = Mark.UNSET


class SolutionCounter(ABC):
    """
    Abstract base class for solution counters.

    Subclasses define name and description class attributes and implement
    the two search hooks.

    Attributes:
        name: Short identifier used by the factory
        description: Human-readable description
    """
    name: str = "base"
    description: str = "Base counter"

    def count(self, state: BoardState, limits: Optional[SearchLimits] = None,
              context: Optional[SearchContext] = None) -> SearchResult:
        """
        Count completions of a partial board.

        The grid of state is mutated during the search and restored before
        returning. The caller must not share state with another search while
        this runs.

        Args:
            state: Board to complete (may hold confirmed/excluded marks)
            limits: Count cap, timeout and depth bound
            context: Clock, cancel flag and yield settings

        Returns:
            SearchResult with count and stop flags
        """
        limits = limits or SearchLimits()
        context = context or SearchContext()
        context.start()

        counts = UnitCounts(state)
        run = SearchRun(state, counts, limits, context, self.name)

        if is_structurally_invalid(state, counts):
            run.metrics.stop_reason = STOP_FAST_REJECT
            logger.debug(f"[{self.name}] Fast reject: board already breaks a hard constraint")
            return self._build_result(run)

        logger.debug(
            f"[{self.name}] Counting: {len(run.order)} unset cells, "
            f"max_count={limits.max_count}, timeout={limits.timeout_ms}ms"
        )
        self._search(run, 0)
        return self._build_result(run)

    def _search(self, run: SearchRun, depth: int) -> None:
        """Recursive step over the fixed row-major order of unset cells."""
        if self._on_entry(run):
            return
        if run.context.remaining_ms(run.limits) < 0:
            run.timed_out = True
            return
        if run.count >= run.limits.max_count:
            return
        if depth > run.limits.max_depth:
            run.metrics.depth_limited = True
            return
        if not run.counts.can_reach_quota():
            run.metrics.pruned_branches += 1
            return

        run.metrics.nodes_visited += 1
        self._on_node(run)
        if run.halted:
            return

        if depth == len(run.order):
            # Single source of truth for validity.
            if run.counts.all_exact():
                run.count += 1
            return

        row, col = run.order[depth]

        if can_place_star(run.state, run.counts, row, col):
            with run.placed(row, col, Mark.CONFIRMED):
                self._search(run, depth + 1)
            if run.halted:
                return

        with run.placed(row, col, Mark.EXCLUDED):
            self._search(run, depth + 1)

    @abstractmethod
    def _on_entry(self, run: SearchRun) -> bool:
        """
        Called at every recursive entry before any other check.

        Returns:
            True if the search must stop immediately
        """

    @abstractmethod
    def _on_node(self, run: SearchRun) -> None:
        """Called once per visited node, after nodes_visited is incremented."""

    def _build_result(self, run: SearchRun) -> SearchResult:
        """Build SearchResult from run bookkeeping."""
        metrics = run.metrics
        metrics.computation_time_ms = run.context.elapsed_ms()
        capped = run.count >= run.limits.max_count and not run.timed_out

        if metrics.stop_reason != STOP_FAST_REJECT:
            if run.aborted:
                metrics.stop_reason = STOP_CANCELLED
            elif run.timed_out:
                metrics.stop_reason = STOP_TIMEOUT
            elif capped:
                metrics.stop_reason = STOP_CAP
            else:
                metrics.stop_reason = STOP_EXHAUSTED

        if run.timed_out:
            logger.info(
                f"[{self.name}] Stopped early ({metrics.stop_reason}) after "
                f"{metrics.nodes_visited} nodes, {run.count} solutions"
            )
        else:
            logger.debug(
                f"[{self.name}] Done ({metrics.stop_reason}): count={run.count}, "
                f"nodes={metrics.nodes_visited}, pruned={metrics.pruned_branches}, "
                f"{metrics.computation_time_ms:.1f}ms"
            )

        return SearchResult(
            count=run.count,
            timed_out=run.timed_out,
            capped_at_max=capped,
            aborted=run.aborted,
            metrics=metrics,
        )
