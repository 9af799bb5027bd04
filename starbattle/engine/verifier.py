"""
Forced-Cell Verifier Module - Proves or refutes a candidate mark by double negation.

To check that a cell is forced to mark M, assume the opposite mark and ask
the solution counter whether any completion exists:

    no completion, search exhaustive  -> PROVED       (M is forced)
    at least one completion           -> DISPROVED    (M is not forced)
    anything else (timeout, cap)      -> INCONCLUSIVE (never reported as forced)

Every result carries a three-step proof and is written through the cache,
including inconclusive ones.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .base import SolutionCounter
from .board import BoardState, Mark
from .cache import VerificationCache, get_default_cache, make_verification_key
from .candidate import Candidate
from .context import SearchContext, SearchLimits
from .counters import BlockingCounter
from .proof import (
    NOT_FORCED,
    AssumptionStep,
    ConclusionStep,
    SearchResultStep,
    VerificationStatus,
    VerifiedCandidate,
    forced_conclusion,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyOptions:
    """
    Per-check bounds for the verifier.

    Attributes:
        per_check_timeout_ms: Timeout for each opposite-assumption search
        max_solutions_to_find: Count cap; only existence matters, so 1
    """
    per_check_timeout_ms: float = 250.0
    max_solutions_to_find: int = 1

    def __post_init__(self):
        if self.max_solutions_to_find < 1:
            raise ValueError(
                f"max_solutions_to_find must be at least 1, got {self.max_solutions_to_find}"
            )


class ForcedCellVerifier:
    """
    Verifies candidate assignments against a board.

    Never mutates the caller's state: the opposite assumption is applied to
    a clone.

    Attributes:
        cache: Verification cache (shared default if not given)
        counter: Solution counter used for the search (blocking by default)
    """

    def __init__(self, cache: Optional[VerificationCache] = None,
                 counter: Optional[SolutionCounter] = None):
        self.cache = cache if cache is not None else get_default_cache()
        self.counter = counter if counter is not None else BlockingCounter()

    def verify(self, state: BoardState, candidate: Candidate,
               options: Optional[VerifyOptions] = None,
               context: Optional[SearchContext] = None) -> VerifiedCandidate:
        """
        Decide whether candidate.mark is forced at candidate's cell.

        Args:
            state: Current board (not modified)
            candidate: Cell and asserted mark
            options: Timeout and count cap for the search
            context: Optional search context (clock, cancel flag) for the counter

        Returns:
            VerifiedCandidate with status and a three-step proof
        """
        options = options or VerifyOptions()
        key = make_verification_key(state, candidate)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Verification cache hit for {candidate.key()}")
            return cached

        assumed = candidate.opposite
        assumption = AssumptionStep(cell=candidate.cell, assumed=assumed)

        derived = state.clone()
        current = derived.get_cell(candidate.row, candidate.col)
        if current is candidate.mark:
            # The cell already holds the asserted mark, so the opposite is impossible.
            search_step = SearchResultStep(
                solutions_found=0,
                timed_out=False,
                capped_at_max=False,
                timeout_ms=options.per_check_timeout_ms,
                max_count=options.max_solutions_to_find,
                immediate_contradiction=True,
            )
            status = VerificationStatus.PROVED
        else:
            derived.set_cell(candidate.row, candidate.col, assumed)
            limits = SearchLimits(
                max_count=options.max_solutions_to_find,
                timeout_ms=options.per_check_timeout_ms,
            )
            result = self.counter.count(derived, limits, context)
            search_step = SearchResultStep(
                solutions_found=result.count,
                timed_out=result.timed_out,
                capped_at_max=result.capped_at_max,
                timeout_ms=options.per_check_timeout_ms,
                max_count=options.max_solutions_to_find,
                aborted=result.aborted,
                depth_limited=result.metrics.depth_limited,
            )
            status = _verdict(search_step)

        if status is VerificationStatus.PROVED:
            conclusion = forced_conclusion(candidate.mark)
        else:
            conclusion = NOT_FORCED

        verified = VerifiedCandidate(
            status=status,
            candidate=candidate,
            proof=(
                assumption,
                search_step,
                ConclusionStep(conclusion=conclusion, cell=candidate.cell),
            ),
        )
        self.cache.set(key, verified)
        logger.debug(
            f"Verified {candidate.key()}: {status.value} "
            f"(solutions={search_step.solutions_found}, reason={search_step.stop_reason})"
        )
        return verified


def _verdict(step: SearchResultStep) -> VerificationStatus:
    """Soundness-first verdict rule."""
    if step.solutions_found > 0:
        return VerificationStatus.DISPROVED
    if step.stop_reason is None:
        return VerificationStatus.PROVED
    return VerificationStatus.INCONCLUSIVE


def verify_forced_cell(state: BoardState, candidate: Candidate,
                       options: Optional[VerifyOptions] = None,
                       cache: Optional[VerificationCache] = None) -> VerifiedCandidate:
    """Verify one candidate with the blocking counter and the given (or shared) cache."""
    return ForcedCellVerifier(cache=cache).verify(state, candidate, options)


def verify_candidates(state: BoardState, candidates: Iterable[Candidate],
                      options: Optional[VerifyOptions] = None,
                      verifier: Optional[ForcedCellVerifier] = None
                      ) -> Optional[VerifiedCandidate]:
    """
    Turn a technique's proposals into at most one proved assignment.

    Candidates already satisfied by the board, or conflicting with a mark it
    already holds, are dropped; duplicates are verified once. Candidates are
    verified in order and the first proved one is returned.

    Args:
        state: Current board (not modified)
        candidates: Proposed assignments, in the technique's order
        options: Per-check bounds
        verifier: Verifier to use (a default one on the shared cache if None)

    Returns:
        The first PROVED VerifiedCandidate, or None
    """
    verifier = verifier or ForcedCellVerifier()
    seen: Set[str] = set()
    pending: List[Candidate] = []
    for candidate in candidates:
        if state.get_cell(candidate.row, candidate.col) is not Mark.UNSET:
            continue
        if candidate.key() in seen:
            continue
        seen.add(candidate.key())
        pending.append(candidate)

    for candidate in pending:
        verified = verifier.verify(state, candidate, options)
        if verified.is_proved:
            return verified

    logger.debug(f"No proved assignment among {len(pending)} candidates")
    return None
