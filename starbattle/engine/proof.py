"""
Proof Module - Structured proof trail produced by the forced-cell verifier.

A trail always has three steps: the opposite assumption, the raw search
result, and the conclusion. The search-result step keeps every reason the
search may have stopped early, even though the rendered sentence only
names the first one that applies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from .board import Cell, Mark
from .candidate import Candidate, mark_label

FORCED_STAR = "forced-star"
FORCED_CROSS = "forced-cross"
NOT_FORCED = "not-forced"


class VerificationStatus(Enum):
    """
    Verdict of a forced-cell check.

    States:
        PROVED: opposite assumption has no completion, search was exhaustive
        DISPROVED: opposite assumption still allows a completion
        INCONCLUSIVE: timeout or cap with nothing found; never a hint
    """
    PROVED = "proved"
    DISPROVED = "disproved"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class AssumptionStep:
    cell: Cell
    assumed: Mark
    kind: str = "assumption"


@dataclass(frozen=True)
class SearchResultStep:
    """
    Raw counter outcome under the opposite assumption, with the limits used.

    Attributes:
        immediate_contradiction: The cell already held the asserted mark, so
            no search was run
    """
    solutions_found: int
    timed_out: bool
    capped_at_max: bool
    timeout_ms: float
    max_count: float
    aborted: bool = False
    depth_limited: bool = False
    immediate_contradiction: bool = False
    kind: str = "search-result"

    @property
    def stop_reason(self) -> Optional[str]:
        """Why the search stopped early, or None if it ran to exhaustion."""
        if self.aborted:
            return "cancelled"
        if self.timed_out:
            return "timeout"
        if self.capped_at_max:
            return "solution cap"
        if self.depth_limited:
            return "depth bound"
        return None


@dataclass(frozen=True)
class ConclusionStep:
    conclusion: str
    cell: Cell
    kind: str = "conclusion"


ProofStep = Union[AssumptionStep, SearchResultStep, ConclusionStep]


def forced_conclusion(mark: Mark) -> str:
    return FORCED_STAR if mark is Mark.CONFIRMED else FORCED_CROSS


@dataclass(frozen=True)
class VerifiedCandidate:
    """
    Verifier output consumed by the hint layer.

    Attributes:
        status: Verdict
        candidate: The assignment that was checked
        proof: Three-step trail (assumption, search-result, conclusion)
    """
    status: VerificationStatus
    candidate: Candidate
    proof: Tuple[ProofStep, ...]

    @property
    def is_proved(self) -> bool:
        return self.status is VerificationStatus.PROVED

    @property
    def search_step(self) -> Optional[SearchResultStep]:
        return _find_step(self.proof, SearchResultStep)

    def proof_summary(self) -> str:
        return render_proof_summary(self.proof, self.candidate)


def _find_step(proof: Sequence[ProofStep], step_type):
    for step in proof:
        if isinstance(step, step_type):
            return step
    return None


def render_proof_summary(proof: Sequence[ProofStep], candidate: Candidate) -> str:
    """
    Render a proof trail as one sentence for the hint explanation.

    Args:
        proof: Steps produced by the verifier
        candidate: The assignment the proof is about

    Returns:
        Human-readable summary
    """
    assumed = _find_step(proof, AssumptionStep)
    search = _find_step(proof, SearchResultStep)

    if assumed is not None:
        row, col = assumed.cell
        assumed_text = f"Assume ({row},{col}) is a {mark_label(assumed.assumed)}."
    else:
        assumed_text = "Assume the opposite."

    if search is None:
        return f"{assumed_text} No valid completion exists, so it is forced."

    if search.immediate_contradiction:
        return (
            f"{assumed_text} That contradicts the current marks, therefore "
            f"({candidate.row},{candidate.col}) must be a {candidate.label}."
        )

    if search.solutions_found > 0:
        return f"{assumed_text} At least one completion exists, so it is not forced."

    reason = search.stop_reason
    if reason is not None:
        return f"{assumed_text} Search was inconclusive ({reason})."

    return (
        f"{assumed_text} The solver found 0 valid completions, therefore "
        f"({candidate.row},{candidate.col}) must be a {candidate.label}."
    )
