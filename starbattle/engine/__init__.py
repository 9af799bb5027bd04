"""
Engine Package - Solution counting and forced-move verification for Star Battle.

This package decides whether a board has completions and whether a proposed
mark is logically forced. Heuristic techniques and hint rendering live
outside it and only consume the results.

Public API:
    - BoardDefinition / BoardState / Mark: Puzzle model
    - Candidate: Proposed cell/mark assignment
    - SearchLimits / SearchContext: Bounds and injected capabilities
    - SearchResult / SearchMetrics: Counter output
    - SolutionCounter: Abstract base for counters
    - count_solutions() / count_solutions_cooperative(): Convenience wrappers
    - create_counter(): Factory function
    - ForcedCellVerifier / verify_forced_cell() / verify_candidates()
    - VerificationCache / clear_verification_cache()
    - solve_row_pairs(): Direct solver for fixture solutions
    - validate_state() / validate_regions() / is_puzzle_complete()

Usage:
    from starbattle.engine import (
        BoardDefinition, BoardState, Candidate, Mark, verify_forced_cell,
    )

    definition = BoardDefinition.from_strings(region_lines, required_per_unit=2)
    state = BoardState.from_strings(definition, mark_lines)

    verified = verify_forced_cell(state, Candidate(3, 4, Mark.CONFIRMED))
    if verified.is_proved:
        print(verified.proof_summary())
"""

# Core data structures
from .board import BoardDefinition, BoardState, Cell, InvalidBoardError, Mark
from .candidate import Candidate
from .context import SearchContext, SearchLimits
from .result import SearchMetrics, SearchResult

# Counter framework
from .base import SolutionCounter
from .factory import (
    create_counter,
    describe_counters,
    get_counter_names,
    get_default_counter_name,
    register_counter,
)

# Import counters to register them
from . import counters
from .counters import count_solutions, count_solutions_cooperative

# Verification
from .cache import VerificationCache, clear_verification_cache, make_verification_key
from .proof import VerificationStatus, VerifiedCandidate, render_proof_summary
from .verifier import ForcedCellVerifier, VerifyOptions, verify_candidates, verify_forced_cell

# Supporting tools
from .direct import solve_row_pairs
from .validation import is_puzzle_complete, validate_regions, validate_state

__all__ = [
    # Data structures
    "BoardDefinition",
    "BoardState",
    "Cell",
    "InvalidBoardError",
    "Mark",
    "Candidate",
    "SearchContext",
    "SearchLimits",
    "SearchMetrics",
    "SearchResult",
    # Counter framework
    "SolutionCounter",
    "create_counter",
    "describe_counters",
    "get_counter_names",
    "get_default_counter_name",
    "register_counter",
    "count_solutions",
    "count_solutions_cooperative",
    # Verification
    "VerificationCache",
    "clear_verification_cache",
    "make_verification_key",
    "VerificationStatus",
    "VerifiedCandidate",
    "render_proof_summary",
    "ForcedCellVerifier",
    "VerifyOptions",
    "verify_candidates",
    "verify_forced_cell",
    # Supporting tools
    "solve_row_pairs",
    "is_puzzle_complete",
    "validate_regions",
    "validate_state",
]
