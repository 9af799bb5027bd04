"""
Validation Module - Rule checks and human-readable issues for boards.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .board import BoardDefinition, BoardState, Cell, Mark
from .feasibility import neighbors8


def format_row(row: int) -> str:
    return f"Row {row + 1}"


def format_col(col: int) -> str:
    return f"Column {col + 1}"


def region_label(region_id: int) -> str:
    """Regions 0-25 are shown as letters A-Z, anything else as a number."""
    if 0 <= region_id < 26:
        return chr(ord("A") + region_id)
    return str(region_id)


@dataclass
class RuleViolations:
    """
    Units and cells currently breaking a rule.

    Attributes:
        rows: Rows with too many stars
        cols: Columns with too many stars
        regions: Regions with too many stars
        adjacent_cells: Stars touching another star
    """
    rows: Set[int] = field(default_factory=set)
    cols: Set[int] = field(default_factory=set)
    regions: Set[int] = field(default_factory=set)
    adjacent_cells: Set[Cell] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not (self.rows or self.cols or self.regions or self.adjacent_cells)


def _star_counts(state: BoardState):
    size = state.size
    rows = [0] * size
    cols = [0] * size
    regions: Dict[int, int] = {}
    for r, c in state.confirmed_cells():
        rows[r] += 1
        cols[c] += 1
        rid = state.definition.region_of(r, c)
        regions[rid] = regions.get(rid, 0) + 1
    return rows, cols, regions


def get_rule_violations(state: BoardState) -> RuleViolations:
    """Collect every overfull unit and every touching star."""
    violations = RuleViolations()
    k = state.required_per_unit
    rows, cols, regions = _star_counts(state)

    violations.rows = {r for r, n in enumerate(rows) if n > k}
    violations.cols = {c for c, n in enumerate(cols) if n > k}
    violations.regions = {rid for rid, n in regions.items() if n > k}

    for r, c in state.confirmed_cells():
        for nr, nc in neighbors8(r, c, state.size):
            if state.cells[nr][nc] is Mark.CONFIRMED:
                violations.adjacent_cells.add((r, c))
                violations.adjacent_cells.add((nr, nc))
    return violations


def validate_state(state: BoardState) -> List[str]:
    """
    Describe every rule the board currently breaks.

    Returns:
        De-duplicated messages in discovery order (empty if the board is legal)
    """
    messages: List[str] = []
    k = state.required_per_unit
    rows, cols, regions = _star_counts(state)

    for r, n in enumerate(rows):
        if n > k:
            messages.append(f"{format_row(r)} has {n} stars (maximum is {k}).")
    for c, n in enumerate(cols):
        if n > k:
            messages.append(f"{format_col(c)} has {n} stars (maximum is {k}).")
    for rid in sorted(regions):
        if regions[rid] > k:
            messages.append(
                f"Region {region_label(rid)} has {regions[rid]} stars (maximum is {k})."
            )

    for r, c in state.confirmed_cells():
        for nr, nc in neighbors8(r, c, state.size):
            if state.cells[nr][nc] is Mark.CONFIRMED:
                a, b = sorted([(r, c), (nr, nc)])
                messages.append(f"Two stars touch at {a} and {b}.")

    return list(dict.fromkeys(messages))


def validate_regions(definition: BoardDefinition) -> List[str]:
    """
    Check the region layout of a standard puzzle.

    A size-n board needs exactly n regions with ids 0..n-1, each owning at
    least one cell.

    Returns:
        List of issues (empty if the layout is valid)
    """
    issues: List[str] = []
    expected = set(range(definition.size))
    present = set(definition.region_ids)

    for rid in sorted(present - expected):
        issues.append(
            f"Region id {rid} is out of range; expected 0-{definition.size - 1}."
        )
    for rid in sorted(expected - present):
        issues.append(f"Region {region_label(rid)} does not appear anywhere on the board.")

    return issues


def is_puzzle_complete(state: BoardState) -> bool:
    """True if no cell is unset, every unit holds exactly the quota and no stars touch."""
    if state.count_marks(Mark.UNSET):
        return False

    k = state.required_per_unit
    rows, cols, regions = _star_counts(state)
    if any(n != k for n in rows) or any(n != k for n in cols):
        return False
    if any(regions.get(rid, 0) != k for rid in state.definition.region_ids):
        return False

    return get_rule_violations(state).is_empty
