"""
Tests for feasibility predicates and board validation
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from starbattle.engine import BoardDefinition, BoardState, Mark
from starbattle.engine.feasibility import (
    UnitCounts,
    can_place_star,
    has_adjacent_stars,
    is_structurally_invalid,
    neighbors8,
)
from starbattle.engine.validation import (
    get_rule_violations,
    is_puzzle_complete,
    validate_regions,
    validate_state,
)


def _state(rows, required=1):
    definition = BoardDefinition.row_regions(len(rows), required_per_unit=required)
    return BoardState.from_strings(definition, rows)


def test_neighbors8_stays_in_bounds():
    assert sorted(neighbors8(0, 0, 3)) == [(0, 1), (1, 0), (1, 1)]
    assert len(list(neighbors8(1, 1, 3))) == 8


def test_can_place_star_on_empty_board():
    state = _state(["....", "....", "....", "...."])
    counts = UnitCounts(state)

    assert all(can_place_star(state, counts, r, c) for r in range(4) for c in range(4))


def test_can_place_star_respects_adjacency():
    state = _state(["....", ".*..", "....", "...."], required=2)
    counts = UnitCounts(state)

    for r, c in neighbors8(1, 1, 4):
        assert not can_place_star(state, counts, r, c)
    assert can_place_star(state, counts, 3, 3)
    assert can_place_star(state, counts, 1, 3)


def test_can_place_star_respects_quotas():
    # One star per unit: row 0 and column 0 are already full.
    state = _state(["*...", "....", "...*", "...."])
    counts = UnitCounts(state)

    assert not can_place_star(state, counts, 0, 2)
    assert not can_place_star(state, counts, 3, 0)
    assert not can_place_star(state, counts, 1, 2)
    assert can_place_star(state, counts, 3, 1)


def test_unit_counts_place_and_undo():
    state = _state(["*x..", "....", "....", "...."])
    counts = UnitCounts(state)

    assert counts.row_stars[0] == 1
    assert counts.row_unset[0] == 2
    assert counts.col_unset[0] == 3

    counts.place(1, 2, Mark.CONFIRMED)
    assert counts.row_stars[1] == 1
    assert counts.col_stars[2] == 1
    assert counts.region_unset[1] == 3

    counts.undo(1, 2, Mark.CONFIRMED)
    assert counts.row_stars[1] == 0
    assert counts.region_unset[1] == 4


def test_can_reach_quota():
    assert UnitCounts(_state(["....", "....", "....", "...."])).can_reach_quota()
    # Row 1 cannot get its star any more.
    assert not UnitCounts(_state(["....", "xxxx", "....", "...."])).can_reach_quota()
    # Column 0 cannot either.
    assert not UnitCounts(_state(["x...", "x...", "x...", "x..."])).can_reach_quota()


def test_structural_fast_reject():
    touching = _state(["*...", ".*..", "....", "...."], required=2)
    assert has_adjacent_stars(touching)
    assert is_structurally_invalid(touching, UnitCounts(touching))

    overfull = _state(["*.*.", "....", "....", "...."])
    assert not has_adjacent_stars(overfull)
    assert is_structurally_invalid(overfull, UnitCounts(overfull))

    legal = _state(["*...", "..*.", "....", "...."])
    assert not is_structurally_invalid(legal, UnitCounts(legal))


def test_validate_state_messages():
    state = _state(["*.*.", "....", ".*..", "...."])
    issues = validate_state(state)

    assert "Row 1 has 2 stars (maximum is 1)." in issues
    assert "Region A has 2 stars (maximum is 1)." in issues
    assert not any("touch" in issue for issue in issues)

    touching = _state(["*...", ".*..", "....", "...."], required=2)
    assert validate_state(touching) == ["Two stars touch at (0, 0) and (1, 1)."]


def test_rule_violations(solved_10x10):
    assert get_rule_violations(solved_10x10).is_empty

    broken = solved_10x10.clone()
    broken.set_cell(1, 1, Mark.CONFIRMED)
    violations = get_rule_violations(broken)

    assert violations.rows == {1}
    assert violations.cols == {1}
    assert violations.regions == {1}
    assert (0, 0) in violations.adjacent_cells
    assert (1, 1) in violations.adjacent_cells


def test_validate_regions():
    assert validate_regions(BoardDefinition.row_regions(5, 1)) == []

    missing = BoardDefinition.from_2d_list(
        [[0, 0, 1], [0, 1, 1], [1, 1, 7]], required_per_unit=1
    )
    issues = validate_regions(missing)
    assert "Region id 7 is out of range; expected 0-2." in issues
    assert "Region C does not appear anywhere on the board." in issues


def test_is_puzzle_complete(solved_10x10):
    assert is_puzzle_complete(solved_10x10)

    partial = solved_10x10.clone()
    partial.set_cell(0, 0, Mark.UNSET)
    assert not is_puzzle_complete(partial)

    wrong = solved_10x10.clone()
    wrong.set_cell(0, 0, Mark.EXCLUDED)
    assert not is_puzzle_complete(wrong)
