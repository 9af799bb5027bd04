"""
Feasibility Module - Pure predicates over a board and its unit counts.

UnitCounts tracks confirmed and unset totals for every row, column and
region. The search builds one at entry and keeps it current with
place()/undo() so the feasibility bound never rescans the grid.
"""

from typing import Dict, Iterator, List

from .board import BoardState, Cell, Mark


def neighbors8(row: int, col: int, size: int) -> Iterator[Cell]:
    """Yield the in-bounds Chebyshev neighbours of a cell."""
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            nr, nc = row + dr, col + dc
            if 0 <= nr < size and 0 <= nc < size:
                yield nr, nc


class UnitCounts:
    """
    Confirmed and unset counts per row, column and region.

    Attributes:
        required: Stars required per unit
        row_stars, col_stars, row_unset, col_unset: Per-index lists
        region_stars, region_unset: Per-region-id dicts
    """

    def __init__(self, state: BoardState):
        definition = state.definition
        size = definition.size
        self.required = definition.required_per_unit
        self._regions = definition.regions

        self.row_stars: List[int] = [0] * size
        self.col_stars: List[int] = [0] * size
        self.row_unset: List[int] = [0] * size
        self.col_unset: List[int] = [0] * size
        self.region_stars: Dict[int, int] = {rid: 0 for rid in definition.region_ids}
        self.region_unset: Dict[int, int] = {rid: 0 for rid in definition.region_ids}

        for r, row in enumerate(state.cells):
            for c, mark in enumerate(row):
                region_id = self._regions[r][c]
                if mark is Mark.CONFIRMED:
                    self.row_stars[r] += 1
                    self.col_stars[c] += 1
                    self.region_stars[region_id] += 1
                elif mark is Mark.UNSET:
                    self.row_unset[r] += 1
                    self.col_unset[c] += 1
                    self.region_unset[region_id] += 1

    def place(self, row: int, col: int, mark: Mark) -> None:
        """Record that an unset cell now holds mark."""
        region_id = self._regions[row][col]
        self.row_unset[row] -= 1
        self.col_unset[col] -= 1
        self.region_unset[region_id] -= 1
        if mark is Mark.CONFIRMED:
            self.row_stars[row] += 1
            self.col_stars[col] += 1
            self.region_stars[region_id] += 1

    def undo(self, row: int, col: int, mark: Mark) -> None:
        """Reverse a place() with the same arguments."""
        region_id = self._regions[row][col]
        self.row_unset[row] += 1
        self.col_unset[col] += 1
        self.region_unset[region_id] += 1
        if mark is Mark.CONFIRMED:
            self.row_stars[row] -= 1
            self.col_stars[col] -= 1
            self.region_stars[region_id] -= 1

    def has_quota_room(self, row: int, col: int) -> bool:
        """True if the cell's row, column and region are all below quota."""
        k = self.required
        return (
            self.row_stars[row] < k
            and self.col_stars[col] < k
            and self.region_stars[self._regions[row][col]] < k
        )

    def has_overfull_unit(self) -> bool:
        k = self.required
        return (
            any(n > k for n in self.row_stars)
            or any(n > k for n in self.col_stars)
            or any(n > k for n in self.region_stars.values())
        )

    def can_reach_quota(self) -> bool:
        """
        Feasibility bound: every unit can still end with exactly the quota.

        Necessary, not sufficient: it ignores adjacency between the
        remaining unset cells.
        """
        k = self.required
        for stars, unset in zip(self.row_stars, self.row_unset):
            if stars > k or k - stars > unset:
                return False
        for stars, unset in zip(self.col_stars, self.col_unset):
            if stars > k or k - stars > unset:
                return False
        for region_id, stars in self.region_stars.items():
            if stars > k or k - stars > self.region_unset[region_id]:
                return False
        return True

    def all_exact(self) -> bool:
        """True if every unit holds exactly the quota."""
        k = self.required
        return (
            all(n == k for n in self.row_stars)
            and all(n == k for n in self.col_stars)
            and all(n == k for n in self.region_stars.values())
        )


def can_place_star(state: BoardState, counts: UnitCounts, row: int, col: int) -> bool:
    """
    Check whether a star may be placed at (row, col) right now.

    Args:
        state: Current board (read only)
        counts: Unit counts matching state
        row: Row index (in bounds)
        col: Column index (in bounds)

    Returns:
        True if quotas, adjacency and the 2x2 rule all allow it
    """
    if not counts.has_quota_room(row, col):
        return False

    cells = state.cells
    size = state.size
    for nr, nc in neighbors8(row, col, size):
        if cells[nr][nc] is Mark.CONFIRMED:
            return False

    # Every 2x2 window containing the cell; checked separately from adjacency.
    for r0 in (row - 1, row):
        for c0 in (col - 1, col):
            if r0 < 0 or c0 < 0 or r0 + 1 >= size or c0 + 1 >= size:
                continue
            others = 0
            for br in (r0, r0 + 1):
                for bc in (c0, c0 + 1):
                    if (br, bc) != (row, col) and cells[br][bc] is Mark.CONFIRMED:
                        others += 1
            if others >= 1:
                return False

    return True


def has_adjacent_stars(state: BoardState) -> bool:
    """True if any two confirmed cells touch, diagonals included."""
    cells = state.cells
    size = state.size
    for r, c in state.confirmed_cells():
        for nr, nc in neighbors8(r, c, size):
            if cells[nr][nc] is Mark.CONFIRMED:
                return True
    return False


def is_structurally_invalid(state: BoardState, counts: UnitCounts) -> bool:
    """
    Exact fast-reject test: the grid already breaks a hard constraint.

    A True result means the board has no completion at all.
    """
    return counts.has_overfull_unit() or has_adjacent_stars(state)
