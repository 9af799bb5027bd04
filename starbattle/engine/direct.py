"""
Direct Solver Module - Row-pair search that manufactures one example solution.

Used to build fixture solutions quickly. It only handles two stars per unit
and only searches row by row over column pairs, so a None result means this
restricted search failed, not that the puzzle has no solution.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Tuple

from .board import BoardDefinition, BoardState, Mark

logger = logging.getLogger(__name__)

STARS_PER_ROW = 2


def _row_pairs(size: int) -> List[Tuple[int, int]]:
    """Column pairs in lexicographic order that do not touch each other."""
    return [(c1, c2) for c1, c2 in combinations(range(size), 2) if c2 - c1 >= 2]


def solve_row_pairs(definition: BoardDefinition) -> Optional[BoardState]:
    """
    Find one solution by committing exactly two stars per row.

    Args:
        definition: Puzzle definition with required_per_unit == 2

    Returns:
        Complete BoardState (stars confirmed, every other cell excluded),
        or None if the definition is unsupported or the search failed
    """
    if definition.required_per_unit != STARS_PER_ROW:
        logger.debug(
            f"Direct solver skipped: needs {STARS_PER_ROW} stars per unit, "
            f"got {definition.required_per_unit}"
        )
        return None

    size = definition.size
    quota = definition.required_per_unit
    regions = definition.regions
    pairs = _row_pairs(size)

    col_counts = [0] * size
    region_counts: Dict[int, int] = {rid: 0 for rid in definition.region_ids}
    row_stars: List[Tuple[int, int]] = []

    # cells_below[r][rid]: cells of region rid in rows r+1..size-1
    cells_below: List[Dict[int, int]] = []
    running: Dict[int, int] = {rid: 0 for rid in definition.region_ids}
    for r in range(size - 1, -1, -1):
        cells_below.append(dict(running))
        for rid in regions[r]:
            running[rid] += 1
    cells_below.reverse()

    def has_capacity_after(row: int) -> bool:
        remaining_rows = size - (row + 1)
        for count in col_counts:
            if count > quota or count + remaining_rows < quota:
                return False
        below = cells_below[row]
        for rid, count in region_counts.items():
            if count + below[rid] < quota:
                return False
        return True

    def solve_row(row: int, prev_cols: Tuple[int, ...]) -> bool:
        if row == size:
            return (
                all(count == quota for count in col_counts)
                and all(count == quota for count in region_counts.values())
            )

        for pair in pairs:
            if any(abs(pc - cc) <= 1 for pc in prev_cols for cc in pair):
                continue
            if any(col_counts[cc] >= quota for cc in pair):
                continue
            # Both stars may share a region, so count them together.
            needed: Dict[int, int] = {}
            for cc in pair:
                rid = regions[row][cc]
                needed[rid] = needed.get(rid, 0) + 1
            if any(region_counts[rid] + n > quota for rid, n in needed.items()):
                continue

            for cc in pair:
                col_counts[cc] += 1
                region_counts[regions[row][cc]] += 1
            row_stars.append(pair)

            if has_capacity_after(row) and solve_row(row + 1, pair):
                return True

            row_stars.pop()
            for cc in pair:
                col_counts[cc] -= 1
                region_counts[regions[row][cc]] -= 1

        return False

    if not solve_row(0, ()):
        logger.debug(f"Direct solver found no row-pair solution for {size}x{size}")
        return None

    state = BoardState(
        definition=definition,
        cells=[[Mark.EXCLUDED] * size for _ in range(size)],
    )
    for r, (c1, c2) in enumerate(row_stars):
        state.set_cell(r, c1, Mark.CONFIRMED)
        state.set_cell(r, c2, Mark.CONFIRMED)
    return state
