"""
Board Module - Star Battle puzzle definition and mutable board state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

Cell = Tuple[int, int]


class InvalidBoardError(ValueError):
    """Raised when a board definition or grid breaks a structural invariant."""


class Mark(Enum):
    """
    The three marks a cell can hold.

    Values are the one-character codes used in string grids and cache keys.
    """
    UNSET = "."
    CONFIRMED = "*"
    EXCLUDED = "x"

    def opposite(self) -> "Mark":
        """Swap confirmed and excluded. Unset has no opposite."""
        if self is Mark.CONFIRMED:
            return Mark.EXCLUDED
        if self is Mark.EXCLUDED:
            return Mark.CONFIRMED
        raise ValueError("UNSET has no opposite mark")

    @classmethod
    def from_code(cls, code: str) -> "Mark":
        try:
            return cls(code)
        except ValueError:
            raise InvalidBoardError(f"Unknown mark code: {code!r}") from None


@dataclass(frozen=True)
class BoardDefinition:
    """
    Immutable puzzle definition.

    Attributes:
        size: Grid is size x size
        required_per_unit: Stars required in every row, column and region
        regions: Tuple of tuples mapping (row, col) to a region id
    """
    size: int
    required_per_unit: int
    regions: Tuple[Tuple[int, ...], ...]
    _region_cells: Dict[int, Tuple[Cell, ...]] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self):
        if self.size < 1:
            raise InvalidBoardError(f"Board size must be positive, got {self.size}")
        if self.required_per_unit < 1:
            raise InvalidBoardError(
                f"required_per_unit must be positive, got {self.required_per_unit}"
            )
        if len(self.regions) != self.size or any(len(row) != self.size for row in self.regions):
            raise InvalidBoardError(
                f"Region grid must be {self.size}x{self.size}"
            )

        region_cells: Dict[int, List[Cell]] = {}
        for r, row in enumerate(self.regions):
            for c, region_id in enumerate(row):
                region_cells.setdefault(region_id, []).append((r, c))
        object.__setattr__(
            self,
            "_region_cells",
            {rid: tuple(cells) for rid, cells in region_cells.items()},
        )

    @classmethod
    def from_2d_list(cls, regions: Sequence[Sequence[int]],
                     required_per_unit: int) -> "BoardDefinition":
        """
        Create a definition from a 2D list of region ids.

        Args:
            regions: Square 2D list of region ids
            required_per_unit: Stars per row/column/region

        Returns:
            BoardDefinition instance
        """
        grid = tuple(tuple(int(v) for v in row) for row in regions)
        return cls(size=len(grid), required_per_unit=required_per_unit, regions=grid)

    @classmethod
    def from_strings(cls, lines: Sequence[str], required_per_unit: int) -> "BoardDefinition":
        """
        Create a definition from whitespace-separated region ids, one row per line.

        Blank lines are ignored so triple-quoted blocks can be passed through
        ``str.splitlines()`` directly.
        """
        rows = [line.split() for line in lines if line.strip()]
        try:
            return cls.from_2d_list([[int(tok) for tok in row] for row in rows],
                                    required_per_unit)
        except ValueError as e:
            if isinstance(e, InvalidBoardError):
                raise
            raise InvalidBoardError(f"Region ids must be integers: {e}") from e

    @classmethod
    def row_regions(cls, size: int, required_per_unit: int) -> "BoardDefinition":
        """Definition where every row is its own region."""
        return cls.from_2d_list([[r] * size for r in range(size)], required_per_unit)

    @property
    def region_ids(self) -> List[int]:
        """Sorted distinct region ids."""
        return sorted(self._region_cells)

    def region_of(self, row: int, col: int) -> int:
        return self.regions[row][col]

    def cells_of_region(self, region_id: int) -> Tuple[Cell, ...]:
        """Cells belonging to a region (empty tuple if the id is unknown)."""
        return self._region_cells.get(region_id, ())


@dataclass
class BoardState:
    """
    A definition plus a mutable grid of marks.

    The grid is only mutated through explicit writes. Searches that write
    into it restore it before returning; anything that needs an independent
    copy calls clone().

    Attributes:
        definition: Immutable puzzle definition (shared between clones)
        cells: List of rows, each a list of Mark values
    """
    definition: BoardDefinition
    cells: List[List[Mark]]

    def __post_init__(self):
        size = self.definition.size
        if len(self.cells) != size or any(len(row) != size for row in self.cells):
            raise InvalidBoardError(f"Cell grid must be {size}x{size}")

    @classmethod
    def empty(cls, definition: BoardDefinition) -> "BoardState":
        """Create a state with every cell unset."""
        size = definition.size
        return cls(definition=definition,
                   cells=[[Mark.UNSET] * size for _ in range(size)])

    @classmethod
    def from_strings(cls, definition: BoardDefinition, rows: Sequence[str]) -> "BoardState":
        """
        Create a state from mark codes, one string per row.

        Whitespace inside a row is ignored, so "* . x" and "*.x" are equivalent.
        """
        grid = [
            [Mark.from_code(ch) for ch in row if not ch.isspace()]
            for row in rows if row.strip()
        ]
        return cls(definition=definition, cells=grid)

    @property
    def size(self) -> int:
        return self.definition.size

    @property
    def required_per_unit(self) -> int:
        return self.definition.required_per_unit

    def get_cell(self, row: int, col: int) -> Mark:
        return self.cells[row][col]

    def set_cell(self, row: int, col: int, mark: Mark) -> None:
        self.cells[row][col] = mark

    def clone(self) -> "BoardState":
        """Copy the grid; the immutable definition is shared."""
        return BoardState(definition=self.definition,
                          cells=[list(row) for row in self.cells])

    def diff(self, other: "BoardState") -> List[Cell]:
        """
        Find cells whose marks differ between this state and another.

        Args:
            other: Another BoardState of the same size

        Returns:
            List of (row, col) tuples where marks differ
        """
        if not isinstance(other, BoardState):
            raise TypeError("Can only diff against another BoardState")
        return [
            (r, c)
            for r in range(self.size)
            for c in range(self.size)
            if self.cells[r][c] != other.cells[r][c]
        ]

    def count_marks(self, mark: Mark) -> int:
        return sum(row.count(mark) for row in self.cells)

    def unset_cells(self) -> List[Cell]:
        """Unset cells in row-major order."""
        return self._cells_with(Mark.UNSET)

    def confirmed_cells(self) -> List[Cell]:
        return self._cells_with(Mark.CONFIRMED)

    def _cells_with(self, mark: Mark) -> List[Cell]:
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, value in enumerate(row)
            if value is mark
        ]

    def to_strings(self) -> List[str]:
        return ["".join(mark.value for mark in row) for row in self.cells]

    def canonical_key(self) -> str:
        """
        Stable string for the board content.

        Includes size and required-per-unit so boards of different shapes
        never collide. Region layout is not included; callers that reuse a
        cache across different layouts of the same size must clear it.
        """
        return f"{self.size}:{self.required_per_unit}:" + "|".join(self.to_strings())
