"""
Candidate Module - A single cell/mark assignment proposed for verification.
"""

from dataclasses import dataclass

from .board import Cell, Mark


@dataclass(frozen=True)
class Candidate:
    """
    A claim that one cell is forced to hold a given mark.

    Produced by the technique layer; consumed by the forced-cell verifier.

    Attributes:
        row: Row index
        col: Column index
        mark: Asserted mark (CONFIRMED or EXCLUDED, never UNSET)
    """
    row: int
    col: int
    mark: Mark

    def __post_init__(self):
        if self.mark is Mark.UNSET:
            raise ValueError("A candidate must assert CONFIRMED or EXCLUDED")

    @classmethod
    def from_cell_index(cls, index: int, size: int, mark: Mark) -> "Candidate":
        """
        Create a Candidate from a flat row-major cell index.

        Args:
            index: row * size + col
            size: Board size
            mark: Asserted mark

        Returns:
            Candidate instance
        """
        row, col = divmod(index, size)
        return cls(row=row, col=col, mark=mark)

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)

    @property
    def opposite(self) -> Mark:
        """The mark assumed when trying to refute this candidate."""
        return self.mark.opposite()

    @property
    def label(self) -> str:
        """'star' or 'cross', as used in rendered proofs."""
        return mark_label(self.mark)

    def key(self) -> str:
        return f"{self.row},{self.col}:{self.mark.value}"


def mark_label(mark: Mark) -> str:
    if mark is Mark.CONFIRMED:
        return "star"
    if mark is Mark.EXCLUDED:
        return "cross"
    return "empty"
