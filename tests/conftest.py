"""
Shared fixtures for engine tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from starbattle.engine import BoardDefinition, BoardState, Mark, clear_verification_cache


# Star columns per row of a known 10x10, 2-star solution. Every row is its
# own region, so the row quota doubles as the region quota.
SOLVED_STAR_COLUMNS = [
    (0, 5), (2, 7), (4, 9), (1, 6), (3, 8),
    (0, 5), (2, 7), (4, 9), (1, 6), (3, 8),
]

# 10x10 region layout with zero-based ids (unique 2-star solution)
USER_PROVIDED_REGIONS = """
0 0 0 0 0 1 1 1 1 1
0 2 0 0 0 0 0 1 3 1
0 2 2 0 0 4 4 3 3 1
0 2 2 2 4 4 3 3 1 1
0 0 2 2 4 4 3 3 8 1
5 0 0 4 4 4 3 8 8 8
5 6 0 4 7 7 3 3 3 8
5 6 6 7 7 7 3 9 8 8
5 6 6 6 6 7 7 9 8 8
5 5 5 5 5 9 9 9 8 8
"""

# 5x5, one star per unit, irregular regions
IRREGULAR_5X5_REGIONS = """
0 0 1 1 1
0 0 1 2 2
3 0 2 2 2
3 3 4 4 2
3 3 4 4 4
"""


class FakeClock:
    """Clock that advances by a fixed step (in seconds) on every reading."""

    def __init__(self, step: float = 0.001):
        self.step = step
        self.now = 0.0
        self.readings = 0

    def __call__(self) -> float:
        self.now += self.step
        self.readings += 1
        return self.now


@pytest.fixture(autouse=True)
def fresh_verification_cache():
    """Keep the shared verification cache from leaking between tests."""
    clear_verification_cache()
    yield
    clear_verification_cache()


@pytest.fixture
def solved_10x10() -> BoardState:
    """Complete 10x10 board: stars confirmed, every other cell excluded."""
    definition = BoardDefinition.row_regions(10, required_per_unit=2)
    state = BoardState(definition=definition,
                       cells=[[Mark.EXCLUDED] * 10 for _ in range(10)])
    for r, cols in enumerate(SOLVED_STAR_COLUMNS):
        for c in cols:
            state.set_cell(r, c, Mark.CONFIRMED)
    return state


@pytest.fixture
def empty_10x10() -> BoardState:
    return BoardState.empty(BoardDefinition.row_regions(10, required_per_unit=2))


@pytest.fixture
def irregular_5x5() -> BoardState:
    definition = BoardDefinition.from_strings(
        IRREGULAR_5X5_REGIONS.splitlines(), required_per_unit=1
    )
    return BoardState.empty(definition)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_clock():
    """Factory for FakeClock instances with a chosen step."""
    return FakeClock


@pytest.fixture
def user_regions() -> BoardDefinition:
    return BoardDefinition.from_strings(USER_PROVIDED_REGIONS.splitlines(), required_per_unit=2)
