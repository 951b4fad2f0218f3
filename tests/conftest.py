import pytest

from blocksudoku.models import Grid


# A standard 9x9 puzzle with a unique solution
PUZZLE_9 = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

SOLUTION_9 = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]

FIRST_SOLUTION_4 = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]


def assert_fully_valid(grid: Grid) -> None:
    """Every row, column and block holds 1..N exactly once."""
    n = grid.dimension
    base = grid.block_size
    expected = set(range(1, n + 1))
    for i in range(n):
        assert set(grid.cells[i]) == expected
        assert {grid.cells[r][i] for r in range(n)} == expected
    for br in range(0, n, base):
        for bc in range(0, n, base):
            block = {grid.cells[r][c] for r in range(br, br + base) for c in range(bc, bc + base)}
            assert block == expected


@pytest.fixture
def puzzle_9() -> Grid:
    return Grid.from_rows(PUZZLE_9)
