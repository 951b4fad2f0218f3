from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

Board = List[List[int]]  # 0 = empty, values 1..N

MIN_BLOCK_SIZE = 2
MAX_BLOCK_SIZE = 5

# SolveResult.status values
SOLVED = "solved"
UNSOLVABLE = "unsolvable"
CONFLICT = "conflict"
ABORTED = "aborted"


# -----------------------------
# Errors
# -----------------------------

class SudokuError(ValueError):
    """Base class for structural problems with a grid."""


class InvalidConfig(SudokuError):
    """Block size outside [MIN_BLOCK_SIZE, MAX_BLOCK_SIZE] or a non-square board."""


class InvalidCellValue(SudokuError):
    """A cell value outside 0..dimension in structural input."""


class ConflictingInput(SudokuError):
    """Pre-filled cells already break a row/column/block constraint."""

    def __init__(self, row: int, col: int, value: int, unit: str):
        self.row = row
        self.col = col
        self.value = value
        self.unit = unit
        super().__init__(
            f"Conflict: value {value} appears twice in a {unit} (cell {row+1},{col+1})."
        )


def _check_block_size(block_size: object) -> int:
    if isinstance(block_size, bool) or not isinstance(block_size, int):
        raise InvalidConfig(f"Block size must be an integer, got {block_size!r}.")
    if block_size < MIN_BLOCK_SIZE or block_size > MAX_BLOCK_SIZE:
        raise InvalidConfig(
            f"Invalid block size: {block_size} (allowed: {MIN_BLOCK_SIZE}..{MAX_BLOCK_SIZE})."
        )
    return block_size


def clamp_block_size(value: object) -> int:
    """
    Editing-boundary clamp for the block size input:
      - non-numeric or below the minimum => MIN_BLOCK_SIZE
      - above the maximum => MAX_BLOCK_SIZE
    """
    try:
        b = int(str(value).strip())
    except ValueError:
        return MIN_BLOCK_SIZE
    return max(MIN_BLOCK_SIZE, min(MAX_BLOCK_SIZE, b))


def _empty_board(n: int) -> Board:
    return [[0] * n for _ in range(n)]


def check_cell_values(cells: Sequence[Sequence[object]], n: int) -> None:
    """Raise InvalidCellValue for the first cell that is not an int in 0..n."""
    for r, row in enumerate(cells):
        for c, v in enumerate(row):
            if isinstance(v, bool) or not isinstance(v, int):
                raise InvalidCellValue(f"Invalid value at ({r+1},{c+1}): {v!r} (not an integer).")
            if v < 0 or v > n:
                raise InvalidCellValue(f"Invalid value at ({r+1},{c+1}): {v} (allowed: 0..{n}).")


# -----------------------------
# Grid
# -----------------------------

@dataclass
class Grid:
    block_size: int = 3
    cells: Board = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_block_size(self.block_size)
        n = self.dimension
        if not self.cells:
            self.cells = _empty_board(n)
        elif len(self.cells) != n or any(len(row) != n for row in self.cells):
            raise InvalidConfig(f"Cells must form a {n} x {n} matrix.")
        else:
            # own the rows so solving never writes into the caller's lists
            self.cells = [list(row) for row in self.cells]
            check_cell_values(self.cells, n)

    @classmethod
    def create(cls, block_size: int) -> "Grid":
        return cls(block_size)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """
        Build a grid from a square list of rows, inferring the block size.
        Structural input is strict: a bad shape raises InvalidConfig and a bad
        value raises InvalidCellValue (set_cell is the lenient path).
        """
        n = len(rows)
        if n == 0 or any(len(row) != n for row in rows):
            raise InvalidConfig("Board must be square (N x N).")

        base = int(math.isqrt(n))
        if base * base != n:
            raise InvalidConfig(f"Invalid size: {n}. Only perfect squares are supported (4, 9, 16, ...).")
        _check_block_size(base)

        return cls(base, [list(row) for row in rows])

    @property
    def dimension(self) -> int:
        return self.block_size * self.block_size

    def get_block_size(self) -> int:
        return self.block_size

    def get_dimension(self) -> int:
        return self.dimension

    def _check_position(self, row: int, col: int) -> None:
        n = self.dimension
        if not (0 <= row < n and 0 <= col < n):
            raise IndexError(f"Cell ({row},{col}) outside a {n} x {n} grid.")

    def get_cell(self, row: int, col: int) -> int:
        self._check_position(row, col)
        return self.cells[row][col]

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Write one cell; anything outside 0..dimension is stored as empty."""
        self._check_position(row, col)
        n = self.dimension
        if isinstance(value, bool) or not isinstance(value, int) or value < 0 or value > n:
            logger.debug("Coercing value %r at (%d,%d) to empty", value, row, col)
            value = 0
        self.cells[row][col] = value

    def clear_cell(self, row: int, col: int) -> None:
        self.set_cell(row, col, 0)

    def reset(self) -> None:
        self.cells = _empty_board(self.dimension)

    def resize(self, block_size: int) -> None:
        # changing the shape always discards the current values
        self.block_size = _check_block_size(block_size)
        self.reset()

    def clone(self) -> "Grid":
        return Grid(self.block_size, [row[:] for row in self.cells])

    def to_rows(self) -> Board:
        return [row[:] for row in self.cells]

    def empty_cells(self) -> List[Tuple[int, int]]:
        """Empty positions in row-major order."""
        n = self.dimension
        return [(r, c) for r in range(n) for c in range(n) if self.cells[r][c] == 0]

    def is_complete(self) -> bool:
        return all(v != 0 for row in self.cells for v in row)


# -----------------------------
# Solve result
# -----------------------------

@dataclass
class SolveResult:
    solved: bool
    grid: Grid              # solved copy, or the untouched input when not solved
    elapsed: float = 0.0    # seconds spent in copy-then-solve
    status: str = UNSOLVABLE
    steps: int = 0          # placements tried by the search
    message: str = ""

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000.0
