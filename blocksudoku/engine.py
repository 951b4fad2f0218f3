from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

from .models import (
    ABORTED,
    CONFLICT,
    SOLVED,
    UNSOLVABLE,
    ConflictingInput,
    Grid,
    check_cell_values,
)

logger = logging.getLogger(__name__)

Conflict = Tuple[int, int, int, str]  # (row, col, value, unit)


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


def _box_index(r: int, c: int, base: int) -> int:
    return (r // base) * base + (c // base)


# -----------------------------
# Validity
# -----------------------------

def is_valid(grid: Grid, row: int, col: int, num: int) -> bool:
    """
    True if `num` can go at (row, col) without repeating in its row, column
    or block. The target cell itself is skipped, so its current content never
    counts as a clash.
    """
    n = grid.dimension
    if num < 1 or num > n:
        return False
    cells = grid.cells

    for x in range(n):
        if x != col and cells[row][x] == num:
            return False
        if x != row and cells[x][col] == num:
            return False

    base = grid.block_size
    start_row = (row // base) * base
    start_col = (col // base) * base
    for r in range(start_row, start_row + base):
        for c in range(start_col, start_col + base):
            if (r, c) != (row, col) and cells[r][c] == num:
                return False
    return True


def find_conflict(grid: Grid) -> Optional[Conflict]:
    """
    First pre-filled cell (row-major) whose value already appeared earlier in
    its row, column or block. None when the givens are consistent.
    """
    n = grid.dimension
    base = grid.block_size
    row_used = [0] * n
    col_used = [0] * n
    box_used = [0] * n

    for r in range(n):
        for c in range(n):
            v = grid.cells[r][c]
            if v == 0:
                continue

            bit = 1 << v
            b = _box_index(r, c, base)

            if row_used[r] & bit:
                return r, c, v, "row"
            if col_used[c] & bit:
                return r, c, v, "column"
            if box_used[b] & bit:
                return r, c, v, "block"

            row_used[r] |= bit
            col_used[c] |= bit
            box_used[b] |= bit

    return None


def validate_grid(grid: Grid) -> Tuple[bool, str]:
    conflict = find_conflict(grid)
    if conflict is None:
        return True, "OK"
    return False, str(ConflictingInput(*conflict))


def check_givens(grid: Grid) -> None:
    """Raise ConflictingInput if the pre-filled cells already clash."""
    conflict = find_conflict(grid)
    if conflict is not None:
        raise ConflictingInput(*conflict)


# -----------------------------
# Search
# -----------------------------

def search(
    grid: Grid,
    max_steps: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
) -> Tuple[str, int, str]:
    """
    Backtracking search, in place.

    Empty cells are filled in row-major order, candidates tried 1..N in
    ascending order, so the first solution found is always the same one.
    Used-value bitmasks per row/column/block replace the linear scans of
    is_valid without changing that order.

    Returns (status, steps, message). On anything but SOLVED the grid is left
    exactly as it was passed in. A given outside 1..N raises InvalidCellValue.
    """
    check_cell_values(grid.cells, grid.dimension)

    conflict = find_conflict(grid)
    if conflict is not None:
        message = str(ConflictingInput(*conflict))
        logger.info("Rejecting grid before search: %s", message)
        return CONFLICT, 0, message

    n = grid.dimension
    base = grid.block_size
    cells = grid.cells
    full = (1 << (n + 1)) - 2  # bits 1..N set

    row_used = [0] * n
    col_used = [0] * n
    box_used = [0] * n
    empties: List[Tuple[int, int]] = []

    for r in range(n):
        for c in range(n):
            v = cells[r][c]
            if v == 0:
                empties.append((r, c))
            else:
                bit = 1 << v
                row_used[r] |= bit
                col_used[c] |= bit
                box_used[_box_index(r, c, base)] |= bit

    logger.debug("Searching %dx%d grid with %d empty cells", n, n, len(empties))

    steps = 0
    aborted = False

    def dfs(i: int) -> bool:
        nonlocal steps, aborted
        if i == len(empties):
            return True  # solved

        r, c = empties[i]
        b = _box_index(r, c, base)
        free = full & ~(row_used[r] | col_used[c] | box_used[b])

        while free:
            lsb = free & -free
            free ^= lsb
            v = lsb.bit_length() - 1  # because bit is (1<<v)

            if max_steps is not None and steps >= max_steps:
                aborted = True
                return False
            if cancel is not None and cancel.is_set():
                aborted = True
                return False
            steps += 1

            # place
            cells[r][c] = v
            row_used[r] |= lsb
            col_used[c] |= lsb
            box_used[b] |= lsb

            if dfs(i + 1):
                return True

            # undo
            cells[r][c] = 0
            row_used[r] ^= lsb
            col_used[c] ^= lsb
            box_used[b] ^= lsb

            if aborted:
                return False

        return False

    if dfs(0):
        logger.debug("Solved after %d steps", steps)
        return SOLVED, steps, f"Solved in {steps} steps"
    if aborted:
        logger.info("Search aborted after %d steps", steps)
        if max_steps is not None and steps >= max_steps:
            return ABORTED, steps, f"Stopped after {steps} steps (limit {max_steps})"
        return ABORTED, steps, f"Cancelled after {steps} steps"
    logger.debug("Search exhausted after %d steps", steps)
    return UNSOLVABLE, steps, "No solution exists for the given sudoku!"


def solve(
    grid: Grid,
    max_steps: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
) -> bool:
    """Solve in place. Returns True if solved; never raises for an unsolvable grid."""
    status, _, _ = search(grid, max_steps=max_steps, cancel=cancel)
    return status == SOLVED
