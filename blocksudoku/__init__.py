"""
blocksudoku - generalized block Sudoku solver

N x N grids (N = b*b, 2 <= b <= 5) solved by row-major backtracking search.
"""

from .engine import find_conflict, is_valid, search, solve, validate_grid
from .models import (
    ConflictingInput,
    Grid,
    InvalidCellValue,
    InvalidConfig,
    SolveResult,
    SudokuError,
)
from .runner import submit_solve, timed_solve

__version__ = "1.0.0"
__all__ = [
    "Grid",
    "SolveResult",
    "SudokuError",
    "InvalidConfig",
    "InvalidCellValue",
    "ConflictingInput",
    "is_valid",
    "find_conflict",
    "validate_grid",
    "search",
    "solve",
    "timed_solve",
    "submit_solve",
]
