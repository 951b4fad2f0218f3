from __future__ import annotations

import re
from typing import Callable, List

from .models import Grid

# optional sign, then a run of ASCII digits; anything after is ignored
_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def parse_cell_text(raw: object, n: int) -> int:
    """
    Editor text => cell value, read like a leading integer prefix ("3x" => 3,
    "+3" => 3, "2.5" => 2). Blank, non-numeric and out-of-range entries all
    become 0 (empty). Multi-digit numbers are fine for N > 9.
    """
    s = "" if raw is None else str(raw).strip()
    m = _LEADING_INT.match(s)
    if m is None:
        return 0
    v = int(m.group(0))
    return v if 1 <= v <= n else 0


def grid_from_texts(block_size: int, text_at: Callable[[int, int], object]) -> Grid:
    """Build a grid by reading each cell's raw text through `text_at(r, c)`."""
    grid = Grid(block_size)
    n = grid.dimension
    for r in range(n):
        for c in range(n):
            grid.set_cell(r, c, parse_cell_text(text_at(r, c), n))
    return grid


def board_to_csv(grid: Grid) -> bytes:
    lines = [",".join(str(v) for v in row) for row in grid.cells]
    return ("\n".join(lines) + "\n").encode("utf-8")


def format_grid(grid: Grid) -> str:
    """
    Plain-text rendering with block separators, e.g. for 4x4:

        1 2 | 3 4
        3 4 | 1 2
        ----+----
        ...
    Empty cells print as '.'.
    """
    n = grid.dimension
    base = grid.block_size
    width = len(str(n))

    def fmt_row(row: List[int]) -> str:
        chunks = []
        for g in range(base):
            vals = row[g * base:(g + 1) * base]
            chunks.append(" ".join(("." if v == 0 else str(v)).rjust(width) for v in vals))
        return " | ".join(chunks)

    lines: List[str] = []
    for r, row in enumerate(grid.cells):
        if r > 0 and r % base == 0:
            seg = "-" * (base * (width + 1) - 1)
            lines.append("-+-".join([seg] * base))
        lines.append(fmt_row(row))
    return "\n".join(lines)
