import threading

import pytest

from blocksudoku.engine import check_givens, find_conflict, is_valid, search, solve, validate_grid
from blocksudoku.models import (
    ABORTED,
    CONFLICT,
    SOLVED,
    UNSOLVABLE,
    ConflictingInput,
    Grid,
    InvalidCellValue,
)

from conftest import FIRST_SOLUTION_4, PUZZLE_9, SOLUTION_9, assert_fully_valid


class TestIsValid:
    def setup_method(self):
        # single given: 5 at (4, 4) on a 9x9 board
        self.grid = Grid(3)
        self.grid.set_cell(4, 4, 5)

    @pytest.mark.parametrize("row,col", [(4, 0), (4, 8), (0, 4), (8, 4), (3, 3), (5, 5), (3, 5)])
    def test_same_unit_rejected(self, row, col):
        assert not is_valid(self.grid, row, col, 5)

    @pytest.mark.parametrize("num", [1, 2, 3, 4, 6, 7, 8, 9])
    def test_other_values_accepted(self, num):
        for row, col in [(4, 0), (0, 4), (3, 3)]:
            assert is_valid(self.grid, row, col, num)

    def test_unrelated_cell_accepts_same_value(self):
        assert is_valid(self.grid, 0, 0, 5)
        assert is_valid(self.grid, 8, 8, 5)

    def test_target_cell_does_not_conflict_with_itself(self):
        assert is_valid(self.grid, 4, 4, 5)

    @pytest.mark.parametrize("num", [0, 10, -1])
    def test_out_of_range_candidate(self, num):
        assert not is_valid(self.grid, 0, 0, num)

    def test_block_origin_on_4x4(self):
        grid = Grid(2)
        grid.set_cell(1, 1, 3)
        assert not is_valid(grid, 0, 0, 3)
        assert is_valid(grid, 2, 2, 3)
        assert not is_valid(grid, 1, 3, 3)


class TestConflicts:
    def test_consistent_givens(self, puzzle_9):
        assert find_conflict(puzzle_9) is None
        assert validate_grid(puzzle_9) == (True, "OK")
        check_givens(puzzle_9)

    def test_row_conflict(self):
        grid = Grid(3)
        grid.set_cell(0, 0, 5)
        grid.set_cell(0, 1, 5)
        assert find_conflict(grid) == (0, 1, 5, "row")

    def test_column_conflict(self):
        grid = Grid(3)
        grid.set_cell(0, 0, 7)
        grid.set_cell(6, 0, 7)
        assert find_conflict(grid) == (6, 0, 7, "column")

    def test_block_conflict(self):
        grid = Grid(2)
        grid.set_cell(0, 0, 2)
        grid.set_cell(1, 1, 2)
        assert find_conflict(grid) == (1, 1, 2, "block")

    def test_validate_and_check_report_the_cell(self):
        grid = Grid(3)
        grid.set_cell(0, 0, 5)
        grid.set_cell(0, 1, 5)
        ok, msg = validate_grid(grid)
        assert not ok
        assert "cell 1,2" in msg
        with pytest.raises(ConflictingInput) as info:
            check_givens(grid)
        assert (info.value.row, info.value.col, info.value.value) == (0, 1, 5)


class TestSolve:
    def test_empty_4x4_first_solution(self):
        grid = Grid(2)
        assert solve(grid)
        assert grid.to_rows() == FIRST_SOLUTION_4

    def test_classic_puzzle(self, puzzle_9):
        assert solve(puzzle_9)
        assert puzzle_9.to_rows() == SOLUTION_9
        assert_fully_valid(puzzle_9)

    def test_givens_are_kept(self, puzzle_9):
        solve(puzzle_9)
        for r in range(9):
            for c in range(9):
                if PUZZLE_9[r][c]:
                    assert puzzle_9.get_cell(r, c) == PUZZLE_9[r][c]

    def test_empty_9x9(self):
        grid = Grid(3)
        assert solve(grid)
        assert_fully_valid(grid)
        assert grid.cells[0] == list(range(1, 10))

    def test_resolve_solved_grid_is_unchanged(self):
        grid = Grid.from_rows(SOLUTION_9)
        status, steps, _ = search(grid)
        assert status == SOLVED
        assert steps == 0
        assert grid.to_rows() == SOLUTION_9

    def test_deterministic(self):
        first = Grid.from_rows(PUZZLE_9)
        second = Grid.from_rows(PUZZLE_9)
        assert solve(first) and solve(second)
        assert first == second

    def test_duplicate_in_row_not_solved(self):
        grid = Grid(3)
        grid.set_cell(0, 0, 5)
        grid.set_cell(0, 1, 5)
        before = grid.to_rows()
        status, steps, message = search(grid)
        assert status == CONFLICT
        assert steps == 0
        assert "row" in message
        assert not solve(grid)
        assert grid.to_rows() == before

    def test_unsolvable_without_direct_conflict(self):
        # (0,3) needs a value other than 1,2,3 (row) and 4 (column): none left
        grid = Grid.from_rows([
            [1, 2, 3, 0],
            [0, 0, 0, 4],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        before = grid.to_rows()
        status, _, _ = search(grid)
        assert status == UNSOLVABLE
        assert grid.to_rows() == before

    def test_unsolvable_deep_backtrack_restores_grid(self):
        # givens are consistent but 1 has nowhere to go in row 0
        grid = Grid.from_rows([
            [0, 0, 3, 4],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        before = grid.to_rows()
        status, steps, _ = search(grid)
        assert status == UNSOLVABLE
        assert steps == 1
        assert grid.to_rows() == before

    @pytest.mark.parametrize("bad", [5, 7, -1, "3", 2.0])
    def test_out_of_range_given_is_rejected(self, bad):
        grid = Grid(2)
        grid.cells[0][0] = bad  # bypasses set_cell coercion
        with pytest.raises(InvalidCellValue):
            search(grid)
        with pytest.raises(InvalidCellValue):
            solve(grid)
        assert grid.cells[0][0] == bad
        assert grid.cells[0][1:] == [0, 0, 0]

    def test_block_size_five_accepted(self):
        grid = Grid(5)
        assert grid.get_dimension() == 25
        for i in range(25):
            grid.set_cell(0, i, i + 1)
        assert find_conflict(grid) is None

    def test_partially_filled_16x16(self):
        # shifted pattern solution with a sparse set of cells cleared
        base, n = 4, 16
        rows = [[(base * (r % base) + r // base + c) % n + 1 for c in range(n)] for r in range(n)]
        grid = Grid.from_rows(rows)
        assert_fully_valid(grid)
        for r in range(n):
            grid.set_cell(r, (r * 5) % n, 0)
        assert solve(grid)
        assert_fully_valid(grid)


class TestLimits:
    def test_step_cap_aborts_and_restores(self, puzzle_9):
        before = puzzle_9.to_rows()
        status, steps, message = search(puzzle_9, max_steps=5)
        assert status == ABORTED
        assert steps == 5
        assert "limit 5" in message
        assert puzzle_9.to_rows() == before

    def test_generous_step_cap_still_solves(self, puzzle_9):
        assert solve(puzzle_9, max_steps=1_000_000)

    def test_cancel_token(self, puzzle_9):
        cancel = threading.Event()
        cancel.set()
        before = puzzle_9.to_rows()
        status, steps, message = search(puzzle_9, cancel=cancel)
        assert status == ABORTED
        assert steps == 0
        assert "Cancelled" in message
        assert puzzle_9.to_rows() == before
