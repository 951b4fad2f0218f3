from __future__ import annotations

import logging
from typing import List

import pandas as pd
import streamlit as st

from blocksudoku.config import resolve_block_size, resolve_log_level, resolve_max_steps
from blocksudoku.engine import validate_grid
from blocksudoku.models import (
    ABORTED,
    CONFLICT,
    MAX_BLOCK_SIZE,
    MIN_BLOCK_SIZE,
    Grid,
    SolveResult,
    clamp_block_size,
)
from blocksudoku.runner import timed_solve
from blocksudoku.textio import board_to_csv, format_grid, grid_from_texts

logging.basicConfig(level=resolve_log_level())
logger = logging.getLogger("blocksudoku.app")

MAX_STEPS = resolve_max_steps()


def cell_key(n: int, r: int, c: int) -> str:
    # include N so changing size doesn't collide with old widget state
    return f"cell_{n}_{r}_{c}"


def load_grid_into_widgets(grid: Grid) -> None:
    n = grid.dimension
    for r in range(n):
        for c in range(n):
            v = grid.get_cell(r, c)
            st.session_state[cell_key(n, r, c)] = "" if v == 0 else str(v)


def reset_board(block_size: int) -> None:
    load_grid_into_widgets(Grid(block_size))
    st.session_state.solve_time_ms = None


def read_grid(block_size: int) -> Grid:
    n = block_size * block_size
    return grid_from_texts(block_size, lambda r, c: st.session_state.get(cell_key(n, r, c), ""))


def record_attempt(result: SolveResult) -> None:
    history: List[dict] = st.session_state.history
    history.append(
        {
            "size": f"{result.grid.dimension}x{result.grid.dimension}",
            "status": result.status,
            "steps": result.steps,
            "elapsed_ms": round(result.elapsed_ms, 2),
        }
    )


def history_df() -> pd.DataFrame:
    rows = st.session_state.history
    if not rows:
        return pd.DataFrame(columns=["size", "status", "steps", "elapsed_ms"])
    return pd.DataFrame(rows)


def render_board_html(grid: Grid, title: str) -> None:
    """
    Render a Sudoku grid with thick block borders using HTML/CSS.
    """
    n = grid.dimension
    base = grid.block_size

    html = [f"<div class='sudoku-wrap'><div class='sudoku-title'>{title}</div>"]
    html.append("<table class='sudoku'>")
    for r in range(n):
        html.append("<tr>")
        for c in range(n):
            v = grid.get_cell(r, c)
            cls = []
            if r % base == 0:
                cls.append("top")
            if c % base == 0:
                cls.append("left")
            if (r + 1) % base == 0:
                cls.append("bottom")
            if (c + 1) % base == 0:
                cls.append("right")
            cls_attr = f" class='{' '.join(cls)}'" if cls else ""
            disp = "" if v == 0 else str(v)
            html.append(f"<td{cls_attr}>{disp}</td>")
        html.append("</tr>")
    html.append("</table></div>")

    st.markdown("".join(html), unsafe_allow_html=True)


st.set_page_config(page_title="Sudoku Solver & Timer", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stTextInput"] input {
    text-align: center;
    font-size: 20px !important;
    height: 2.6rem;
    padding: 0.25rem 0.25rem;
}
div[data-testid="stTextInput"] { margin-bottom: 0rem; }

.sudoku-wrap { margin-top: 0.5rem; }
.sudoku-title { font-size: 1.05rem; font-weight: 600; margin: 0.5rem 0 0.35rem 0; }
table.sudoku { border-collapse: collapse; }
table.sudoku td {
    width: 2.5rem;
    height: 2.5rem;
    text-align: center;
    vertical-align: middle;
    font-size: 18px;
    border: 1px solid rgba(49, 51, 63, 0.25);
}
table.sudoku td.top { border-top: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.left { border-left: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.bottom { border-bottom: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.right { border-right: 3px solid rgba(49, 51, 63, 0.65); }

.sudoku-spacer { height: 0.25rem; }
</style>
""",
    unsafe_allow_html=True,
)

st.title("Sudoku Solver & Timer")
st.caption("Leave cells blank for empty. Anything that isn't a number in 1..N is treated as empty.")

if "history" not in st.session_state:
    st.session_state.history = []
if "solve_time_ms" not in st.session_state:
    st.session_state.solve_time_ms = None

# a solution found on the previous run; widgets can only be written before they render
pending = st.session_state.pop("pending_grid", None)
if pending is not None:
    load_grid_into_widgets(pending)

# ---- Sidebar controls ----
with st.sidebar:
    st.header("Settings")
    if "block_size" not in st.session_state:
        st.session_state.block_size = resolve_block_size()

    raw_block = st.number_input(
        "Block size (n)",
        min_value=MIN_BLOCK_SIZE,
        max_value=MAX_BLOCK_SIZE,
        value=st.session_state.block_size,
        step=1,
    )
    block_size = clamp_block_size(raw_block)
    st.caption(f"Board will be {block_size * block_size}x{block_size * block_size}")
    if block_size >= 4:
        st.warning("Large boards can take a very long time to solve by brute force.")

    if block_size != st.session_state.block_size:
        st.session_state.block_size = block_size
        reset_board(block_size)

    st.divider()
    if st.button("Generate board", use_container_width=True):
        reset_board(st.session_state.block_size)

block_size = int(st.session_state.block_size)
n = block_size * block_size

if st.session_state.solve_time_ms is not None:
    st.markdown(f"**Algorithm Execution Time: {st.session_state.solve_time_ms:.2f} ms**")

# ---- Input grid in a form (prevents rerun on every keystroke) ----
st.subheader("Input")

with st.form("sudoku_form", clear_on_submit=False):
    spacer_w = 0.18
    widths = []
    for g in range(block_size):
        widths.extend([1.0] * block_size)
        if g != block_size - 1:
            widths.append(spacer_w)

    for r in range(n):
        cols = st.columns(widths, gap="small")
        col_idx = 0
        for c in range(n):
            if c > 0 and c % block_size == 0:
                col_idx += 1  # skip spacer column
            with cols[col_idx]:
                key = cell_key(n, r, c)
                if key not in st.session_state:
                    st.session_state[key] = ""
                st.text_input(label=key, key=key, label_visibility="collapsed")
            col_idx += 1

        if (r + 1) % block_size == 0 and (r + 1) != n:
            st.markdown("<div class='sudoku-spacer'></div>", unsafe_allow_html=True)

    colA, colB, _ = st.columns([1, 1, 2])
    validate_clicked = colA.form_submit_button("Validate", use_container_width=True)
    solve_clicked = colB.form_submit_button("Solve", use_container_width=True)

# ---- Actions ----
grid = read_grid(block_size)

if validate_clicked:
    ok, msg = validate_grid(grid)
    if ok:
        st.success("Board looks valid.")
    else:
        st.error(msg)

if solve_clicked:
    result = timed_solve(grid, max_steps=MAX_STEPS)
    record_attempt(result)
    if result.solved:
        st.session_state.solve_time_ms = result.elapsed_ms
        st.session_state.pending_grid = result.grid
        logger.debug("Solution:\n%s", format_grid(result.grid))
        st.rerun()
    elif result.status == ABORTED:
        st.warning(result.message)
    else:
        # leave the board as entered
        st.error("No solution exists for the given sudoku!")
        if result.status == CONFLICT:
            st.caption(result.message)

render_board_html(grid, "Current board")

if grid.is_complete() and validate_grid(grid)[0]:
    st.download_button(
        "Download solution as CSV",
        data=board_to_csv(grid),
        file_name=f"sudoku_solution_{n}x{n}.csv",
        mime="text/csv",
    )

with st.expander("Solve attempts"):
    st.dataframe(history_df(), use_container_width=True)
