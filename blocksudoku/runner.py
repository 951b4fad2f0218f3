from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future
from typing import Optional, Tuple

from .engine import CancelToken, search
from .models import SOLVED, Grid, SolveResult

logger = logging.getLogger(__name__)


def timed_solve(
    grid: Grid,
    max_steps: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
) -> SolveResult:
    """
    Copy-then-solve, timed. The caller's grid is never touched: on success the
    result carries the solved copy, otherwise the original grid.
    """
    start = time.perf_counter()
    working = grid.clone()
    status, steps, message = search(working, max_steps=max_steps, cancel=cancel)
    elapsed = time.perf_counter() - start

    solved = status == SOLVED
    logger.info(
        "%dx%d solve finished: %s in %.2f ms (%d steps)",
        grid.dimension, grid.dimension, status, elapsed * 1000.0, steps,
    )
    return SolveResult(
        solved=solved,
        grid=working if solved else grid,
        elapsed=elapsed,
        status=status,
        steps=steps,
        message=message,
    )


def submit_solve(
    executor: Executor,
    grid: Grid,
    max_steps: Optional[int] = None,
) -> Tuple["Future[SolveResult]", threading.Event]:
    """
    Run timed_solve on a worker. Setting the returned event aborts the search;
    the future then resolves to an ABORTED result.
    """
    cancel = threading.Event()
    # snapshot now so later edits by the caller cannot leak into the worker
    snapshot = grid.clone()
    future = executor.submit(timed_solve, snapshot, max_steps, cancel)
    return future, cancel
