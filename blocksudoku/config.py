from __future__ import annotations

import logging
import os
from typing import Optional

from .models import clamp_block_size

DEFAULT_BLOCK_SIZE = 3
DEFAULT_LOG_LEVEL = "INFO"


def resolve_block_size() -> int:
    raw = os.environ.get("BLOCKSUDOKU_BLOCK_SIZE")
    if not raw:
        return DEFAULT_BLOCK_SIZE
    return clamp_block_size(raw)


def resolve_max_steps() -> Optional[int]:
    """Step cap for one search; unset, 0 or garbage means unlimited."""
    raw = os.environ.get("BLOCKSUDOKU_MAX_STEPS", "").strip()
    try:
        steps = int(raw)
    except ValueError:
        return None
    return steps if steps > 0 else None


def resolve_log_level() -> int:
    name = os.environ.get("BLOCKSUDOKU_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO
