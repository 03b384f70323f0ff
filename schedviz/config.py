from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidParameter

DEFAULT_QUANTUM = 2          # round-robin time slice
DEFAULT_STEP_DELAY = 0.3     # seconds between animation ticks
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass(frozen=True)
class Config:
    default_quantum: int = DEFAULT_QUANTUM
    step_delay: float = DEFAULT_STEP_DELAY
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build a Config from ``SCHEDVIZ_*`` environment variables.
    """
    env = os.environ if environ is None else environ

    try:
        quantum = int(env.get("SCHEDVIZ_QUANTUM", DEFAULT_QUANTUM))
        step_delay = float(env.get("SCHEDVIZ_STEP_DELAY", DEFAULT_STEP_DELAY))
    except ValueError as exc:
        raise InvalidParameter(f"Bad SCHEDVIZ_* setting: {exc}") from exc

    if quantum <= 0:
        raise InvalidParameter("SCHEDVIZ_QUANTUM must be a positive integer")
    if step_delay < 0:
        raise InvalidParameter("SCHEDVIZ_STEP_DELAY must not be negative")

    log_level = env.get("SCHEDVIZ_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in LOG_LEVELS:
        raise InvalidParameter(f"SCHEDVIZ_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    return Config(default_quantum=quantum, step_delay=step_delay, log_level=log_level)
