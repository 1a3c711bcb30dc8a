"""Scaffold logging - Hierarchical colored logging for template runs."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    LogConfig,
    RunLogger,
    ScaffoldLogger,
    StepLogger,
)

__all__ = [
    # Logger classes
    "ScaffoldLogger",
    "RunLogger",
    "StepLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
