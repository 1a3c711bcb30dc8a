"""ANSI color codes for colored log output (256-color palette).

Usage:
    from scaffold_core.logging.colors import GREEN, RESET

    print(f"{GREEN}[LOADER]{RESET} ...")
"""

RESET = "\033[0m"

# Levels
LIGHT_BLUE = "\033[38;5;153m"  # DEBUG, context fields
CYAN = "\033[38;5;51m"  # INFO, [STEP] tag
YELLOW = "\033[38;5;226m"  # WARN
RED = "\033[38;5;196m"  # ERROR

# Component tags
MAGENTA = "\033[38;5;201m"  # [RUN]
GREEN = "\033[38;5;82m"  # [LOADER]

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
