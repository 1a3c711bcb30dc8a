"""Shared enumerations for scaffold-core."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class ActionKind(str, Enum):
    """Side-effecting action a step can perform.

    Values double as the keyword printed on progress lines.
    """

    MKDIR = "mkdir"
    WRITE_FILE = "write_file"
    RUN = "run"


class StepStatus(str, Enum):
    """Individual step status."""

    COMPLETED = "completed"
    SKIPPED = "skipped"


class SourceKind(str, Enum):
    """Where a template document comes from."""

    FILE = "file"
    URL = "url"
    GITHUB = "github"
