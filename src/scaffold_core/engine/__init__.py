"""Step engine - Execute template documents."""

from .executor import StepExecutor
from .runner import ScaffoldRunner, build_logger, check_arguments
from .types import ActionRecord, RunResult, StepResult

__all__ = [
    "ScaffoldRunner",
    "StepExecutor",
    "check_arguments",
    "build_logger",
    "RunResult",
    "StepResult",
    "ActionRecord",
]
