"""Shared types for scaffold-core.

Import from here rather than submodules:
    from scaffold_core.types import ActionKind, LogLevel, StepStatus
"""

from .enums import ActionKind, LogFormat, LogLevel, SourceKind, StepStatus
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "ActionKind",
    "LogFormat",
    "LogLevel",
    "SourceKind",
    "StepStatus",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
