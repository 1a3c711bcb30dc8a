"""Scaffold error types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    RETRIEVAL = "RETRIEVAL"
    DOCUMENT = "DOCUMENT"
    VALIDATION = "VALIDATION"
    RENDER = "RENDER"
    EXECUTION = "EXECUTION"
    SYSTEM = "SYSTEM"


@dataclass
class ScaffoldError(Exception):
    """Structured error with context. Base exception for all scaffold errors."""

    # Identity
    code: str  # e.g., "INSUFFICIENT_ARGUMENTS"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    step_index: int | None = None  # 1-based index of the failing step
    field_name: str | None = None  # e.g. "run.cmd" or "var name"
    context: dict[str, Any] = field(default_factory=dict)  # Values used to build the message

    # Underlying exception, if any
    cause: BaseException | None = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.full_message)

    def __str__(self) -> str:
        return self.full_message

    @property
    def full_message(self) -> str:
        """Message followed by detail, when the detail adds anything."""
        if self.detail and self.detail != self.message:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured (JSON) logging.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "step_index": self.step_index,
            "field": self.field_name,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "cause": repr(self.cause) if self.cause else None,
        }

    def with_context(
        self,
        step_index: int | None = None,
        field_name: str | None = None,
    ) -> "ScaffoldError":
        """Return copy with additional context.

        Args:
            step_index: Optional 1-based step index
            field_name: Optional name of the template field involved

        Returns:
            New ScaffoldError instance with updated context
        """
        return ScaffoldError(
            code=self.code,
            category=self.category,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            step_index=step_index if step_index is not None else self.step_index,
            field_name=field_name or self.field_name,
            context=dict(self.context),
            cause=self.cause,
            timestamp=self.timestamp,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Failed to render {field}"
    detail_template: str | None = None
    suggestion_template: str | None = None


@dataclass
class MatchResult:
    """Result of matching an exception."""

    code: str
    context: dict[str, Any]


class ErrorMatcher(ABC):
    """Base class for exception matchers."""

    @abstractmethod
    def matches(self, error: BaseException) -> bool:
        """Check if this matcher handles the error.

        Args:
            error: Exception to check

        Returns:
            True if this matcher can handle the error
        """

    @abstractmethod
    def extract(self, error: BaseException) -> MatchResult:
        """Extract error code and context from the exception.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with error code and context
        """
