"""Types for the step engine."""

from dataclasses import dataclass, field
from datetime import datetime

from scaffold_core.types import ActionKind, StepStatus


@dataclass
class ActionRecord:
    """One action performed (or planned, in dry-run mode) by a step."""

    kind: ActionKind
    target: str  # Resolved path or command
    exit_code: int | None = None  # run actions only


@dataclass
class StepResult:
    """Result of a single step execution."""

    step_index: int  # 1-based
    status: StepStatus

    # Timing
    started_at: datetime | None = None
    duration_ms: int | None = None

    actions: list[ActionRecord] = field(default_factory=list)
    skip_reason: str | None = None


@dataclass
class RunResult:
    """Summary of a successful template run."""

    source: str | None
    started_at: datetime
    duration_ms: int = 0

    arguments: tuple[str, ...] = ()
    variables: dict[str, str] = field(default_factory=dict)  # Rendered values
    steps: list[StepResult] = field(default_factory=list)

    dry_run: bool = False

    @property
    def steps_completed(self) -> int:
        return sum(1 for s in self.steps if s.status == StepStatus.COMPLETED)

    @property
    def steps_skipped(self) -> int:
        return sum(1 for s in self.steps if s.status == StepStatus.SKIPPED)
