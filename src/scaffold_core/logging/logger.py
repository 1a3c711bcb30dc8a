"""Scaffold Logger - Hierarchical colored logging for template runs.

Two kinds of output are produced:

- leveled diagnostic events (run started, step skipped, ...), written to
  ``LogConfig.output`` (stderr by default) as colored text or JSON lines;
- progress lines (``mkdir proj``, ``run git init``), written unconditionally
  to ``LogConfig.progress`` (stdout by default) before each action runs.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from scaffold_core.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from scaffold_core.types import ActionKind, LogFormat, LogLevel


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.WARN
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO | None = None  # None = sys.stderr at write time
    progress: TextIO | None = None  # None = sys.stdout at write time

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "run": True,
                "step": True,
                "loader": True,
            }


LEVEL_ORDER = {LogLevel.DEBUG: 0, LogLevel.INFO: 1, LogLevel.WARN: 2, LogLevel.ERROR: 3}

LEVEL_COLORS = {
    LogLevel.DEBUG: LIGHT_BLUE,
    LogLevel.INFO: CYAN,
    LogLevel.WARN: YELLOW,
    LogLevel.ERROR: RED,
}

COMPONENT_COLORS = {"run": MAGENTA, "step": CYAN, "loader": GREEN}


class ScaffoldLogger:
    """Main logger facade. Creates run-scoped loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()

    def run(self, source: str) -> "RunLogger":
        """Get a logger scoped to one template run.

        Args:
            source: Template reference being run

        Returns:
            RunLogger instance
        """
        return RunLogger(self, source)

    def progress(self, kind: ActionKind, target: str) -> None:
        """Write a progress line for an action about to be performed.

        Progress lines are not leveled; they are part of the tool's output.

        Args:
            kind: Action being performed
            target: Resolved path or command
        """
        stream = self.config.progress or sys.stdout
        print(f"{kind.value} {target}", file=stream, flush=True)

    def loader_event(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Log a template retrieval event.

        Args:
            message: Human-readable message
            context: Structured fields (reference, kind)
        """
        self._log(LogLevel.INFO, "loader", message, context)

    def config_warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Log a non-fatal configuration problem, such as an unknown key."""
        self._log(LogLevel.WARN, "run", f"Config: {message}", context)

    def enabled(self, level: LogLevel, component: str) -> bool:
        """Whether an event at ``level`` from ``component`` would be written."""
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.config.level]:
            return False
        return self.config.components.get(component, True)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Write one diagnostic event.

        Args:
            level: Event level
            component: Emitting component (run, step, loader)
            message: Human-readable message
            context: Structured fields
        """
        if not self.enabled(level, component):
            return

        if self.config.format == LogFormat.JSON:
            line = self._format_json(level, component, message, context or {})
        else:
            line = self._format_colored(level, component, message, context or {})

        print(line, file=self.config.output or sys.stderr)

    def _format_json(
        self, level: LogLevel, component: str, message: str, context: dict[str, Any]
    ) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        entry.update(context)
        return json.dumps(entry, default=str)

    def _format_colored(
        self, level: LogLevel, component: str, message: str, context: dict[str, Any]
    ) -> str:
        tag_color = COMPONENT_COLORS.get(component, RESET)
        line = f"{tag_color}[{component.upper()}]{RESET} {LEVEL_COLORS[level]}{message}{RESET}"

        if context and self.config.show_context:
            fields = " ".join(f"{key}={value}" for key, value in context.items())
            if len(fields) > self.config.truncate_at:
                fields = fields[: self.config.truncate_at] + "..."
            line += f" {LIGHT_BLUE}{fields}{RESET}"

        return line


class RunLogger:
    """Logger for run-level events."""

    def __init__(self, parent: ScaffoldLogger, source: str):
        """Initialize run logger.

        Args:
            parent: Parent ScaffoldLogger instance
            source: Template reference being run
        """
        self.parent = parent
        self.source = source

    def started(self, argument_count: int, step_count: int) -> None:
        """Log run start.

        Args:
            argument_count: Number of positional arguments supplied
            step_count: Number of steps declared by the document
        """
        context = {
            "source": self.source,
            "event": "run_started",
            "argument_count": argument_count,
            "step_count": step_count,
        }
        message = f"Running '{self.source}' ({step_count} steps, {argument_count} arguments)"
        self.parent._log(LogLevel.INFO, "run", message, context)

    def variable_rendered(self, name: str, value: str) -> None:
        """Log a declared variable after rendering."""
        context = {"source": self.source, "event": "variable_rendered", "name": name}
        self.parent._log(LogLevel.DEBUG, "run", f"var {name} = {value!r}", context)

    def completed(self, duration_ms: int, steps_completed: int, steps_skipped: int) -> None:
        """Log run completion with summary.

        Args:
            duration_ms: Run duration in milliseconds
            steps_completed: Number of steps executed
            steps_skipped: Number of steps skipped by their guard
        """
        context = {
            "source": self.source,
            "event": "run_completed",
            "duration_ms": duration_ms,
            "steps_completed": steps_completed,
            "steps_skipped": steps_skipped,
        }

        duration_s = duration_ms / 1000
        message = (
            f"'{self.source}' completed "
            f"({steps_completed} steps, {steps_skipped} skipped, {duration_s:.2f}s) ✓"
        )
        self.parent._log(LogLevel.INFO, "run", message, context)

    def failed(self, error: Exception, duration_ms: int) -> None:
        """Log run failure.

        Args:
            error: Exception that caused failure
            duration_ms: Run duration in milliseconds
        """
        context = {
            "source": self.source,
            "event": "run_failed",
            "duration_ms": duration_ms,
            "error": str(error),
            "error_type": type(error).__name__,
        }
        code = getattr(error, "code", None)
        if code:
            context["error_code"] = code
        # JSON lines carry the full error record
        if hasattr(error, "to_dict") and self.parent.config.format == LogFormat.JSON:
            context["error_info"] = error.to_dict()

        duration_s = duration_ms / 1000
        message = f"'{self.source}' failed ({duration_s:.2f}s): {error}"
        self.parent._log(LogLevel.ERROR, "run", message, context)

    def step(self, step_index: int) -> "StepLogger":
        """Get a logger scoped to a step.

        Args:
            step_index: 1-based step index

        Returns:
            StepLogger instance
        """
        return StepLogger(self, step_index)


class StepLogger:
    """Logger for step-level events."""

    def __init__(self, parent: RunLogger, step_index: int):
        """Initialize step logger.

        Args:
            parent: Parent RunLogger instance
            step_index: 1-based step index
        """
        self.parent = parent
        self.step_index = step_index

    def _context(self, event: str) -> dict[str, Any]:
        return {"source": self.parent.source, "step_index": self.step_index, "event": event}

    def skipped(self, guard: str) -> None:
        """Log a step skipped because its guard did not render to "true".

        Args:
            guard: Rendered guard value
        """
        context = self._context("step_skipped")
        context["when"] = guard
        message = f"Step {self.step_index} skipped (when = {guard!r})"
        self.parent.parent._log(LogLevel.INFO, "step", message, context)

    def action(self, kind: ActionKind, target: str, dry_run: bool = False) -> None:
        """Report an action about to be performed.

        Writes the progress line and a debug event.

        Args:
            kind: Action kind
            target: Resolved path or command
            dry_run: Whether the action will only be reported
        """
        self.parent.parent.progress(kind, target)

        context = self._context("action")
        context["action"] = kind.value
        context["dry_run"] = dry_run
        message = f"Step {self.step_index} {kind.value} {target}"
        if dry_run:
            message += " (dry run)"
        self.parent.parent._log(LogLevel.DEBUG, "step", message, context)

    def command_finished(self, exit_code: int, duration_ms: int) -> None:
        """Log the exit status of a run action.

        Args:
            exit_code: Child process exit status
            duration_ms: Command duration in milliseconds
        """
        context = self._context("command_finished")
        context["exit_code"] = exit_code
        context["duration_ms"] = duration_ms

        duration_s = duration_ms / 1000
        if exit_code == 0:
            message = f"Step {self.step_index} command finished ({duration_s:.2f}s) ✓"
            self.parent.parent._log(LogLevel.DEBUG, "step", message, context)
        else:
            message = f"Step {self.step_index} command exited with {exit_code} ({duration_s:.2f}s)"
            self.parent.parent._log(LogLevel.ERROR, "step", message, context)
