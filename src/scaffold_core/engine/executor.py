"""Step executor - performs the actions of each document step."""

import subprocess
import sys
import time
from datetime import datetime
from pathlib import Path

from scaffold_core.config import ExecutionConfig
from scaffold_core.document import RunCommand, Step, WriteFile
from scaffold_core.errors import get_error_factory
from scaffold_core.logging import RunLogger, ScaffoldLogger, StepLogger
from scaffold_core.template import RenderContext, TemplateEngine
from scaffold_core.types import ActionKind, StepStatus

from .types import ActionRecord, StepResult

GUARD_PASS = "true"


class StepExecutor:
    """
    Execute document steps in order.

    For each step:
    1. Render ``when``; anything but exactly "true" skips the step
    2. Run each populated action in the order mkdir, write_file, run
    3. Stop at the first failure (no retry, no rollback)

    Every field is rendered at the moment it is needed, against the same
    read-only context.
    """

    def __init__(
        self,
        template_engine: TemplateEngine,
        logger: RunLogger | None = None,
        config: ExecutionConfig | None = None,
    ):
        """Initialize step executor.

        Args:
            template_engine: Engine for rendering step fields
            logger: Optional run-scoped logger; a default one is used otherwise
            config: Execution configuration (defaults to ExecutionConfig())
        """
        self._template_engine = template_engine
        self._logger = logger or ScaffoldLogger().run("<document>")
        self._config = config or ExecutionConfig()

    def execute(
        self, steps: tuple[Step, ...] | list[Step], context: RenderContext
    ) -> list[StepResult]:
        """Execute steps sequentially.

        Args:
            steps: Steps in document order
            context: Arguments and rendered variables

        Returns:
            One StepResult per step

        Raises:
            ScaffoldError: On the first failing step
        """
        return [
            self.execute_step(step, step_index, context)
            for step_index, step in enumerate(steps, start=1)
        ]

    def execute_step(self, step: Step, step_index: int, context: RenderContext) -> StepResult:
        """Execute a single step.

        Args:
            step: Step definition
            step_index: 1-based position in the document
            context: Render context

        Returns:
            StepResult (COMPLETED or SKIPPED)

        Raises:
            ScaffoldError(TEMPLATE_ERROR, STEP_FAILED, COMMAND_FAILED)
        """
        started_at = datetime.now()
        start_time = time.time()
        step_logger = self._logger.step(step_index)

        if step.when:
            guard = self._render(step.when, context, step_index, "when")
            if guard != GUARD_PASS:
                step_logger.skipped(guard)
                return StepResult(
                    step_index=step_index,
                    status=StepStatus.SKIPPED,
                    started_at=started_at,
                    duration_ms=int((time.time() - start_time) * 1000),
                    skip_reason=f"when rendered to {guard!r}",
                )

        actions: list[ActionRecord] = []
        if step.mkdir:
            actions.append(self._mkdir(step.mkdir, step_index, context, step_logger))
        if step.write_file is not None:
            actions.append(self._write_file(step.write_file, step_index, context, step_logger))
        if step.run is not None:
            actions.append(self._run(step.run, step_index, context, step_logger))

        return StepResult(
            step_index=step_index,
            status=StepStatus.COMPLETED,
            started_at=started_at,
            duration_ms=int((time.time() - start_time) * 1000),
            actions=actions,
        )

    def _mkdir(
        self, template: str, step_index: int, context: RenderContext, step_logger: StepLogger
    ) -> ActionRecord:
        path = self._render(template, context, step_index, "mkdir")
        step_logger.action(ActionKind.MKDIR, path, dry_run=self._config.dry_run)

        if not self._config.dry_run:
            try:
                Path(path).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise get_error_factory().from_exception(
                    e, step_index=step_index, action=ActionKind.MKDIR.value
                ) from e

        return ActionRecord(kind=ActionKind.MKDIR, target=path)

    def _write_file(
        self,
        write_file: WriteFile,
        step_index: int,
        context: RenderContext,
        step_logger: StepLogger,
    ) -> ActionRecord:
        path = self._render(write_file.path, context, step_index, "write_file.path")
        content = self._render(write_file.content, context, step_index, "write_file.content")

        try:
            if not self._config.dry_run:
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            step_logger.action(ActionKind.WRITE_FILE, path, dry_run=self._config.dry_run)
            if not self._config.dry_run:
                Path(path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise get_error_factory().from_exception(
                e, step_index=step_index, action=ActionKind.WRITE_FILE.value
            ) from e

        return ActionRecord(kind=ActionKind.WRITE_FILE, target=path)

    def _run(
        self, run: RunCommand, step_index: int, context: RenderContext, step_logger: StepLogger
    ) -> ActionRecord:
        cmd = self._render(run.cmd, context, step_index, "run.cmd")
        # A dir that renders to "" means the current directory
        cwd = self._render(run.dir, context, step_index, "run.dir") if run.dir else ""

        step_logger.action(ActionKind.RUN, cmd, dry_run=self._config.dry_run)
        if self._config.dry_run:
            return ActionRecord(kind=ActionKind.RUN, target=cmd)

        # Child output goes straight to our stdout/stderr; flush ours first
        sys.stdout.flush()
        sys.stderr.flush()

        start_time = time.time()
        try:
            completed = subprocess.run([self._config.shell, "-c", cmd], cwd=cwd or None, check=True)
        except subprocess.CalledProcessError as e:
            step_logger.command_finished(e.returncode, int((time.time() - start_time) * 1000))
            raise get_error_factory().from_exception(
                e, step_index=step_index, action=ActionKind.RUN.value
            ) from e
        except OSError as e:
            raise get_error_factory().from_exception(
                e, step_index=step_index, action=ActionKind.RUN.value
            ) from e

        step_logger.command_finished(completed.returncode, int((time.time() - start_time) * 1000))
        return ActionRecord(kind=ActionKind.RUN, target=cmd, exit_code=completed.returncode)

    def _render(self, template: str, context: RenderContext, step_index: int, field: str) -> str:
        return self._template_engine.render_field(
            template,
            context,
            target=f"step {step_index} {field}",
            step_index=step_index,
            field=field,
        )
