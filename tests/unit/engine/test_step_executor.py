"""Unit tests for StepExecutor."""

from pathlib import Path

import pytest

from scaffold_core.config import ExecutionConfig
from scaffold_core.document import RunCommand, Step, WriteFile
from scaffold_core.engine import StepExecutor
from scaffold_core.errors import ScaffoldError
from scaffold_core.types import ActionKind, StepStatus


@pytest.fixture
def executor(engine, logger):
    """StepExecutor with captured progress output."""
    return StepExecutor(engine, logger=logger.run("test.yaml"))


@pytest.fixture
def dry_executor(engine, logger):
    return StepExecutor(
        engine, logger=logger.run("test.yaml"), config=ExecutionConfig(dry_run=True)
    )


class TestGuard:
    def test_true_guard_runs(self, workdir, executor, make_context):
        result = executor.execute_step(Step(mkdir="out", when="true"), 1, make_context())
        assert result.status == StepStatus.COMPLETED
        assert (workdir / "out").is_dir()

    @pytest.mark.parametrize("guard", ["false", "TRUE", "True", " true", "yes", "1"])
    def test_other_values_skip(self, workdir, executor, make_context, progress_stream, guard):
        result = executor.execute_step(Step(mkdir="out", when=guard), 1, make_context())
        assert result.status == StepStatus.SKIPPED
        assert not (workdir / "out").exists()
        assert progress_stream.getvalue() == ""

    def test_guard_rendered_from_argument(self, workdir, executor, make_context):
        step = Step(mkdir="out", when="{{ Arg 0 }}")
        assert executor.execute_step(step, 1, make_context("false")).status == StepStatus.SKIPPED
        assert executor.execute_step(step, 1, make_context("true")).status == StepStatus.COMPLETED

    def test_empty_guard_rendering_skips(self, workdir, executor, make_context):
        """A guard that renders to "" skips, unlike an absent guard."""
        step = Step(mkdir="out", when="{{ Arg 3 }}")
        assert executor.execute_step(step, 1, make_context()).status == StepStatus.SKIPPED

    def test_guard_render_error(self, workdir, executor, make_context):
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(Step(mkdir="out", when='{{ Var "x" }}'), 4, make_context())
        assert exc_info.value.code == "TEMPLATE_ERROR"
        assert exc_info.value.step_index == 4
        assert exc_info.value.field_name == "when"


class TestMkdir:
    def test_creates_nested(self, workdir, executor, make_context, progress_stream):
        result = executor.execute_step(Step(mkdir="{{ Arg 0 }}/a/b"), 1, make_context("proj"))

        assert (workdir / "proj" / "a" / "b").is_dir()
        assert progress_stream.getvalue() == "mkdir proj/a/b\n"
        assert result.actions[0].kind == ActionKind.MKDIR
        assert result.actions[0].target == "proj/a/b"

    def test_existing_directory_ok(self, workdir, executor, make_context):
        (workdir / "proj").mkdir()
        executor.execute_step(Step(mkdir="proj"), 1, make_context())
        assert (workdir / "proj").is_dir()

    def test_path_is_a_file(self, workdir, executor, make_context):
        (workdir / "proj").write_text("x")
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(Step(mkdir="proj/sub"), 2, make_context())
        error = exc_info.value
        assert error.code == "STEP_FAILED"
        assert error.step_index == 2
        assert str(error).startswith("Step 2 (mkdir) failed")


class TestWriteFile:
    def test_writes_rendered_content(self, workdir, executor, make_context, progress_stream):
        step = Step(write_file=WriteFile(path="{{ Arg 0 }}/README.md", content="# {{ Arg 0 }}"))
        executor.execute_step(step, 1, make_context("proj"))

        assert (workdir / "proj" / "README.md").read_text(encoding="utf-8") == "# proj"
        assert progress_stream.getvalue() == "write_file proj/README.md\n"

    def test_overwrites(self, workdir, executor, make_context):
        (workdir / "f.txt").write_text("old")
        step = Step(write_file=WriteFile(path="f.txt", content="new"))
        executor.execute_step(step, 1, make_context())
        assert (workdir / "f.txt").read_text() == "new"

    def test_empty_content(self, workdir, executor, make_context):
        executor.execute_step(Step(write_file=WriteFile(path="empty")), 1, make_context())
        assert (workdir / "empty").read_text() == ""

    def test_content_render_error_names_field(self, workdir, executor, make_context):
        step = Step(write_file=WriteFile(path="a", content="{{ Nope }}"))
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(step, 2, make_context())
        assert exc_info.value.field_name == "write_file.content"
        assert str(exc_info.value).startswith("Failed to render step 2 write_file.content")
        assert not (workdir / "a").exists()

    def test_unicode_content(self, workdir, executor, make_context):
        step = Step(write_file=WriteFile(path="u.txt", content="héllo {{ Arg 0 }}"))
        executor.execute_step(step, 1, make_context("wörld"))
        assert (workdir / "u.txt").read_text(encoding="utf-8") == "héllo wörld"


class TestRun:
    def test_runs_in_directory(self, workdir, executor, make_context, progress_stream):
        (workdir / "proj").mkdir()
        step = Step(run=RunCommand(cmd="echo hi > out.txt", dir="{{ Arg 0 }}"))
        result = executor.execute_step(step, 1, make_context("proj"))

        assert (workdir / "proj" / "out.txt").read_text() == "hi\n"
        assert progress_stream.getvalue() == "run echo hi > out.txt\n"
        assert result.actions[0].exit_code == 0

    def test_runs_in_cwd_without_dir(self, workdir, executor, make_context):
        executor.execute_step(Step(run=RunCommand(cmd="touch here")), 1, make_context())
        assert (workdir / "here").exists()

    def test_dir_rendering_empty_uses_cwd(self, workdir, executor, make_context):
        step = Step(run=RunCommand(cmd="touch here", dir="{{ Arg 0 }}"))
        result = executor.execute_step(step, 1, make_context(""))

        assert (workdir / "here").exists()
        assert result.actions[0].exit_code == 0

    def test_non_zero_exit(self, workdir, executor, make_context):
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(Step(run=RunCommand(cmd="exit 3")), 2, make_context())
        error = exc_info.value
        assert error.code == "COMMAND_FAILED"
        assert error.context["exit_code"] == 3
        assert str(error) == "Step 2 (run) failed: command 'exit 3' exited with status 3"

    def test_missing_directory(self, workdir, executor, make_context):
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(Step(run=RunCommand(cmd="ls", dir="nowhere")), 1, make_context())
        assert exc_info.value.code == "STEP_FAILED"
        assert "(run)" in str(exc_info.value)

    def test_missing_shell(self, workdir, engine, logger, make_context):
        executor = StepExecutor(
            engine,
            logger=logger.run("t"),
            config=ExecutionConfig(shell="/definitely/not/a/shell"),
        )
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute_step(Step(run=RunCommand(cmd="true")), 1, make_context())
        assert exc_info.value.code == "STEP_FAILED"


class TestMultipleActions:
    def test_order_mkdir_write_run(self, workdir, executor, make_context, progress_stream):
        step = Step(
            mkdir="d",
            write_file=WriteFile(path="d/f.txt", content="x"),
            run=RunCommand(cmd="cat f.txt > copy.txt", dir="d"),
        )
        result = executor.execute_step(step, 1, make_context())

        assert progress_stream.getvalue().splitlines() == [
            "mkdir d",
            "write_file d/f.txt",
            "run cat f.txt > copy.txt",
        ]
        assert [a.kind for a in result.actions] == [
            ActionKind.MKDIR,
            ActionKind.WRITE_FILE,
            ActionKind.RUN,
        ]
        assert (workdir / "d" / "copy.txt").read_text() == "x"

    def test_execute_stops_at_first_failure(self, workdir, executor, make_context):
        steps = [
            Step(mkdir="one"),
            Step(run=RunCommand(cmd="exit 1")),
            Step(mkdir="three"),
        ]
        with pytest.raises(ScaffoldError) as exc_info:
            executor.execute(steps, make_context())

        assert exc_info.value.step_index == 2
        assert (workdir / "one").is_dir()
        assert not (workdir / "three").exists()

    def test_execute_returns_results(self, workdir, executor, make_context):
        steps = [Step(mkdir="a"), Step(mkdir="b", when="false")]
        results = executor.execute(steps, make_context())
        assert [r.step_index for r in results] == [1, 2]
        assert [r.status for r in results] == [StepStatus.COMPLETED, StepStatus.SKIPPED]


class TestDryRun:
    def test_reports_without_side_effects(
        self, workdir, dry_executor, make_context, progress_stream
    ):
        step = Step(
            mkdir="d",
            write_file=WriteFile(path="d/f.txt", content="x"),
            run=RunCommand(cmd="touch ran"),
        )
        result = dry_executor.execute_step(step, 1, make_context())

        assert result.status == StepStatus.COMPLETED
        assert progress_stream.getvalue().splitlines() == [
            "mkdir d",
            "write_file d/f.txt",
            "run touch ran",
        ]
        assert list(Path(workdir).iterdir()) == []
