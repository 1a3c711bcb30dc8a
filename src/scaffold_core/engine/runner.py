"""Run orchestrator - load, validate, render and execute a template."""

import time
from collections.abc import Sequence
from datetime import datetime

from scaffold_core.config import ScaffoldConfig
from scaffold_core.document import Document, max_argument_index, parse_document_yaml
from scaffold_core.errors import ScaffoldError, create_error, get_error_factory
from scaffold_core.loader import TemplateLoader
from scaffold_core.logging import LogConfig, RunLogger, ScaffoldLogger
from scaffold_core.template import ContextBuilder, RenderContext, TemplateEngine

from .executor import StepExecutor
from .types import RunResult


def check_arguments(document: Document, supplied: int) -> None:
    """Reject a run that supplies fewer arguments than the document references.

    Runs before any rendering or side effect.

    Args:
        document: Parsed document
        supplied: Number of positional arguments supplied

    Raises:
        ScaffoldError(INSUFFICIENT_ARGUMENTS): If ``supplied <= max index``
    """
    max_index = max_argument_index(document)
    if max_index >= 0 and supplied <= max_index:
        raise create_error(
            "INSUFFICIENT_ARGUMENTS",
            required=max_index + 1,
            supplied=supplied,
        )


def build_logger(config: ScaffoldConfig) -> ScaffoldLogger:
    """Create a ScaffoldLogger from the logging section of ``config``."""
    return ScaffoldLogger(
        LogConfig(
            level=config.logging.level,
            format=config.logging.format,
            show_context=config.logging.show_context,
            truncate_at=config.logging.truncate_at,
        )
    )


class ScaffoldRunner:
    """
    Run template documents.

    Run sequence:
    1. Load the document bytes and parse them
    2. Check that enough positional arguments were supplied
    3. Render every variable once, in declared order
    4. Execute the steps in order

    The first error aborts the run. Nothing already done is undone.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        loader: TemplateLoader | None = None,
        logger: ScaffoldLogger | None = None,
        template_engine: TemplateEngine | None = None,
    ):
        """Initialize runner.

        Args:
            config: Scaffold configuration (defaults to ScaffoldConfig())
            loader: Template loader (defaults to one built from config.fetch)
            logger: Logger (defaults to one built from config.logging)
            template_engine: Template engine (defaults to TemplateEngine())
        """
        self._config = config or ScaffoldConfig()
        self._logger = logger or build_logger(self._config)
        self._loader = loader or TemplateLoader(self._config.fetch, logger=self._logger)
        self._template_engine = template_engine or TemplateEngine()

    def run(self, reference: str, arguments: Sequence[str]) -> RunResult:
        """Load a template and run it.

        Args:
            reference: Path, URL or GitHub shorthand
            arguments: Positional arguments

        Returns:
            RunResult

        Raises:
            ScaffoldError: On the first failure
        """
        run_logger = self._logger.run(reference)
        start_time = time.time()
        try:
            content = self._loader.load(reference)
            document = parse_document_yaml(content, source=reference)
        except ScaffoldError as e:
            run_logger.failed(e, int((time.time() - start_time) * 1000))
            raise
        except Exception as e:
            error = get_error_factory().from_exception(e, reference=reference)
            run_logger.failed(error, int((time.time() - start_time) * 1000))
            raise error from e

        return self._run(document, arguments, run_logger)

    def run_document(self, document: Document, arguments: Sequence[str]) -> RunResult:
        """Run an already parsed document.

        Args:
            document: Parsed document
            arguments: Positional arguments

        Returns:
            RunResult

        Raises:
            ScaffoldError: On the first failure
        """
        return self._run(document, arguments, self._logger.run(document.source or "<document>"))

    def render_variables(self, document: Document, arguments: Sequence[str]) -> RenderContext:
        """Render the document's variables into a fresh context.

        Each variable sees the arguments and the variables declared before it.

        Args:
            document: Parsed document
            arguments: Positional arguments

        Returns:
            Populated RenderContext

        Raises:
            ScaffoldError(TEMPLATE_ERROR): Tagged with ``var <name>``
        """
        builder = ContextBuilder(arguments)
        for name, template in document.variables.items():
            value = self._template_engine.render_field(
                template,
                builder.get_context(),
                target=f"var {name}",
                field=f"var {name}",
            )
            builder.add_variable(name, value)
        return builder.get_context()

    def _run(
        self, document: Document, arguments: Sequence[str], run_logger: RunLogger
    ) -> RunResult:
        started_at = datetime.now()
        start_time = time.time()
        arguments = tuple(arguments)

        try:
            check_arguments(document, len(arguments))
            run_logger.started(len(arguments), len(document.steps))

            context = self.render_variables(document, arguments)
            for name, value in context.variables.items():
                run_logger.variable_rendered(name, value)

            executor = StepExecutor(
                self._template_engine, logger=run_logger, config=self._config.execution
            )
            steps = executor.execute(document.steps, context)
        except ScaffoldError as e:
            run_logger.failed(e, int((time.time() - start_time) * 1000))
            raise
        except Exception as e:
            error = get_error_factory().from_exception(e)
            run_logger.failed(error, int((time.time() - start_time) * 1000))
            raise error from e

        result = RunResult(
            source=document.source,
            started_at=started_at,
            duration_ms=int((time.time() - start_time) * 1000),
            arguments=arguments,
            variables=dict(context.variables),
            steps=steps,
            dry_run=self._config.execution.dry_run,
        )
        run_logger.completed(result.duration_ms, result.steps_completed, result.steps_skipped)
        return result
