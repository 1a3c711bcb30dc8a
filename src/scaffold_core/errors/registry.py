"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, ScaffoldError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> ScaffoldError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional underlying exception

        Returns:
            ScaffoldError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        # Interpolate templates
        message = self._interpolate(template.message_template, context)
        detail = self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return ScaffoldError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            step_index=context.get("step_index"),
            field_name=context.get("field"),
            context=dict(context),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # RETRIEVAL Errors
        self._templates["RETRIEVAL_FAILED"] = ErrorTemplate(
            code="RETRIEVAL_FAILED",
            category=ErrorCategory.RETRIEVAL,
            message_template="Failed to load template '{reference}'",
            detail_template="{detail}",
            suggestion_template="Check the path or URL and that it is reachable",
        )

        # DOCUMENT Errors
        self._templates["DOCUMENT_INVALID"] = ErrorTemplate(
            code="DOCUMENT_INVALID",
            category=ErrorCategory.DOCUMENT,
            message_template="Failed to parse template document",
            detail_template="{detail}",
            suggestion_template="Check the YAML syntax and the vars/steps layout",
        )

        # VALIDATION Errors
        self._templates["INSUFFICIENT_ARGUMENTS"] = ErrorTemplate(
            code="INSUFFICIENT_ARGUMENTS",
            category=ErrorCategory.VALIDATION,
            message_template=(
                "not enough arguments: template requires at least {required} argument(s), "
                "got {supplied}"
            ),
            suggestion_template="Pass {required} positional argument(s) after the template",
        )

        # RENDER Errors
        self._templates["TEMPLATE_ERROR"] = ErrorTemplate(
            code="TEMPLATE_ERROR",
            category=ErrorCategory.RENDER,
            message_template="Failed to render {target}",
            detail_template="{detail}",
            suggestion_template="Check template syntax and variable names",
        )

        # EXECUTION Errors
        self._templates["STEP_FAILED"] = ErrorTemplate(
            code="STEP_FAILED",
            category=ErrorCategory.EXECUTION,
            message_template="Step {step_index} ({action}) failed",
            detail_template="{detail}",
            suggestion_template="Check file permissions and that the paths are valid",
        )

        self._templates["COMMAND_FAILED"] = ErrorTemplate(
            code="COMMAND_FAILED",
            category=ErrorCategory.EXECUTION,
            message_template="Step {step_index} (run) failed",
            detail_template="command '{command}' exited with status {exit_code}",
            suggestion_template="Run the command by hand to see why it fails",
        )

        # SYSTEM Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.SYSTEM,
            message_template="Invalid configuration",
            detail_template="{detail}",
            suggestion_template="Check the configuration file and SCAFFOLD_* variables",
        )

        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal scaffold error",
            detail_template="{error_type}: {detail}",
            suggestion_template="Check the logs and report this issue",
        )
