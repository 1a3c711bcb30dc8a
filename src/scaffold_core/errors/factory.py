"""Error factory for creating ScaffoldErrors from any exception type."""

from typing import Any

from .errors import ScaffoldError
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates ScaffoldErrors from any exception type."""

    def __init__(
        self,
        registry: ErrorRegistry | None = None,
        matcher_chain: ErrorMatcherChain | None = None,
    ):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
            matcher_chain: Matcher chain (defaults to new ErrorMatcherChain())
        """
        self.registry = registry or ErrorRegistry()
        self.matcher_chain = matcher_chain or ErrorMatcherChain()

    def from_exception(
        self,
        error: BaseException,
        step_index: int | None = None,
        **context: Any,
    ) -> ScaffoldError:
        """Convert any exception to ScaffoldError.

        Args:
            error: Exception to convert
            step_index: Optional 1-based step index
            **context: Extra context for message interpolation (action, reference, ...)

        Returns:
            ScaffoldError instance
        """
        # If already a ScaffoldError, just add context
        if isinstance(error, ScaffoldError):
            return error.with_context(step_index=step_index, field_name=context.get("field"))

        match_result = self.matcher_chain.match(error)

        merged = dict(context)
        merged.update(match_result.context)
        if step_index is not None:
            merged["step_index"] = step_index

        return self.registry.create(
            code=match_result.code,
            context=merged,
            cause=error,
        )

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ScaffoldError:
        """Create ScaffoldError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            ScaffoldError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> ScaffoldError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        ScaffoldError instance
    """
    return get_error_factory().create(code, context)
