"""Template context builder."""

from collections.abc import Sequence

from .types import RenderContext


class ContextBuilder:
    """Build a RenderContext incrementally before steps run."""

    def __init__(self, arguments: Sequence[str]):
        """Initialize context builder.

        Args:
            arguments: Positional arguments supplied by the caller
        """
        self._context = RenderContext(arguments=tuple(arguments), variables={})

    def add_variable(self, name: str, value: str) -> None:
        """Record a rendered variable.

        Args:
            name: Variable name
            value: Rendered value

        Raises:
            ValueError: If the variable was already recorded
        """
        if name in self._context.variables:
            raise ValueError(f"Variable '{name}' already rendered")
        self._context.variables[name] = value

    def get_context(self) -> RenderContext:
        """Get current context."""
        return self._context
