"""Template Engine type definitions."""

from dataclasses import dataclass, field
from typing import NamedTuple


@dataclass
class RenderContext:
    """Context available to templates.

    Access patterns:
    - {{ Arg 0 }} / {{ arg 0 }} → self.arg(0)
    - {{ Var "name" }} / {{ .Var.name }} → self.variables["name"]
    """

    arguments: tuple[str, ...] = ()  # Positional arguments, index 0 first
    variables: dict[str, str] = field(default_factory=dict)  # Rendered variable values

    def __post_init__(self) -> None:
        self.arguments = tuple(self.arguments)

    def arg(self, index: int) -> str:
        """Return the argument at ``index``, or "" when it was not supplied."""
        if 0 <= index < len(self.arguments):
            return self.arguments[index]
        return ""


class Token(NamedTuple):
    """Lexical token inside a ``{{ }}`` action."""

    kind: str  # string | number | field | ident | lparen | rparen
    value: str  # Decoded value (unquoted string, digits, name)
    position: int  # Offset inside the action text
