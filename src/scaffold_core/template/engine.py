"""Template Engine implementation."""

from typing import NoReturn

from scaffold_core.errors import ScaffoldError, create_error

from .parser import TEMPLATE_PATTERN, tokenize
from .types import RenderContext, Token

ARG_FUNCTIONS = frozenset({"Arg", "arg"})
VAR_FUNCTIONS = frozenset({"Var", "var"})


class TemplateEngine:
    """Render template expressions in document strings.

    Supports:
    - Argument access: {{ Arg 0 }}, {{ arg 1 }}
    - Variable access: {{ Var "name" }}, {{ .Var.name }}
    - String literals: {{ "text" }}
    - Nesting with parentheses: {{ Var (Arg 0) }}

    Does NOT support:
    - Filters or pipelines
    - Control flow (if/range)
    - Any function other than Arg and Var

    Keeping the language this small is what lets the argument scanner find
    every ``Arg N`` reference without rendering.
    """

    def render_string(self, template_str: str, context: RenderContext) -> str:
        """Render a single template string.

        Args:
            template_str: String that may contain {{ }} actions
            context: Arguments and rendered variables

        Returns:
            Rendered string

        Raises:
            ScaffoldError(TEMPLATE_ERROR) on syntax or evaluation errors
        """
        parts: list[str] = []
        last = 0

        for match in TEMPLATE_PATTERN.finditer(template_str):
            self._check_text(template_str[last : match.start()])
            parts.append(template_str[last : match.start()])
            parts.append(self._evaluate_expression(match.group(1), context))
            last = match.end()

        self._check_text(template_str[last:])
        parts.append(template_str[last:])
        return "".join(parts)

    def render_field(
        self,
        template_str: str,
        context: RenderContext,
        target: str,
        step_index: int | None = None,
        field: str | None = None,
    ) -> str:
        """Render a template string, tagging any failure with where it came from.

        Args:
            template_str: String that may contain {{ }} actions
            context: Render context
            target: Human-readable location, e.g. "var name" or "step 2 run.cmd"
            step_index: Optional 1-based step index
            field: Optional field name, e.g. "write_file.path"

        Returns:
            Rendered string

        Raises:
            ScaffoldError(TEMPLATE_ERROR) naming ``target``
        """
        try:
            return self.render_string(template_str, context)
        except ScaffoldError as e:
            raise create_error(
                "TEMPLATE_ERROR",
                target=target,
                detail=e.detail or e.message,
                step_index=step_index,
                field=field,
            ) from e

    def _check_text(self, text: str) -> None:
        """Reject an opening delimiter with no matching close."""
        if "{{" in text:
            snippet = text[text.index("{{") :][:40]
            raise create_error(
                "TEMPLATE_ERROR",
                target="template",
                detail=f"unclosed action at '{snippet}'",
            )

    def _evaluate_expression(self, expression: str, context: RenderContext) -> str:
        """Evaluate the text of one {{ }} action.

        Args:
            expression: Expression to evaluate (without {{ }})
            context: Render context

        Returns:
            Evaluated value
        """
        tokens = tokenize(expression)
        if not tokens:
            raise create_error("TEMPLATE_ERROR", target="template", detail="empty action '{{}}'")

        evaluator = _Evaluator(tokens, context, expression)
        value = evaluator.expression()
        evaluator.expect_end()
        return value


class _Evaluator:
    """Recursive-descent evaluator over the tokens of one action.

    Grammar::

        expression := call | operand
        call       := ARG NUMBER | VAR operand
        operand    := STRING | FIELD | "(" expression ")"
    """

    def __init__(self, tokens: list[Token], context: RenderContext, source: str):
        self._tokens = tokens
        self._pos = 0
        self._context = context
        self._source = source.strip()

    def expression(self) -> str:
        token = self._peek()
        if token is not None and token.kind == "ident":
            self._pos += 1
            if token.value in ARG_FUNCTIONS:
                return self._call_arg(token)
            if token.value in VAR_FUNCTIONS:
                return self._lookup(self._operand(after=token.value))
            self._fail(f"function \"{token.value}\" not defined")
        return self._operand()

    def expect_end(self) -> None:
        token = self._peek()
        if token is not None:
            self._fail(f"unexpected {self._describe(token)} after expression")

    def _call_arg(self, func: Token) -> str:
        token = self._next(f"{func.value} requires an argument index")
        if token.kind != "number":
            self._fail(
                f"{func.value} index must be an integer literal, got {self._describe(token)}"
            )
        if token.value.startswith("-"):
            self._fail(f"{func.value} index must not be negative, got {token.value}")
        return self._context.arg(int(token.value))

    def _operand(self, after: str | None = None) -> str:
        missing = f"{after} requires a variable name" if after else "missing operand"
        token = self._next(missing)

        if token.kind == "string":
            return token.value
        if token.kind == "field":
            return self._field(token)
        if token.kind == "lparen":
            value = self.expression()
            closing = self._next("unclosed left paren")
            if closing.kind != "rparen":
                self._fail(f"expected ')' but found {self._describe(closing)}")
            return value

        if after:
            self._fail(f"{after} name must be a quoted string, got {self._describe(token)}")
        self._fail(f"unexpected {self._describe(token)}")

    def _field(self, token: Token) -> str:
        """Resolve the dotted form ``.Var.name``."""
        parts = token.value.split(".")
        if parts[0] != "Var" or len(parts) != 2:
            self._fail(f"can't evaluate field .{token.value}")
        return self._lookup(parts[1])

    def _lookup(self, name: str) -> str:
        variables = self._context.variables
        if name not in variables:
            self._fail(f"undefined variable '{name}'")
        return variables[name]

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self, missing: str) -> Token:
        token = self._peek()
        if token is None:
            self._fail(missing)
        self._pos += 1
        return token

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind == "string":
            return f"string {token.value!r}"
        if token.kind in ("lparen", "rparen"):
            return f"'{token.value}'"
        return f"{token.kind} '{token.value}'"

    def _fail(self, detail: str) -> NoReturn:
        raise create_error(
            "TEMPLATE_ERROR",
            target="template",
            detail=f"{detail} in '{{{{ {self._source} }}}}'",
        )
