"""Template parsing utilities.

Everything here is a pure function over a string: no rendering, no context.
"""

import re

from scaffold_core.errors import create_error

from .types import Token

# {{ ... }} actions; quoted strings inside an action may contain "}}"
TEMPLATE_PATTERN = re.compile(
    r"""\{\{((?:"(?:[^"\\]|\\.)*"|'[^']*'|.)*?)\}\}""",
    re.DOTALL,
)

STRING_LITERAL_PATTERN = re.compile(r""""(?:[^"\\]|\\.)*"|'[^']*'""", re.DOTALL)

# Arg N / arg N, not preceded by a name character or a dot (".Var.arg" is a field)
ARG_REFERENCE_PATTERN = re.compile(r"(?<![\w.])[Aa]rg\s+(\d+)")

TOKEN_PATTERN = re.compile(
    r"""
    (?P<string>"(?:[^"\\]|\\.)*"|'[^']*')
    |(?P<number>-?\d+)
    |(?P<field>(?:\.[A-Za-z_]\w*)+)
    |(?P<ident>[A-Za-z_]\w*)
    |(?P<lparen>\()
    |(?P<rparen>\))
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"'}


def extract_templates(text: str) -> list[str]:
    """Extract all {{ }} template expressions from text.

    Args:
        text: Text to search

    Returns:
        List of template expressions (without {{ }}, stripped)
    """
    return [match.group(1).strip() for match in TEMPLATE_PATTERN.finditer(text)]


def has_templates(text: str) -> bool:
    """Check if text contains any {{ }} templates."""
    return bool(TEMPLATE_PATTERN.search(text))


def find_max_arg_index(text: str) -> int:
    """Return the highest argument index referenced in ``text``, or -1.

    Only ``Arg N`` / ``arg N`` inside ``{{ }}`` actions count; occurrences in
    plain text or inside quoted string literals are ignored.

    Args:
        text: Template string to scan

    Returns:
        Maximum referenced index, -1 if there is none
    """
    max_index = -1
    for expression in extract_templates(text):
        code = STRING_LITERAL_PATTERN.sub('""', expression)
        for match in ARG_REFERENCE_PATTERN.finditer(code):
            max_index = max(max_index, int(match.group(1)))
    return max_index


def tokenize(expression: str) -> list[Token]:
    """Split an action expression into tokens.

    Args:
        expression: Text between ``{{`` and ``}}``

    Returns:
        List of tokens

    Raises:
        ScaffoldError(TEMPLATE_ERROR) on characters that start no token
    """
    tokens: list[Token] = []
    pos = 0
    length = len(expression)

    while pos < length:
        if expression[pos].isspace():
            pos += 1
            continue

        match = TOKEN_PATTERN.match(expression, pos)
        if match is None:
            char = expression[pos]
            if char in "\"'":
                detail = f"unterminated string literal in '{{{{{expression}}}}}'"
            else:
                detail = f"unexpected character {char!r} in '{{{{{expression}}}}}'"
            raise create_error("TEMPLATE_ERROR", target="template", detail=detail)

        kind = match.lastgroup or ""
        text = match.group()
        if kind == "string":
            value = _unquote(text)
        elif kind == "field":
            value = text[1:]
        else:
            value = text
        tokens.append(Token(kind=kind, value=value, position=pos))
        pos = match.end()

    return tokens


def _unquote(literal: str) -> str:
    """Decode a quoted string literal."""
    body = literal[1:-1]
    if literal[0] == "'":
        return body
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)
