"""Template loader - Resolve references and fetch document bytes."""

from .loader import GITHUB_SHORTHAND_PATTERN, TemplateLoader
from .types import SourceReference

__all__ = [
    "TemplateLoader",
    "SourceReference",
    "GITHUB_SHORTHAND_PATTERN",
]
