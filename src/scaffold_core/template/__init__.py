"""Template Engine for scaffold documents."""

from .context import ContextBuilder
from .engine import TemplateEngine
from .parser import extract_templates, find_max_arg_index, has_templates
from .types import RenderContext

__all__ = [
    "TemplateEngine",
    "RenderContext",
    "ContextBuilder",
    "extract_templates",
    "find_max_arg_index",
    "has_templates",
]
