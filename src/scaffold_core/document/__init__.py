"""Template documents: data model, YAML parsing and argument scanning."""

from .parser import parse_document_yaml
from .scanner import max_argument_index, required_argument_count
from .types import Document, RunCommand, Step, WriteFile

__all__ = [
    "Document",
    "Step",
    "WriteFile",
    "RunCommand",
    "parse_document_yaml",
    "max_argument_index",
    "required_argument_count",
]
