"""Static argument-requirement scan over a whole document."""

from scaffold_core.template.parser import find_max_arg_index

from .types import Document


def max_argument_index(document: Document) -> int:
    """Return the highest ``Arg N`` index referenced anywhere in ``document``.

    Scans every variable template and every template-bearing step field
    (mkdir, write_file.path, write_file.content, run.cmd, run.dir, when).
    Nothing is rendered.

    Args:
        document: Parsed document

    Returns:
        Maximum index, or -1 if no field references an argument
    """
    max_index = -1

    for template in document.variables.values():
        max_index = max(max_index, find_max_arg_index(template))

    for step in document.steps:
        for _, template in step.template_fields():
            max_index = max(max_index, find_max_arg_index(template))

    return max_index


def required_argument_count(document: Document) -> int:
    """Number of positional arguments the document needs."""
    return max_argument_index(document) + 1
