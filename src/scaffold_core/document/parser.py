"""YAML template document parsing."""

from typing import Any

import yaml

from scaffold_core.errors import create_error, get_error_factory

from .types import Document, RunCommand, Step, WriteFile


def parse_document_yaml(
    yaml_content: str | bytes,
    source: str | None = None,
) -> Document:
    """Parse YAML content into a Document.

    Accepts ``vars`` (or ``variables``) and ``steps`` at the top level. An
    empty document is valid and does nothing.

    Args:
        yaml_content: YAML content to parse
        source: Optional reference the content was loaded from

    Returns:
        Parsed document

    Raises:
        ScaffoldError(DOCUMENT_INVALID) if the YAML or its layout is invalid
    """
    if isinstance(yaml_content, bytes):
        try:
            yaml_content = yaml_content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise create_error("DOCUMENT_INVALID", detail=f"Template is not UTF-8: {e}") from e

    try:
        # BaseLoader keeps every scalar as its source text ("0755", "TRUE", "12:30")
        data = yaml.load(yaml_content, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise get_error_factory().from_exception(e) from e

    if data is None:
        return Document(source=source)

    if not isinstance(data, dict):
        raise create_error("DOCUMENT_INVALID", detail="YAML must be a mapping")

    if "vars" in data and "variables" in data:
        raise create_error(
            "DOCUMENT_INVALID", detail="Use either 'vars' or 'variables', not both"
        )

    variables = _parse_variables(data.get("vars", data.get("variables")))

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise create_error("DOCUMENT_INVALID", detail="'steps' must be a list")

    steps = tuple(_parse_step(step_data, i) for i, step_data in enumerate(raw_steps, start=1))

    return Document(variables=variables, steps=steps, source=source)


def _parse_variables(raw_vars: Any) -> dict[str, str]:
    """Normalize the variables mapping, keeping declared order."""
    if _is_empty(raw_vars):
        return {}
    if not isinstance(raw_vars, dict):
        raise create_error("DOCUMENT_INVALID", detail="'vars' must be a mapping")

    return {
        str(name): _as_template(value, f"vars.{name}") for name, value in raw_vars.items()
    }


def _parse_step(step_data: Any, index: int) -> Step:
    """Build one Step from its YAML mapping.

    Args:
        step_data: Raw step entry
        index: 1-based position, for error messages

    Returns:
        Step definition
    """
    where = f"steps[{index}]"
    if not isinstance(step_data, dict):
        raise create_error("DOCUMENT_INVALID", detail=f"{where} must be a mapping")

    write_file = None
    if not _is_empty(step_data.get("write_file")):
        raw = step_data["write_file"]
        if not isinstance(raw, dict):
            raise create_error("DOCUMENT_INVALID", detail=f"{where}.write_file must be a mapping")
        write_file = WriteFile(
            path=_as_template(raw.get("path"), f"{where}.write_file.path"),
            content=_as_template(raw.get("content"), f"{where}.write_file.content"),
        )

    run = None
    if not _is_empty(step_data.get("run")):
        raw = step_data["run"]
        if not isinstance(raw, dict):
            raise create_error("DOCUMENT_INVALID", detail=f"{where}.run must be a mapping")
        run = RunCommand(
            cmd=_as_template(raw.get("cmd"), f"{where}.run.cmd"),
            dir=_as_template(raw.get("dir"), f"{where}.run.dir"),
        )

    return Step(
        mkdir=_as_template(step_data.get("mkdir"), f"{where}.mkdir"),
        write_file=write_file,
        run=run,
        when=_as_template(step_data.get("when"), f"{where}.when"),
    )


def _is_empty(value: Any) -> bool:
    """A key given with no value (``run:``) loads as "" and counts as absent."""
    return value is None or value == ""


def _as_template(value: Any, where: str) -> str:
    """Return the template text of a scalar field; absent fields are "".

    Scalars are kept exactly as written, so ``when: TRUE`` stays "TRUE" and
    ``mkdir: 0755`` stays "0755".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise create_error(
        "DOCUMENT_INVALID",
        detail=f"{where} must be a string, got {type(value).__name__}",
    )
