"""Scaffold Core - Generate project skeletons from YAML templates.

A template document declares variables and an ordered list of steps (mkdir,
write_file, run). Positional arguments and variables are substituted into
every step field before the step runs.
"""

from collections.abc import Sequence

from scaffold_core.config import ScaffoldConfig
from scaffold_core.engine import RunResult, ScaffoldRunner
from scaffold_core.errors import ScaffoldError

__version__ = "0.3.0"


def run(
    reference: str,
    arguments: Sequence[str],
    config: ScaffoldConfig | None = None,
) -> RunResult:
    """Load the template at ``reference`` and run it with ``arguments``.

    Args:
        reference: Local path, http(s) URL or ``github.com/<owner>/<repo>/<path>``
        arguments: Positional arguments, ``{{ Arg 0 }}`` first
        config: Optional configuration (defaults to ScaffoldConfig())

    Returns:
        RunResult summary

    Raises:
        ScaffoldError: On the first failure
    """
    return ScaffoldRunner(config).run(reference, arguments)


__all__ = ["__version__", "run", "RunResult", "ScaffoldError", "ScaffoldRunner", "ScaffoldConfig"]
