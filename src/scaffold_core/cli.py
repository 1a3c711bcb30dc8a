"""CLI entry point for scaffold.

This module defines the Click-based command-line interface:

    scaffold [OPTIONS] TEMPLATE [ARGS]...
"""

from pathlib import Path

import click

from scaffold_core import __version__
from scaffold_core.config import load_config
from scaffold_core.engine import ScaffoldRunner
from scaffold_core.errors import ScaffoldError
from scaffold_core.types import LogFormat, LogLevel


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="scaffold")
@click.argument("template")
@click.argument("args", nargs=-1)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, dir_okay=False, path_type=str),
    default=None,
    help="Path to config file (overrides .scaffold.yaml and user config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.option(
    "--log-format",
    type=click.Choice([fmt.value for fmt in LogFormat]),
    default=None,
    help="Log output format (default: from config).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the actions a template would perform without performing them.",
)
def main(
    template: str,
    args: tuple[str, ...],
    config_file: str | None,
    verbose: int,
    quiet: bool,
    log_format: str | None,
    dry_run: bool,
) -> None:
    """Scaffold a project from TEMPLATE, substituting ARGS.

    TEMPLATE is a local path, an http(s) URL, or github.com/<owner>/<repo>/<path>.
    Use -- before ARGS that start with a dash.
    """
    try:
        config = load_config(Path(config_file) if config_file else None)

        # Priority: quiet > verbose > config
        if quiet:
            config.logging.level = LogLevel.ERROR
        elif verbose > 0:
            config.logging.level = LogLevel.INFO if verbose == 1 else LogLevel.DEBUG
        if log_format:
            config.logging.format = LogFormat(log_format)
        if dry_run:
            config.execution.dry_run = True

        ScaffoldRunner(config).run(template, args)
    except ScaffoldError as e:
        click.echo(f"Error: {e}", err=True)
        if e.suggestion and verbose > 0:
            click.echo(f"  Suggestion: {e.suggestion}", err=True)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
