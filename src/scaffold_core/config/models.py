"""Scaffold configuration data models."""

from dataclasses import dataclass, field

from scaffold_core.types import LogFormat, LogLevel


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.WARN
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200


@dataclass
class FetchConfig:
    """Template retrieval configuration."""

    timeout_seconds: float = 30.0
    github_branch: str = "main"
    github_raw_base: str = "https://raw.githubusercontent.com"
    follow_redirects: bool = True


@dataclass
class ExecutionConfig:
    """Step execution configuration."""

    shell: str = "sh"  # Run actions execute `<shell> -c <cmd>`
    dry_run: bool = False  # Report actions without performing them


@dataclass
class ScaffoldConfig:
    """Complete scaffold configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
