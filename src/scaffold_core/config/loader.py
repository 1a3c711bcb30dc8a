"""Scaffold configuration loader."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from scaffold_core.errors import create_error
from scaffold_core.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import ExecutionConfig, FetchConfig, LoggingConfig, ScaffoldConfig

# Environment overrides: variable -> (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, Any]] = {
    "SCAFFOLD_LOG_LEVEL": ("logging", "level", str),
    "SCAFFOLD_LOG_FORMAT": ("logging", "format", str),
    "SCAFFOLD_HTTP_TIMEOUT": ("fetch", "timeout_seconds", float),
    "SCAFFOLD_GITHUB_BRANCH": ("fetch", "github_branch", str),
    "SCAFFOLD_SHELL": ("execution", "shell", str),
}

_SECTION_KEYS: dict[str, set[str]] = {
    "logging": {"level", "format", "show_context", "truncate_at"},
    "fetch": {"timeout_seconds", "github_branch", "github_raw_base", "follow_redirects"},
    "execution": {"shell", "dry_run"},
}


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        ScaffoldError(CONFIG_INVALID): If required var not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        elif operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Required environment variable {var_name} not set",
            )

    return re.sub(pattern, replacer, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve env vars in data structure."""
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate scaffold configuration."""

    def __init__(self, logger: Any = None):
        """Initialize config loader.

        Args:
            logger: Optional ScaffoldLogger instance
        """
        self._logger = logger

    def load(self, path: str | Path | None = None) -> ScaffoldConfig:
        """Load configuration.

        Resolution order if path not specified:
        1. SCAFFOLD_CONFIG_PATH environment variable
        2. ./.scaffold.yaml
        3. ~/.config/scaffold/config.yaml
        4. Built-in defaults

        ``SCAFFOLD_*`` environment overrides are applied on top in every case.

        Args:
            path: Optional path to config file; must exist when given

        Returns:
            Loaded ScaffoldConfig instance

        Raises:
            ScaffoldError(CONFIG_INVALID): If the file is missing or invalid
        """
        if path is not None:
            config_path: Path | None = Path(path)
            if not config_path.exists():
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Configuration file not found: {config_path}",
                )
        else:
            config_path = self._resolve_config_path()

        data: dict[str, Any] = {}
        if config_path is not None:
            try:
                with config_path.open(encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Invalid YAML in config file: {e}",
                ) from e
            except OSError as e:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Cannot read config file {config_path}: {e.strerror or e}",
                ) from e
            if not isinstance(data, dict):
                raise create_error("CONFIG_INVALID", detail="Config file must be a mapping")
            data = _resolve_env_vars_recursive(data)

        return self.load_from_dict(data, config_path)

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> ScaffoldConfig:
        """Load configuration from dictionary, applying environment overrides.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file, reported with warnings

        Returns:
            Loaded ScaffoldConfig instance

        Raises:
            ScaffoldError(CONFIG_INVALID): If configuration is invalid
        """
        data = self._apply_env_overrides(data)

        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        config = self._dict_to_config(data)

        if self._logger:
            source = {"config_path": str(config_path)} if config_path else None
            for issue in validation.warnings:
                self._logger.config_warning(issue.message, source)

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for key, section in data.items():
            if key not in _SECTION_KEYS:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )
                continue
            if not isinstance(section, dict):
                errors.append(ValidationIssue(path=key, message=f"{key} must be a mapping"))
                continue
            for sub_key in section:
                if sub_key not in _SECTION_KEYS[key]:
                    warnings.append(
                        ValidationIssue(
                            path=f"{key}.{sub_key}",
                            message=f"Unknown configuration key: {key}.{sub_key}",
                            severity="warning",
                        )
                    )

        logging_data = data.get("logging")
        if isinstance(logging_data, dict):
            if "level" in logging_data and _parse_level(logging_data["level"]) is None:
                errors.append(
                    ValidationIssue(
                        path="logging.level",
                        message=f"level must be one of {[lv.value for lv in LogLevel]}",
                    )
                )
            if "format" in logging_data and str(logging_data["format"]).lower() not in {
                fmt.value for fmt in LogFormat
            }:
                errors.append(
                    ValidationIssue(
                        path="logging.format",
                        message=f"format must be one of {[fmt.value for fmt in LogFormat]}",
                    )
                )
            if "truncate_at" in logging_data and not _is_positive_int(logging_data["truncate_at"]):
                errors.append(
                    ValidationIssue(
                        path="logging.truncate_at",
                        message="truncate_at must be a positive integer",
                    )
                )

        fetch = data.get("fetch")
        if isinstance(fetch, dict):
            timeout = fetch.get("timeout_seconds")
            if timeout is not None and (
                isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
            ):
                errors.append(
                    ValidationIssue(
                        path="fetch.timeout_seconds",
                        message="timeout_seconds must be a positive number",
                    )
                )
            for key in ("github_branch", "github_raw_base"):
                if key in fetch and (not isinstance(fetch[key], str) or not fetch[key]):
                    errors.append(
                        ValidationIssue(
                            path=f"fetch.{key}",
                            message=f"{key} must be a non-empty string",
                        )
                    )

        execution = data.get("execution")
        if isinstance(execution, dict):
            if "shell" in execution and (
                not isinstance(execution["shell"], str) or not execution["shell"]
            ):
                errors.append(
                    ValidationIssue(
                        path="execution.shell",
                        message="shell must be a non-empty string",
                    )
                )
            if "dry_run" in execution and not isinstance(execution["dry_run"], bool):
                errors.append(
                    ValidationIssue(path="execution.dry_run", message="dry_run must be a boolean")
                )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def _resolve_config_path(self) -> Path | None:
        """Find a config file using the resolution order, or None."""
        env_path = os.environ.get("SCAFFOLD_CONFIG_PATH")
        if env_path:
            return Path(env_path)

        local_path = Path(".scaffold.yaml")
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".config" / "scaffold" / "config.yaml"
        if home_path.exists():
            return home_path

        return None

    def _apply_env_overrides(self, data: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``data`` with SCAFFOLD_* variables applied."""
        result = {k: dict(v) if isinstance(v, dict) else v for k, v in data.items()}

        for env_name, (section, key, converter) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                value = converter(raw)
            except ValueError as e:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"{env_name}={raw!r} is not a valid {converter.__name__}",
                ) from e
            target = result.get(section)
            if not isinstance(target, dict):
                target = {}
                result[section] = target
            target[key] = value

        return result

    def _dict_to_config(self, data: dict[str, Any]) -> ScaffoldConfig:
        """Convert a validated dictionary to ScaffoldConfig."""
        logging_data = dict(data.get("logging") or {})
        if "level" in logging_data:
            logging_data["level"] = _parse_level(logging_data["level"])
        if "format" in logging_data:
            logging_data["format"] = LogFormat(str(logging_data["format"]).lower())

        return ScaffoldConfig(
            logging=LoggingConfig(**_known(logging_data, "logging")),
            fetch=FetchConfig(**_known(data.get("fetch") or {}, "fetch")),
            execution=ExecutionConfig(**_known(data.get("execution") or {}, "execution")),
        )


def _known(section: dict[str, Any], name: str) -> dict[str, Any]:
    """Drop keys the dataclass does not define (already reported as warnings)."""
    return {k: v for k, v in section.items() if k in _SECTION_KEYS[name]}


def _parse_level(value: Any) -> LogLevel | None:
    """Parse a log level name; WARNING is accepted for WARN."""
    name = str(value).upper()
    if name == "WARNING":
        name = "WARN"
    try:
        return LogLevel(name)
    except ValueError:
        return None


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def load_config(path: str | Path | None = None) -> ScaffoldConfig:
    """Load configuration with a fresh ConfigLoader.

    Args:
        path: Optional explicit config file

    Returns:
        ScaffoldConfig
    """
    return ConfigLoader().load(path)
