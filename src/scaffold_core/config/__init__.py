"""Scaffold configuration - Config loading and management."""

from .loader import ConfigLoader, load_config, resolve_env_vars
from .models import ExecutionConfig, FetchConfig, LoggingConfig, ScaffoldConfig

__all__ = [
    # Config models
    "ScaffoldConfig",
    "LoggingConfig",
    "FetchConfig",
    "ExecutionConfig",
    # Loader
    "ConfigLoader",
    "load_config",
    "resolve_env_vars",
]
