"""
Pytest configuration and shared fixtures for scaffold tests.
"""

import io
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from scaffold_core.config import ExecutionConfig, ScaffoldConfig  # noqa: E402
from scaffold_core.logging import LogConfig, ScaffoldLogger  # noqa: E402
from scaffold_core.template import RenderContext, TemplateEngine  # noqa: E402
from scaffold_core.types import LogLevel  # noqa: E402

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config and SCAFFOLD_* overrides out of every test."""
    for name in (
        "SCAFFOLD_CONFIG_PATH",
        "SCAFFOLD_LOG_LEVEL",
        "SCAFFOLD_LOG_FORMAT",
        "SCAFFOLD_HTTP_TIMEOUT",
        "SCAFFOLD_GITHUB_BRANCH",
        "SCAFFOLD_SHELL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine() -> TemplateEngine:
    """Create TemplateEngine instance."""
    return TemplateEngine()


@pytest.fixture
def make_context() -> Callable[..., RenderContext]:
    """Factory for RenderContext instances."""

    def _make(*arguments: str, **variables: str) -> RenderContext:
        return RenderContext(arguments=arguments, variables=dict(variables))

    return _make


@pytest.fixture
def progress_stream() -> io.StringIO:
    """Captured progress output."""
    return io.StringIO()


@pytest.fixture
def log_stream() -> io.StringIO:
    """Captured diagnostic log output."""
    return io.StringIO()


@pytest.fixture
def logger(progress_stream: io.StringIO, log_stream: io.StringIO) -> ScaffoldLogger:
    """Logger writing progress and debug logs to in-memory streams."""
    return ScaffoldLogger(
        LogConfig(level=LogLevel.DEBUG, output=log_stream, progress=progress_stream)
    )


@pytest.fixture
def config() -> ScaffoldConfig:
    """Default configuration."""
    return ScaffoldConfig()


@pytest.fixture
def dry_run_config() -> ScaffoldConfig:
    """Configuration with dry-run enabled."""
    return ScaffoldConfig(execution=ExecutionConfig(dry_run=True))


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a template document and return its path."""

    def _write(content: str, name: str = "template.yaml") -> Path:
        path = tmp_path / "templates" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line("markers", "cli: CLI tests")
