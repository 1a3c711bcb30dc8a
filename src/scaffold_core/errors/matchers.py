"""Error matchers for converting exceptions to ScaffoldErrors."""

import subprocess

import httpx
import yaml

from .errors import ErrorMatcher, MatchResult


class CommandFailedMatcher(ErrorMatcher):
    """Matches shell commands that exited with a non-zero status."""

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, subprocess.CalledProcessError)

    def extract(self, error: BaseException) -> MatchResult:
        """Extract command and exit status.

        Args:
            error: CalledProcessError raised by the run action

        Returns:
            MatchResult with COMMAND_FAILED code
        """
        command = getattr(error, "cmd", "")
        if isinstance(command, (list, tuple)):
            # ["sh", "-c", "<cmd>"] - report what the template asked for
            command = command[-1]
        return MatchResult(
            code="COMMAND_FAILED",
            context={"command": command, "exit_code": getattr(error, "returncode", None)},
        )


class OSErrorMatcher(ErrorMatcher):
    """Matches filesystem and process-spawn failures."""

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, OSError)

    def extract(self, error: BaseException) -> MatchResult:
        """Extract OS error info.

        Args:
            error: OSError raised while touching the filesystem or spawning

        Returns:
            MatchResult with STEP_FAILED code
        """
        detail = getattr(error, "strerror", None) or str(error)
        filename = getattr(error, "filename", None)
        if filename is not None:
            detail = f"{detail}: '{filename}'"
        return MatchResult(code="STEP_FAILED", context={"detail": detail})


class YAMLErrorMatcher(ErrorMatcher):
    """Matches YAML syntax errors."""

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, yaml.YAMLError)

    def extract(self, error: BaseException) -> MatchResult:
        return MatchResult(code="DOCUMENT_INVALID", context={"detail": f"Invalid YAML: {error}"})


class HTTPErrorMatcher(ErrorMatcher):
    """Matches httpx transport, status and URL errors."""

    def matches(self, error: BaseException) -> bool:
        # InvalidURL is not an HTTPError subclass
        return isinstance(error, (httpx.HTTPError, httpx.InvalidURL))

    def extract(self, error: BaseException) -> MatchResult:
        """Extract HTTP error info.

        Args:
            error: httpx error raised while downloading a template

        Returns:
            MatchResult with RETRIEVAL_FAILED code
        """
        if isinstance(error, httpx.HTTPStatusError):
            detail = f"status {error.response.status_code}"
        else:
            detail = str(error) or type(error).__name__
        return MatchResult(code="RETRIEVAL_FAILED", context={"detail": detail})


class GenericErrorMatcher(ErrorMatcher):
    """Fallback matcher for any exception."""

    def matches(self, error: BaseException) -> bool:
        """Always matches."""
        return True

    def extract(self, error: BaseException) -> MatchResult:
        return MatchResult(
            code="INTERNAL_ERROR",
            context={"detail": str(error), "error_type": type(error).__name__},
        )


class ErrorMatcherChain:
    """Ordered chain of matchers. First match wins."""

    def __init__(self) -> None:
        """Initialize matcher chain with built-in matchers."""
        self.matchers: list[ErrorMatcher] = []
        self._load_builtin_matchers()

    def match(self, error: BaseException) -> MatchResult:
        """Find first matching matcher and extract result.

        Args:
            error: Exception to match

        Returns:
            MatchResult from first matching matcher
        """
        for matcher in self.matchers:
            if matcher.matches(error):
                return matcher.extract(error)

        # Should never reach here due to GenericErrorMatcher
        return MatchResult(
            code="INTERNAL_ERROR",
            context={"detail": str(error), "error_type": type(error).__name__},
        )

    def _load_builtin_matchers(self) -> None:
        """Load built-in matchers in priority order."""
        # CalledProcessError is not an OSError, but keep specific matchers first
        self.matchers = [
            CommandFailedMatcher(),
            OSErrorMatcher(),
            YAMLErrorMatcher(),
            HTTPErrorMatcher(),
            GenericErrorMatcher(),  # Fallback - must be last
        ]
