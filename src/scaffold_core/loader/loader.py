"""Template loader - fetches template document bytes."""

import re
from pathlib import Path
from typing import Any

import httpx

from scaffold_core.config import FetchConfig
from scaffold_core.errors import create_error, get_error_factory
from scaffold_core.types import SourceKind

from .types import SourceReference

# github.com/<owner>/<repo>/<path inside the repo>
GITHUB_SHORTHAND_PATTERN = re.compile(r"^github\.com/([^/]+)/([^/]+)/(.+)$")


class TemplateLoader:
    """Resolve a source reference and return its raw bytes.

    References are one of:
    - ``github.com/<owner>/<repo>/<path>``: raw file on the configured branch
    - ``http://...`` / ``https://...``: downloaded as-is
    - anything else: a local file path
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.Client | None = None,
        logger: Any = None,
    ):
        """Initialize template loader.

        Args:
            config: Fetch configuration (defaults to FetchConfig())
            client: Optional httpx client; one is created per fetch otherwise
            logger: Optional ScaffoldLogger instance
        """
        self._config = config or FetchConfig()
        self._client = client
        self._logger = logger

    def resolve(self, reference: str) -> SourceReference:
        """Classify a reference and compute where to read it from.

        Args:
            reference: Path, URL or GitHub shorthand

        Returns:
            SourceReference
        """
        match = GITHUB_SHORTHAND_PATTERN.match(reference)
        if match:
            owner, repo, path = match.groups()
            base = self._config.github_raw_base.rstrip("/")
            url = f"{base}/{owner}/{repo}/{self._config.github_branch}/{path}"
            return SourceReference(kind=SourceKind.GITHUB, location=url, reference=reference)

        if reference.startswith(("http://", "https://")):
            return SourceReference(kind=SourceKind.URL, location=reference, reference=reference)

        return SourceReference(kind=SourceKind.FILE, location=reference, reference=reference)

    def load(self, reference: str) -> bytes:
        """Fetch the raw bytes of a template document.

        Args:
            reference: Path, URL or GitHub shorthand

        Returns:
            Document bytes, undecoded

        Raises:
            ScaffoldError(RETRIEVAL_FAILED): If the source cannot be read
        """
        source = self.resolve(reference)

        if source.kind == SourceKind.GITHUB:
            self._log(f"Fetching GitHub template from {source.location}", source)
        elif source.kind == SourceKind.URL:
            self._log(f"Fetching template from {source.location}", source)
        else:
            self._log(f"Reading template file {source.location}", source)

        if source.is_remote:
            return self._fetch(source)
        return self._read(source)

    def _fetch(self, source: SourceReference) -> bytes:
        try:
            if self._client is not None:
                response = self._client.get(source.location)
            else:
                with httpx.Client(
                    timeout=self._config.timeout_seconds,
                    follow_redirects=self._config.follow_redirects,
                ) as client:
                    response = client.get(source.location)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise get_error_factory().from_exception(e, reference=source.reference) from e

        return response.content

    def _read(self, source: SourceReference) -> bytes:
        path = Path(source.location)
        if not path.is_file():
            raise create_error(
                "RETRIEVAL_FAILED",
                reference=source.reference,
                detail=f"No such file: '{path}'",
            )
        try:
            return path.read_bytes()
        except OSError as e:
            raise create_error(
                "RETRIEVAL_FAILED",
                reference=source.reference,
                detail=e.strerror or str(e),
            ) from e

    def _log(self, message: str, source: SourceReference) -> None:
        if self._logger:
            self._logger.loader_event(
                message, {"reference": source.reference, "kind": source.kind.value}
            )
