"""Template source reference types."""

from dataclasses import dataclass

from scaffold_core.types import SourceKind


@dataclass(frozen=True)
class SourceReference:
    """A resolved template reference.

    ``location`` is a filesystem path for FILE and a full URL for URL and
    GITHUB (the GitHub shorthand already expanded to its raw-content URL).
    """

    kind: SourceKind
    location: str
    reference: str  # As given by the caller

    @property
    def is_remote(self) -> bool:
        return self.kind != SourceKind.FILE
