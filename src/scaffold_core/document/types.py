"""Template document data model types."""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WriteFile:
    """write_file action: render ``content`` into the file at ``path``."""

    path: str
    content: str = ""


@dataclass(frozen=True)
class RunCommand:
    """run action: execute ``cmd`` with a shell, in ``dir`` when given."""

    cmd: str
    dir: str = ""


@dataclass(frozen=True)
class Step:
    """One declarative step.

    Action fields are independently optional; every populated one runs, in
    the order mkdir, write_file, run.
    """

    mkdir: str = ""
    write_file: WriteFile | None = None
    run: RunCommand | None = None
    when: str = ""

    def template_fields(self) -> Iterator[tuple[str, str]]:
        """Yield ``(field, template)`` for every template-bearing field that is set."""
        if self.mkdir:
            yield "mkdir", self.mkdir
        if self.write_file is not None:
            yield "write_file.path", self.write_file.path
            yield "write_file.content", self.write_file.content
        if self.run is not None:
            yield "run.cmd", self.run.cmd
            if self.run.dir:
                yield "run.dir", self.run.dir
        if self.when:
            yield "when", self.when


@dataclass(frozen=True)
class Document:
    """Complete parsed template document."""

    variables: dict[str, str] = field(default_factory=dict)  # name -> unrendered template
    steps: tuple[Step, ...] = ()
    source: str | None = None  # Where the document was loaded from
