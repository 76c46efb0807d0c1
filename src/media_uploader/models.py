"""Data models for the media uploader."""

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

URL_PREFIXES = ("http://", "https://")


class ItemKind(enum.Enum):
    """What a command-line input resolves to."""

    FILE = "file"
    DIRECTORY = "directory"
    URL = "url"
    INVALID = "invalid"


class OutputMode(enum.Enum):
    """How results are presented to the user."""

    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non-interactive"

    @classmethod
    def detect(
        cls,
        stream: TextIO,
        force_interactive: bool = False,
        force_non_interactive: bool = False,
    ) -> "OutputMode":
        """Pick the output mode from explicit flags or the attached terminal.

        Args:
            stream: Output stream to inspect when no flag is given
            force_interactive: Always use interactive output
            force_non_interactive: Always use machine output

        Returns:
            The selected output mode

        Raises:
            ValueError: If both flags are set
        """
        if force_interactive and force_non_interactive:
            raise ValueError("--interactive and --non-interactive are mutually exclusive")
        if force_interactive:
            return cls.INTERACTIVE
        if force_non_interactive:
            return cls.NON_INTERACTIVE
        isatty = getattr(stream, "isatty", None)
        return cls.INTERACTIVE if isatty is not None and isatty() else cls.NON_INTERACTIVE


@dataclass(frozen=True)
class UploadItem:
    """A single input given on the command line (or found in a directory)."""

    source: str
    kind: ItemKind

    @classmethod
    def classify(cls, source: str) -> "UploadItem":
        path = Path(source)
        if path.is_dir():
            kind = ItemKind.DIRECTORY
        elif path.is_file():
            kind = ItemKind.FILE
        elif source.startswith(URL_PREFIXES):
            kind = ItemKind.URL
        else:
            kind = ItemKind.INVALID
        return cls(source=source, kind=kind)

    @property
    def path(self) -> Path:
        return Path(self.source)

    @property
    def display_name(self) -> str:
        """Short name used in status lines."""
        if self.kind is ItemKind.URL:
            return self.source
        return self.path.name or self.source


@dataclass(frozen=True)
class UploadResult:
    """A successfully processed item and the hash it ended up with."""

    source: str
    hash: str
    server: str

    def __post_init__(self) -> None:
        """Validate upload result."""
        if not self.hash:
            raise ValueError("Upload result must have a hash")

    @property
    def link(self) -> str:
        return f"{self.server}/{self.hash}"


@dataclass(frozen=True)
class UploaderConfig:
    """Run options, fixed once the command line has been parsed."""

    server: str
    album: bool = False
    dry_run: bool = False
    recursive: bool = False
    output_mode: OutputMode = OutputMode.NON_INTERACTIVE
    copy: bool = False
    open_links: bool = False

    def __post_init__(self) -> None:
        if not self.server:
            raise ValueError("Server address cannot be empty")
        # Links are built as "<server>/<hash>"
        object.__setattr__(self, "server", self.server.rstrip("/"))


@dataclass
class UploadReport:
    """Outcome of a whole run."""

    results: list[UploadResult] = field(default_factory=list)
    album: UploadResult | None = None
    exit_code: int = 0

    @property
    def hashes(self) -> list[str]:
        return [result.hash for result in self.results]
