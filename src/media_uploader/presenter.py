"""Output formatting for interactive and script-friendly runs."""

import contextlib
from typing import ContextManager

from rich.console import Console
from rich.markup import escape

from media_uploader.models import OutputMode, UploadResult


class Presenter:
    """Writes results to stdout and errors to stderr.

    Links always go to stdout so the output can be piped. In non-interactive
    mode stdout carries nothing but one link per line.
    """

    def __init__(
        self,
        mode: OutputMode,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.mode = mode
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    @property
    def interactive(self) -> bool:
        return self.mode is OutputMode.INTERACTIVE

    def uploading(self, name: str) -> ContextManager[object]:
        """Transient status shown while an item is being uploaded."""
        if not self.interactive:
            return contextlib.nullcontext()
        return self.err_console.status(f"Uploading {escape(name)}...", spinner="dots")

    def link(self, result: UploadResult) -> None:
        if self.interactive:
            self.console.print(
                f"{escape(result.source)}: [bold cyan]{escape(result.link)}[/bold cyan]",
                soft_wrap=True,
            )
        else:
            self._plain(result.link)

    def album(self, result: UploadResult) -> None:
        if self.interactive:
            self.console.print(
                f"[bold]Album:[/bold] [bold cyan]{escape(result.link)}[/bold cyan]",
                soft_wrap=True,
            )
        else:
            self._plain(result.link)

    def error(self, source: str, message: str) -> None:
        if self.interactive:
            self.err_console.print(
                f"[red]{escape(source)}: {escape(message)}[/red]", soft_wrap=True
            )
        else:
            self.err_console.print(
                f"{source}: {message}", markup=False, highlight=False, soft_wrap=True
            )

    def notice(self, message: str) -> None:
        """Informational line, only shown to humans."""
        if self.interactive:
            self.err_console.print(f"[dim]{escape(message)}[/dim]", soft_wrap=True)

    def _plain(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)
