"""Command-line interface for the media uploader."""

import asyncio
import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler

from media_uploader import __version__
from media_uploader.api_client import DEFAULT_SERVER, MediaCrushAPIClient, RateLimitError
from media_uploader.models import OutputMode, UploaderConfig
from media_uploader.presenter import Presenter
from media_uploader.uploader import MediaUploader

app = typer.Typer(
    name="media-upload",
    help="Upload files and URLs to a MediaCrush server",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging with Rich handler on stderr.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=err_console)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"media-upload {__version__}", highlight=False)
        raise typer.Exit()


async def async_upload(sources: list[str], config: UploaderConfig, presenter: Presenter) -> int:
    """Async upload implementation.

    Args:
        sources: Files, directories and URLs to upload
        config: Run options
        presenter: Output formatter

    Returns:
        Exit code
    """
    async with MediaCrushAPIClient(config.server) as api_client:
        uploader = MediaUploader(api_client, presenter, config)
        try:
            report = await uploader.run(sources)
        except RateLimitError as e:
            presenter.error(config.server, f"{e}, aborting")
            return e.code

    logger.debug(
        f"Run finished: {len(report.results)} item(s), album={report.album is not None}"
    )
    return report.exit_code


@app.command()
def upload(
    sources: list[str] = typer.Argument(
        None,
        metavar="[FILES|URLS]...",
        help="Files, directories or URLs to upload",
        show_default=False,
    ),
    album: bool = typer.Option(
        False,
        "--album",
        "-a",
        help="Bundle all successful uploads into one album",
    ),
    open_links: bool = typer.Option(
        False,
        "--open",
        help="Open resulting link(s) in the default browser",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print would-be links without uploading",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Descend into directories",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        help="Force interactive (human) output",
    ),
    non_interactive: bool = typer.Option(
        False,
        "--non-interactive",
        help="Force machine (script-friendly) output",
    ),
    server: str = typer.Option(
        DEFAULT_SERVER,
        "--server",
        "-s",
        envvar="MEDIA_UPLOADER_SERVER",
        help="Base URL of the MediaCrush server (or set MEDIA_UPLOADER_SERVER env var)",
    ),
    copy: bool = typer.Option(
        False,
        "--copy",
        "-c",
        help="Copy the final resulting link to the clipboard",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Upload files and URLs to MediaCrush.

    Each resulting link is printed on its own line. Files already on the
    server are not uploaded again.
    """
    setup_logging(verbose)

    if not sources:
        err_console.print("[red]Error: no files or URLs given. See --help.[/red]")
        raise typer.Exit(1)

    try:
        output_mode = OutputMode.detect(sys.stdout, interactive, non_interactive)
        config = UploaderConfig(
            server=server,
            album=album,
            dry_run=dry_run,
            recursive=recursive,
            output_mode=output_mode,
            copy=copy,
            open_links=open_links,
        )
    except ValueError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    presenter = Presenter(output_mode, console=console, err_console=err_console)
    exit_code = asyncio.run(async_upload(sources, config, presenter))
    raise typer.Exit(exit_code)


def main() -> None:
    """Console script entry point; usage errors exit with status 1."""
    try:
        app()
    except SystemExit as e:
        # Usage errors exit with 2
        if e.code == 2:
            raise SystemExit(1) from None
        raise


if __name__ == "__main__":
    main()
