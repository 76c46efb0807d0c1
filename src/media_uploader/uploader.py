"""Sequential upload orchestration."""

import logging
import webbrowser
from collections import deque
from pathlib import Path
from typing import Callable

import pyperclip

from media_uploader.api_client import (
    UNSUPPORTED_TYPE,
    MediaCrushAPIClient,
    MediaCrushAPIError,
    RateLimitError,
    UnsupportedTypeError,
    parse_response,
)
from media_uploader.models import (
    ItemKind,
    UploaderConfig,
    UploadItem,
    UploadReport,
    UploadResult,
)
from media_uploader.presenter import Presenter
from media_uploader.utils import file_hash, list_directory

logger = logging.getLogger(__name__)


class MediaUploader:
    """Uploads files, directories and URLs one after another."""

    def __init__(
        self,
        api_client: MediaCrushAPIClient,
        presenter: Presenter,
        config: UploaderConfig,
        open_url: Callable[[str], object] = webbrowser.open,
        copy_text: Callable[[str], object] = pyperclip.copy,
    ) -> None:
        """Initialize the uploader.

        Args:
            api_client: MediaCrush API client instance
            presenter: Where results and errors are reported
            config: Run options
            open_url: Opens a link in the browser
            copy_text: Puts text on the system clipboard
        """
        self.api_client = api_client
        self.presenter = presenter
        self.config = config
        self.open_url = open_url
        self.copy_text = copy_text
        self._unsupported_pending = False

    async def run(self, sources: list[str]) -> UploadReport:
        """Upload everything, then handle album, open and copy.

        Args:
            sources: Files, directories and URLs in command-line order

        Returns:
            Report of the run

        Raises:
            RateLimitError: If the service rate limits the client
        """
        self._unsupported_pending = False
        report = UploadReport()
        report.results = await self.upload_items(sources)

        if self.config.album:
            report.album = await self.create_album(report.results)

        if self.config.open_links and not self.config.dry_run:
            self._open(report)

        if self.config.copy:
            self._copy(report)

        if self._unsupported_pending:
            report.exit_code = UNSUPPORTED_TYPE
        return report

    async def upload_items(
        self, sources: list[str], results: list[UploadResult] | None = None
    ) -> list[UploadResult]:
        """Process inputs in order and collect the results.

        Directories are expanded in place when recursion is enabled, so their
        children are handled before the next command-line input.

        Args:
            sources: Inputs to process
            results: Results collected so far, appended to in order

        Returns:
            All results, including those passed in

        Raises:
            RateLimitError: If the service rate limits the client
        """
        results = [] if results is None else results
        pending = deque(sources)
        expanded: set[Path] = set()

        while pending:
            item = UploadItem.classify(pending.popleft())
            logger.debug(f"{item.source} classified as {item.kind.value}")

            if item.kind is ItemKind.INVALID:
                self.presenter.error(item.source, "No such file or directory")
                continue

            if item.kind is ItemKind.DIRECTORY:
                if not self.config.recursive:
                    self.presenter.error(item.source, "Omitting directory")
                    continue
                real_path = item.path.resolve()
                if real_path in expanded:
                    logger.debug(f"Skipping {item.source}, already expanded as {real_path}")
                    continue
                expanded.add(real_path)
                try:
                    children = list_directory(item.path)
                except OSError as e:
                    self.presenter.error(item.source, f"Cannot read directory: {e}")
                    continue
                pending.extendleft(reversed(children))
                continue

            result = await self._process(item)
            if result is not None:
                results.append(result)
                self._unsupported_pending = False
                self.presenter.link(result)

        return results

    async def create_album(self, results: list[UploadResult]) -> UploadResult | None:
        """Bundle the uploaded items into an album.

        Args:
            results: Uploaded items, in album order

        Returns:
            The album result, or None if no album was created

        Raises:
            RateLimitError: If the service rate limits the client
        """
        if self.config.dry_run:
            self.presenter.error("album", "Album link not available in dry-run mode")
            return None

        if not results:
            self.presenter.error("album", "Nothing was uploaded, no album created")
            return None

        hashes = [result.hash for result in results]
        try:
            with self.presenter.uploading("album"):
                body = await self.api_client.create_album(hashes)
            album_hash = parse_response(body)
        except RateLimitError:
            raise
        except MediaCrushAPIError as e:
            logger.debug(f"Album creation failed: {e}")
            self.presenter.error("album", str(e))
            return None

        album = UploadResult(source="album", hash=album_hash, server=self.config.server)
        logger.info(f"Created album {album_hash} with {len(hashes)} item(s)")
        self.presenter.album(album)
        return album

    async def _process(self, item: UploadItem) -> UploadResult | None:
        """Upload a single file or URL, reporting any per-item error."""
        try:
            if item.kind is ItemKind.URL:
                return await self._process_url(item)
            return await self._process_file(item)
        except RateLimitError:
            raise
        except UnsupportedTypeError as e:
            self._unsupported_pending = True
            self.presenter.error(item.source, str(e))
        except MediaCrushAPIError as e:
            self.presenter.error(item.source, str(e))
        except OSError as e:
            self.presenter.error(item.source, f"Cannot read file: {e.strerror or e}")
        return None

    async def _process_file(self, item: UploadItem) -> UploadResult | None:
        local_hash = file_hash(item.path)

        if self.config.dry_run:
            return self._result(item, local_hash)

        with self.presenter.uploading(item.display_name):
            if await self.api_client.check_exists(local_hash):
                logger.info(f"{item.source} already uploaded as {local_hash}")
                return self._result(item, local_hash)

            body = await self.api_client.upload_file(item.path)

        remote_hash = parse_response(body)
        logger.info(f"Uploaded {item.source} as {remote_hash}")
        return self._result(item, remote_hash)

    async def _process_url(self, item: UploadItem) -> UploadResult | None:
        if self.config.dry_run:
            self.presenter.error(item.source, "URLs are not supported in dry-run mode")
            return None

        with self.presenter.uploading(item.display_name):
            body = await self.api_client.upload_url(item.source)

        remote_hash = parse_response(body)
        logger.info(f"Uploaded {item.source} as {remote_hash}")
        return self._result(item, remote_hash)

    def _result(self, item: UploadItem, item_hash: str) -> UploadResult:
        return UploadResult(source=item.source, hash=item_hash, server=self.config.server)

    def _open(self, report: UploadReport) -> None:
        if report.album is not None:
            links = [report.album.link]
        elif self.config.album:
            # Album was requested but could not be created
            links = []
        else:
            links = [result.link for result in report.results]

        for link in links:
            logger.debug(f"Opening {link}")
            self.open_url(link)

    def _copy(self, report: UploadReport) -> None:
        target = report.album or (report.results[-1] if report.results else None)
        if target is None:
            self.presenter.error("copy", "Nothing to copy")
            return

        try:
            self.copy_text(target.link)
        except pyperclip.PyperclipException as e:
            self.presenter.error("copy", f"Could not copy to the clipboard: {e}")
            return
        self.presenter.notice(f"Copied {target.link} to the clipboard")
