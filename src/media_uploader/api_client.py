"""MediaCrush API client using httpx for async HTTP calls."""

import json
import logging
import mimetypes
import re
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "https://mediacru.sh"

# Error codes with a meaning of their own
UNSUPPORTED_TYPE = 415
RATE_LIMITED = 420

_HASH_RE = re.compile(r'"hash"\s*:\s*"([^"]+)"')
_ERROR_RE = re.compile(r'"error"\s*:\s*(-?\d+)')


class MediaCrushAPIError(Exception):
    """Base exception for MediaCrush API errors."""

    pass


class UnsupportedTypeError(MediaCrushAPIError):
    """Exception raised when the service rejects a file type (415)."""

    def __init__(self, message: str = "Unsupported file type") -> None:
        super().__init__(message)
        self.code = UNSUPPORTED_TYPE


class RateLimitError(MediaCrushAPIError):
    """Exception raised when the service rate limits the client (420)."""

    def __init__(self, message: str = "Rate limited, try again later") -> None:
        super().__init__(message)
        self.code = RATE_LIMITED


class UnknownServiceError(MediaCrushAPIError):
    """Exception raised for any other error reported by the service."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ServerUnreachableError(MediaCrushAPIError):
    """Exception raised when the server cannot be reached."""

    def __init__(self, url: str, reason: str = "") -> None:
        message = f"Could not reach server at {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url


def _extract_fields(body: str) -> tuple[str | None, int | None]:
    """Pull the ``hash`` and ``error`` fields out of a response body."""
    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        hash_value = data.get("hash")
        error = data.get("error")
        if isinstance(hash_value, str) and hash_value:
            return hash_value, None
        if isinstance(error, int) and not isinstance(error, bool):
            return None, error
        return None, None

    # Not JSON, fall back to looking for the fields in the text
    hash_match = _HASH_RE.search(body)
    if hash_match:
        return hash_match.group(1), None
    error_match = _ERROR_RE.search(body)
    if error_match:
        return None, int(error_match.group(1))
    return None, None


def _raise_for_error(error: int) -> None:
    if error == UNSUPPORTED_TYPE:
        raise UnsupportedTypeError()
    if error == RATE_LIMITED:
        raise RateLimitError()
    raise UnknownServiceError(f"Server returned error {error}", code=error)


def parse_response(body: str) -> str:
    """Extract the resulting hash from a service response.

    Args:
        body: Raw response text

    Returns:
        The hash assigned by the service

    Raises:
        UnsupportedTypeError: If the service answered with error 415
        RateLimitError: If the service answered with error 420
        UnknownServiceError: For any other error code, or a body with neither
            a hash nor an error code
    """
    hash_value, error = _extract_fields(body)
    if hash_value is not None:
        return hash_value
    if error is not None:
        _raise_for_error(error)

    raise UnknownServiceError(f"Unknown error: {body.strip()[:200]}")


class MediaCrushAPIClient:
    """Client for the MediaCrush upload API using httpx."""

    def __init__(self, server: str = DEFAULT_SERVER, timeout: float = 30.0) -> None:
        """Initialize the API client.

        Args:
            server: Base address of the service (e.g., "https://mediacru.sh")
            timeout: Timeout in seconds applied to every request
        """
        self.server = server.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        """Get the base URL for API requests."""
        return f"{self.server}/api"

    async def __aenter__(self) -> "MediaCrushAPIClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the httpx AsyncClient instance.

        Raises:
            RuntimeError: If client is used outside of async context manager
        """
        if self._client is None:
            raise RuntimeError("Client must be used within async context manager")
        return self._client

    async def check_exists(self, file_hash: str) -> bool:
        """Ask the server whether content with this hash is already stored.

        Args:
            file_hash: Short content hash of the file

        Returns:
            True if the server already has the content

        Raises:
            ServerUnreachableError: If the server cannot be reached
            RateLimitError: If the service answered with error 420
            MediaCrushAPIError: For any other error code other than 404
        """
        url = f"{self.base_url}/{file_hash}/exists"
        response = await self._request("GET", url)

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and "exists" in data:
            exists = bool(data["exists"])
        else:
            _, error = _extract_fields(response.text)
            # 404 is how the service says the hash is unknown
            if error is not None and error != 404:
                _raise_for_error(error)
            if response.status_code >= 500:
                raise ServerUnreachableError(url, f"HTTP {response.status_code}")
            exists = False

        logger.debug(f"{file_hash} exists on server: {exists}")
        return exists

    async def upload_file(self, path: Path) -> str:
        """Upload a local file.

        Args:
            path: Path to the file

        Returns:
            Raw response body

        Raises:
            ServerUnreachableError: If the server cannot be reached
            FileNotFoundError: If the file doesn't exist
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        mime_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        files = {"file": (path.name, path.read_bytes(), mime_type)}
        return await self._post(f"{self.base_url}/upload/file", files)

    async def upload_url(self, source_url: str) -> str:
        """Ask the server to fetch and store a remote URL.

        Args:
            source_url: Remote address of the media

        Returns:
            Raw response body

        Raises:
            ServerUnreachableError: If the server cannot be reached
        """
        return await self._post(f"{self.base_url}/upload/url", {"url": (None, source_url)})

    async def create_album(self, hashes: list[str]) -> str:
        """Create an album from already uploaded items.

        Args:
            hashes: Item hashes, in album order

        Returns:
            Raw response body

        Raises:
            ServerUnreachableError: If the server cannot be reached
        """
        item_list = ",".join(hashes)
        return await self._post(f"{self.base_url}/album/create", {"list": (None, item_list)})

    async def _post(self, url: str, files: dict[str, Any]) -> str:
        """POST a multipart form and return the body text.

        A 5xx answer that carries neither a hash nor an error code is treated
        as the server being unavailable.
        """
        response = await self._request("POST", url, files=files)
        body = response.text

        if response.status_code >= 500 and _extract_fields(body) == (None, None):
            raise ServerUnreachableError(url, f"HTTP {response.status_code}")
        return body

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.debug(f"Network error on {method} {url}: {e}")
            raise ServerUnreachableError(url, str(e) or type(e).__name__) from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response
