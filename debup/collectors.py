"""
Upstream release information and archive downloads.

Only the Go release channel is queried over the network; every other
manager reports its own pending updates.
"""

import logging
import re
import shutil
import urllib.request
from pathlib import Path

logger = logging.getLogger(__name__)

USER_AGENT = "debup/1.0"

GO_VERSION_RE = re.compile(r"go([0-9.]+)")


class CollectionError(Exception):
    """Raised when upstream information cannot be collected."""
    pass


class NetworkError(CollectionError):
    """Raised when network requests fail."""
    pass


class ParseError(CollectionError):
    """Raised when response parsing fails."""
    pass


def http_get(url: str, timeout: float | None = None, headers: dict[str, str] | None = None) -> bytes:
    """Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds, None waits forever
        headers: Optional HTTP headers

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If request fails
    """
    try:
        req_headers = {"User-Agent": USER_AGENT}
        if headers:
            req_headers.update(headers)

        req = urllib.request.Request(url, headers=req_headers)
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return response.read()
    except Exception as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def parse_go_version(text: str) -> str:
    """Extract the version from a ``go1.23.2`` style string.

    Raises:
        ParseError: If no go version is present
    """
    match = GO_VERSION_RE.search(text)
    if not match:
        raise ParseError(f"No Go version found in: {text[:80]!r}")
    return match.group(1)


def collect_go_latest(url: str, timeout: float | None = None) -> str:
    """Latest published Go version, e.g. ``1.23.2``.

    The endpoint answers with the release tag on its first line followed by
    the release timestamp. A failed fetch or unparsable answer yields the
    empty string.
    """
    try:
        body = http_get(url, timeout=timeout).decode("utf-8", errors="replace")
        version = parse_go_version(body.splitlines()[0] if body else "")
        logger.debug(f"Latest Go release: {version}")
        return version
    except CollectionError as e:
        logger.debug(f"Go release lookup failed: {e}")
        return ""


def download_file(url: str, dest: str, timeout: float | None = None) -> Path:
    """Stream a URL to a local file, replacing it if present.

    Raises:
        NetworkError: If the download fails
    """
    dest_path = Path(dest)
    logger.debug(f"Downloading {url} -> {dest_path}")
    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as response, open(dest_path, "wb") as out:
            shutil.copyfileobj(response, out)
    except Exception as e:
        raise NetworkError(f"Failed to download {url}: {e}") from e
    return dest_path
