"""
Archive download with a primary and a secondary transport.

The primary transport streams the file with ``requests`` and retries with
exponential backoff. When it gives up, the external ``curl`` binary is tried
once as a secondary transport (proxies and TLS stores sometimes only work
for one of the two). Both failing raises DownloadError.
"""

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from codeckit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 64


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        mb_downloaded = self.bytes_downloaded / 1024 / 1024
        if self.total_bytes > 0:
            mb_total = self.total_bytes / 1024 / 1024
            return f"{mb_downloaded:.1f}/{mb_total:.1f} MB ({self.percentage:.1f}%)"
        return f"{mb_downloaded:.1f} MB"


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download a file over HTTP(S) with retries.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If every attempt failed
        ValueError: If URL is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _stream_to_file(url, destination, progress_callback, timeout)
        except (RequestException, OSError) as e:
            destination.unlink(missing_ok=True)
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError("Download failed for unknown reason")


def _stream_to_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> Path:
    logger.info(f"Downloading from {url}")

    with requests.get(
        url, stream=True, timeout=timeout, allow_redirects=True
    ) as response:
        response.raise_for_status()

        total_size = int(response.headers.get("content-length") or 0)
        downloaded = 0
        last_report = 0.0

        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                # At most twice a second
                now = time.time()
                if progress_callback and (
                    now - last_report >= 0.5 or downloaded == total_size
                ):
                    progress_callback(DownloadProgress(downloaded, total_size))
                    last_report = now

    logger.info(f"Download complete: {destination}")
    return destination


def download_with_curl(url: str, destination: Path) -> Path:
    """
    Download a file with the external curl binary.

    Args:
        url: URL to download from
        destination: Local path to save file

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If curl is missing or exits nonzero
    """
    curl = shutil.which("curl")
    if not curl:
        raise DownloadError("curl not found in PATH")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading with curl from {url}")
    result = subprocess.run(
        [curl, "-fL", "--retry", "2", "-o", str(destination), url],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        destination.unlink(missing_ok=True)
        raise DownloadError(
            f"curl exited with status {result.returncode}: {result.stderr.strip()}"
        )

    return destination


def fetch(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """
    Download using the primary transport, falling back to curl.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for primary-transport progress

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If both transports failed
    """
    try:
        return download_file(url, destination, progress_callback=progress_callback)
    except DownloadError as primary:
        logger.warning(f"Primary download failed ({primary}), trying curl")
        try:
            return download_with_curl(url, destination)
        except DownloadError as secondary:
            raise DownloadError(
                f"Failed to download {url}: requests: {primary}; curl: {secondary}"
            ) from secondary
